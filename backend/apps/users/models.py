from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    User with tenant membership and a tenant-level role.
    Platform operators have no tenant and are superusers.
    """
    class Role(models.TextChoices):
        ADMIN = 'admin', 'Admin'
        OWNER = 'owner', 'Owner'
        MANAGER = 'manager', 'Manager'
        STAFF = 'staff', 'Staff'

    tenant = models.ForeignKey(
        'tenants.Tenant',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='users'
    )
    branch = models.ForeignKey(
        'tenants.Branch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users'
    )
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STAFF)
    manager = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reports'
    )
    phone = models.CharField(max_length=20, blank=True)

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['tenant', 'role'], name='users_tenant_role_idx'),
        ]

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username

    def is_tenant_admin(self) -> bool:
        return self.is_superuser or self.role in (self.Role.ADMIN, self.Role.OWNER)

    def team_ids(self):
        """Primary keys of the user and everyone reporting to them."""
        return [self.pk, *self.reports.values_list('pk', flat=True)]

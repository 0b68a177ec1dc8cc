"""Tenant resolution shared by the middleware and the API views."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.conf import settings

ADMIN_ROLES = ("admin", "owner")
MANAGER_ROLES = ("admin", "owner", "manager")


@dataclass(frozen=True)
class TenantContext:
    tenant: object
    user: object = None
    branch_id: Optional[int] = None

    @property
    def tenant_id(self):
        return self.tenant.pk

    @property
    def user_id(self):
        return getattr(self.user, "pk", None)

    @property
    def user_role(self) -> str:
        return getattr(self.user, "role", "") or ""

    def has_role(self, *roles: str) -> bool:
        return self.user_role in roles

    def is_admin(self) -> bool:
        return bool(getattr(self.user, "is_superuser", False)) or self.has_role(*ADMIN_ROLES)

    def can_manage(self) -> bool:
        return self.is_admin() or self.has_role(*MANAGER_ROLES)


def _requested_tenant_id(request):
    # Priority: Header > Session
    raw = request.META.get(settings.TENANT_HEADER)
    if not raw:
        session = getattr(request, "session", None)
        raw = session.get("active_tenant_id") if session is not None else None
    try:
        return int(raw) if raw else None
    except (TypeError, ValueError):
        return None


def resolve_tenant(request, user):
    """Return the tenant the user may act on for this request, or None."""
    from apps.tenants.models import Tenant

    if user is None or not user.is_authenticated:
        return None
    tenant_id = _requested_tenant_id(request)
    if tenant_id and (user.is_superuser or tenant_id == user.tenant_id):
        tenant = Tenant.objects.filter(pk=tenant_id, status=Tenant.Status.ACTIVE).first()
        if tenant is not None:
            return tenant
    if user.tenant_id:
        return Tenant.objects.filter(pk=user.tenant_id, status=Tenant.Status.ACTIVE).first()
    return None


def build_context(request, user) -> Optional[TenantContext]:
    tenant = resolve_tenant(request, user)
    if tenant is None:
        return None
    return TenantContext(tenant=tenant, user=user, branch_id=getattr(user, "branch_id", None))


def get_tenant_context(request) -> Optional[TenantContext]:
    """
    Context for the authenticated user of a DRF or plain Django request.

    JWT authentication happens inside the view, after the middleware ran,
    so the context is rebuilt when the middleware saw a different user.
    """
    http_request = getattr(request, "_request", request)
    context = getattr(http_request, "tenant_context", None)
    user = getattr(request, "user", None)
    if context is not None and context.user_id == getattr(user, "pk", None):
        return context
    context = build_context(http_request, user)
    http_request.tenant_context = context
    http_request.tenant = context.tenant if context else None
    return context

from __future__ import annotations

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.permissions import BasePermission, IsAuthenticated

from .tenancy import get_tenant_context


class NoActiveTenant(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "No active tenant for this user."
    default_code = "no_active_tenant"


class IsTenantAdmin(BasePermission):
    message = "Only tenant admins and owners can perform this action."

    def has_permission(self, request, view):
        context = get_tenant_context(request)
        return bool(context and context.is_admin())


class TenantScopedMixin:
    """Resolves the active tenant for API views and rejects requests without one."""

    permission_classes = [IsAuthenticated]

    def get_tenant_context(self):
        context = get_tenant_context(self.request)
        if context is None:
            raise NoActiveTenant()
        return context

    def get_tenant(self):
        return self.get_tenant_context().tenant

    def get_queryset(self):  # type: ignore[override]
        qs = super().get_queryset()
        return qs.filter(tenant=self.get_tenant())

    def get_serializer_context(self):  # type: ignore[override]
        ctx = super().get_serializer_context()
        ctx.setdefault("request", self.request)
        ctx["tenant"] = self.get_tenant()
        return ctx

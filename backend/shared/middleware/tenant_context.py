from django.utils.deprecation import MiddlewareMixin

from shared.tenancy import build_context


class TenantContextMiddleware(MiddlewareMixin):
    """
    Injects the active tenant into session-authenticated requests.

    The tenant comes from the ``X-Tenant-ID`` header, then the session,
    then the user's own tenant. Users outside the requested tenant fall
    back to their own tenant unless they are superusers.
    """
    def process_request(self, request):
        request.tenant = None
        request.tenant_context = None

        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return

        context = build_context(request, user)
        if context is None:
            return
        request.tenant = context.tenant
        request.tenant_context = context
        request.session['active_tenant_id'] = str(context.tenant_id)

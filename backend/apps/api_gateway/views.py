from django.http import JsonResponse
from django.urls import reverse


def api_root(request):
    base = request.build_absolute_uri('/')[:-1]
    def url(p):
        return f"{base}{p}"

    return JsonResponse(
        {
            "message": "Tenant CRM API",
            "version": "v1",
            "docs": url(reverse('swagger-ui')),
            "schema": url(reverse('schema')),
            "endpoints": {
                "auth": url('/api/v1/auth/'),
                "users": url('/api/v1/users/'),
                "modules": url('/api/v1/modules/'),
                "metadata": url('/api/v1/metadata/'),
                "conversions": url('/api/v1/conversions/'),
                "gst": url('/api/v1/gst/'),
                "procurement": url('/api/v1/procurement/'),
                "audit": url('/api/v1/audit/'),
            },
        }
    )

from django.urls import path, include

from shared.views import HealthCheckView

urlpatterns = [
    path('auth/', include('apps.authentication.urls')),
    path('users/', include('apps.users.urls')),
    path('audit/', include('apps.audit.urls')),
    path('metadata/', include('apps.metadata.urls')),
    path('modules/', include('apps.metadata.module_urls')),
    path('modules/', include('apps.records.urls')),
    path('conversions/', include('apps.sales.conversion_urls')),
    path('conversions/', include('apps.procurement.conversion_urls')),
    path('gst/', include('apps.sales.gst_urls')),
    path('procurement/', include('apps.procurement.urls')),
    path('health/', HealthCheckView.as_view(), name='api-health'),
]

from django.urls import path

from .views import ChangePasswordView, CurrentUserProfileView, TenantUserListCreateView, TenantUserStatusView

urlpatterns = [
    path('', TenantUserListCreateView.as_view(), name='tenant-users'),
    path('me/', CurrentUserProfileView.as_view(), name='user-profile'),
    path('change-password/', ChangePasswordView.as_view(), name='change-password'),
    path('<int:user_id>/status/', TenantUserStatusView.as_view(), name='tenant-user-status'),
]

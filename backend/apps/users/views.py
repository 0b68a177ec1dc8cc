from django.contrib.auth import get_user_model
from rest_framework import filters, generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.utils import log_audit_event
from shared.permissions import IsTenantAdmin, TenantScopedMixin
from .serializers import UserCreateSerializer, UserSerializer, UserStatusSerializer

User = get_user_model()


class CurrentUserProfileView(generics.RetrieveUpdateAPIView):
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user


class ChangePasswordView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        user = request.user
        old_password = request.data.get('old_password')
        new_password = request.data.get('new_password')

        if not user.check_password(old_password):
            return Response({'old_password': ['Wrong password.']}, status=status.HTTP_400_BAD_REQUEST)
        if not new_password or len(new_password) < 8:
            return Response({'new_password': ['Password must be at least 8 characters.']}, status=status.HTTP_400_BAD_REQUEST)

        user.set_password(new_password)
        user.save(update_fields=['password'])
        return Response({'status': 'password set'})


class TenantUserListCreateView(TenantScopedMixin, generics.ListCreateAPIView):
    queryset = User.objects.all().order_by('username')
    filter_backends = [filters.SearchFilter]
    search_fields = ['username', 'first_name', 'last_name', 'email']

    def get_permissions(self):
        if self.request.method == 'POST':
            return [permissions.IsAuthenticated(), IsTenantAdmin()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return UserCreateSerializer
        return UserSerializer

    def perform_create(self, serializer):
        user = serializer.save()
        log_audit_event(
            tenant=self.get_tenant(),
            user=self.request.user,
            action='create_user',
            entity='Users',
            entity_id=user.pk,
            metadata={'username': user.username, 'role': user.role},
            request=self.request,
        )


class TenantUserStatusView(TenantScopedMixin, APIView):
    permission_classes = [permissions.IsAuthenticated, IsTenantAdmin]

    def patch(self, request, user_id: int):
        tenant = self.get_tenant()
        user = User.objects.filter(pk=user_id, tenant=tenant).first()
        if user is None:
            return Response({'detail': 'Not found'}, status=status.HTTP_404_NOT_FOUND)
        if user.pk == request.user.pk:
            return Response({'detail': 'You cannot change your own status.'}, status=status.HTTP_400_BAD_REQUEST)
        serializer = UserStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        before = {'is_active': user.is_active}
        user.is_active = serializer.validated_data['is_active']
        user.save(update_fields=['is_active'])
        log_audit_event(
            tenant=tenant,
            user=request.user,
            action='update_user_status',
            entity='Users',
            entity_id=user.pk,
            changes={'is_active': {'before': before['is_active'], 'after': user.is_active}},
            request=request,
        )
        return Response(UserSerializer(user).data)

from django.contrib.auth import get_user_model
from rest_framework import exceptions, serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class TenantTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Issues JWT pairs carrying the user's tenant and role.
    Accepts ``username``, ``email`` or ``login`` as the identifier.
    """
    username_field = get_user_model().USERNAME_FIELD

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields[self.username_field].required = False
        self.fields['email'] = serializers.CharField(required=False, write_only=True)
        self.fields['login'] = serializers.CharField(required=False, write_only=True)

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['tenant_id'] = user.tenant_id
        token['role'] = user.role
        token['branch_id'] = user.branch_id
        return token

    def validate(self, attrs):
        User = get_user_model()
        login_value = attrs.pop('login', None) or attrs.pop('email', None) or attrs.get(self.username_field)
        if not login_value:
            raise serializers.ValidationError("Must provide 'username', 'email', or 'login'.")

        if "@" in str(login_value):
            user = User.objects.filter(email__iexact=login_value).first()
            if user:
                login_value = getattr(user, self.username_field)
        attrs[self.username_field] = login_value

        data = super().validate(attrs)
        tenant = self.user.tenant
        if tenant is not None and not tenant.is_active:
            raise exceptions.AuthenticationFailed("Tenant is suspended.", code="tenant_suspended")
        data['tenant_id'] = self.user.tenant_id
        data['role'] = self.user.role
        return data

from rest_framework import serializers
from django.contrib.auth import get_user_model

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    tenant_name = serializers.CharField(source='tenant.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = (
            'id',
            'username',
            'email',
            'first_name',
            'last_name',
            'phone',
            'role',
            'tenant',
            'tenant_name',
            'branch',
            'manager',
            'is_active',
            'date_joined',
            'last_login',
        )
        read_only_fields = ('username', 'role', 'tenant', 'date_joined', 'last_login', 'is_active')


class UserCreateSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'password', 'first_name', 'last_name', 'phone', 'role', 'branch', 'manager')

    def validate_role(self, value):
        request = self.context.get('request')
        if value == User.Role.OWNER and request and request.user.role != User.Role.OWNER and not request.user.is_superuser:
            raise serializers.ValidationError("Only an owner can create another owner.")
        return value

    def create(self, validated_data):
        tenant = self.context['tenant']
        password = validated_data.pop('password')
        return User.objects.create_user(tenant=tenant, password=password, **validated_data)


class UserStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()

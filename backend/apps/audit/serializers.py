from rest_framework import serializers

from .models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source="user.username", read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "timestamp",
            "user",
            "username",
            "action",
            "entity",
            "entity_id",
            "description",
            "changes",
            "metadata",
            "ip_address",
        ]
        read_only_fields = fields


class AuditLogQuerySerializer(serializers.Serializer):
    entity = serializers.CharField(required=False)
    entityId = serializers.CharField(required=False)
    userId = serializers.IntegerField(required=False)
    action = serializers.CharField(required=False)
    startDate = serializers.DateTimeField(required=False)
    endDate = serializers.DateTimeField(required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=1000, default=100)

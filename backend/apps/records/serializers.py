import json

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import FilterPreset, RecordActivity, RecordNote, RecordTask


class RecordListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
    searchFields = serializers.CharField(required=False, allow_blank=True)
    filters = serializers.CharField(required=False, allow_blank=True)
    sortBy = serializers.CharField(required=False, allow_blank=True)
    sortOrder = serializers.ChoiceField(choices=["asc", "desc"], required=False, default="desc")
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    pageSize = serializers.IntegerField(required=False, min_value=1)

    def validate_filters(self, value):
        if not value:
            return []
        try:
            parsed = json.loads(value)
        except ValueError as exc:
            raise serializers.ValidationError("filters must be a JSON array") from exc
        if isinstance(parsed, dict):
            parsed = [parsed]
        if not isinstance(parsed, list) or not all(isinstance(item, dict) for item in parsed):
            raise serializers.ValidationError("filters must be a JSON array of objects")
        return parsed

    def validate_searchFields(self, value):
        return [field.strip() for field in (value or "").split(",") if field.strip()]


class RecordNoteSerializer(serializers.ModelSerializer):
    recordId = serializers.CharField(source="record_id", read_only=True)
    isPinned = serializers.BooleanField(source="is_pinned", required=False, default=False)
    createdBy = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = RecordNote
        fields = ["id", "recordId", "content", "isPinned", "mentions", "createdBy", "createdAt"]

    def get_createdBy(self, obj):
        if obj.created_by_id is None:
            return None
        return {"id": obj.created_by_id, "name": obj.created_by.display_name}

    def validate_content(self, value):
        if not value.strip():
            raise serializers.ValidationError("Note content cannot be empty")
        return value

    def validate_mentions(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("mentions must be a list of user ids")
        return value


def _user_ref(user):
    if user is None:
        return None
    return {"id": user.pk, "name": user.display_name}


class RecordActivitySerializer(serializers.ModelSerializer):
    type = serializers.ChoiceField(
        source="activity_type", choices=RecordActivity.ActivityType.choices, required=False
    )
    recordId = serializers.CharField(source="record_id", read_only=True)
    createdBy = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = RecordActivity
        fields = ["id", "recordId", "type", "title", "description", "metadata", "createdBy", "createdAt"]

    def to_internal_value(self, data):
        # activityType is accepted as an alias of type
        if "type" not in data and "activityType" in data:
            data = data.copy()
            data["type"] = data["activityType"]
        return super().to_internal_value(data)

    def get_createdBy(self, obj):
        return _user_ref(obj.created_by)

    def validate_metadata(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("metadata must be an object")
        return value


class RecordTaskSerializer(serializers.ModelSerializer):
    recordId = serializers.CharField(source="record_id", read_only=True)
    taskType = serializers.CharField(source="task_type", required=False)
    dueDate = serializers.DateField(source="due_date", required=False, allow_null=True)
    dueTime = serializers.CharField(source="due_time", required=False, allow_blank=True)
    assignedTo = serializers.PrimaryKeyRelatedField(
        source="assigned_to", queryset=get_user_model().objects.all(), required=False, allow_null=True
    )
    completedAt = serializers.DateTimeField(source="completed_at", read_only=True)
    createdBy = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = RecordTask
        fields = [
            "id", "recordId", "title", "description", "taskType", "dueDate", "dueTime",
            "priority", "status", "assignedTo", "completedAt", "createdBy", "createdAt",
        ]

    def get_fields(self):
        fields = super().get_fields()
        tenant = self.context.get("tenant")
        if tenant is not None:
            fields["assignedTo"].queryset = get_user_model().objects.filter(tenant=tenant)
        return fields

    def get_createdBy(self, obj):
        return _user_ref(obj.created_by)


class TaskQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=RecordTask.Status.choices, required=False)
    assignedTo = serializers.IntegerField(required=False, min_value=1)


class FilterPresetSerializer(serializers.ModelSerializer):
    isPublic = serializers.BooleanField(source="is_public", required=False, default=False)
    userId = serializers.IntegerField(source="created_by_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = FilterPreset
        fields = ["id", "name", "filters", "isPublic", "userId", "createdAt"]
        extra_kwargs = {"filters": {"required": True}}

    def validate_filters(self, value):
        if isinstance(value, dict):
            value = [value]
        if not value or not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
            raise serializers.ValidationError("filters must be a non-empty list of filter objects")
        for item in value:
            if not item.get("field") or not item.get("operator"):
                raise serializers.ValidationError("Each filter needs a field and an operator")
        return value

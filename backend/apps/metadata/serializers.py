from rest_framework import serializers

from .models import AutoNumberSequence, MetadataLibraryItem, ModuleConfiguration


class ModuleConfigurationSerializer(serializers.ModelSerializer):
    moduleName = serializers.CharField(source="module_name", read_only=True)
    displayName = serializers.CharField(source="display_name", read_only=True)
    workflowCategory = serializers.CharField(source="workflow_category", read_only=True)
    showInNav = serializers.BooleanField(source="show_in_nav", read_only=True)
    isCustomModule = serializers.BooleanField(source="is_custom_module", read_only=True)
    moduleSettings = serializers.JSONField(source="module_settings", read_only=True)
    approvedAt = serializers.DateTimeField(source="approved_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = ModuleConfiguration
        fields = [
            "id",
            "moduleName",
            "displayName",
            "icon",
            "description",
            "workflowCategory",
            "position",
            "showInNav",
            "isCustomModule",
            "fields",
            "layouts",
            "validations",
            "moduleSettings",
            "status",
            "version",
            "approvedAt",
            "updatedAt",
        ]
        read_only_fields = fields


class ModuleSummarySerializer(serializers.ModelSerializer):
    moduleName = serializers.CharField(source="module_name")
    displayName = serializers.CharField(source="display_name")
    workflowCategory = serializers.CharField(source="workflow_category")
    showInNav = serializers.BooleanField(source="show_in_nav")

    class Meta:
        model = ModuleConfiguration
        fields = ["id", "moduleName", "displayName", "icon", "workflowCategory", "position", "showInNav", "version"]


class MetadataLibraryItemSerializer(serializers.ModelSerializer):
    isSystem = serializers.BooleanField(source="is_system", read_only=True)

    class Meta:
        model = MetadataLibraryItem
        fields = ["id", "category", "name", "label", "description", "config", "isSystem", "status"]


class ModuleSettingsSerializer(serializers.Serializer):
    settings = serializers.DictField()


class SequenceResetSerializer(serializers.Serializer):
    start = serializers.IntegerField(min_value=1, default=1)


class AutoNumberSequenceSerializer(serializers.ModelSerializer):
    moduleName = serializers.CharField(source="module_name")
    nextNumber = serializers.IntegerField(source="next_number")
    preview = serializers.SerializerMethodField()

    class Meta:
        model = AutoNumberSequence
        fields = ["moduleName", "prefix", "format", "padding", "nextNumber", "preview"]

    def get_preview(self, obj) -> str:
        from .services.numbering import preview_next_number

        return preview_next_number(obj)

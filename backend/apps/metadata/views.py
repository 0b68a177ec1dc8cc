from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from shared.permissions import IsTenantAdmin, TenantScopedMixin
from .models import MetadataLibraryItem, ModuleConfiguration
from .serializers import (
    AutoNumberSequenceSerializer,
    MetadataLibraryItemSerializer,
    ModuleConfigurationSerializer,
    ModuleSettingsSerializer,
    ModuleSummarySerializer,
    SequenceResetSerializer,
)
from .services import (
    ModuleConfigError,
    activate_module_config,
    get_active_module_config,
    get_all_modules,
    get_module_settings,
    save_module_config,
    update_module_settings,
)
from .services.numbering import SequenceError, initialize_sequence, reset_sequence


class MetadataLibraryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        items = MetadataLibraryItem.objects.filter(status="active")
        category = request.query_params.get("category")
        if category:
            items = items.filter(category=category)
        return Response(MetadataLibraryItemSerializer(items, many=True).data)


class ModuleListView(TenantScopedMixin, APIView):
    def get(self, request):
        modules = get_all_modules(self.get_tenant())
        return Response(ModuleSummarySerializer(modules, many=True).data)


class ModuleConfigView(TenantScopedMixin, APIView):
    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsTenantAdmin()]
        return super().get_permissions()

    def get(self, request, module_name: str):
        config = get_active_module_config(self.get_tenant(), module_name)
        if config is None:
            return Response({"detail": f"Module {module_name} not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(ModuleConfigurationSerializer(config).data)

    def post(self, request, module_name: str):
        payload = {**request.data, "moduleName": module_name}
        try:
            config = save_module_config(self.get_tenant(), payload, user=request.user)
        except ModuleConfigError as exc:
            return Response({"detail": str(exc), "errors": exc.errors}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ModuleConfigurationSerializer(config).data, status=status.HTTP_201_CREATED)


class ModuleConfigActivateView(TenantScopedMixin, APIView):
    permission_classes = [IsAuthenticated, IsTenantAdmin]

    def post(self, request, module_name: str, config_id: int):
        config = get_object_or_404(
            ModuleConfiguration, pk=config_id, tenant=self.get_tenant(), module_name=module_name
        )
        try:
            config = activate_module_config(config, user=request.user)
        except ModuleConfigError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(ModuleConfigurationSerializer(config).data)


class ModuleSettingsView(TenantScopedMixin, APIView):
    def get(self, request, module_name: str):
        return Response({"moduleName": module_name, "settings": get_module_settings(self.get_tenant(), module_name)})

    def put(self, request, module_name: str):
        serializer = ModuleSettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            merged = update_module_settings(
                self.get_tenant(), module_name, serializer.validated_data["settings"], user=request.user
            )
        except ModuleConfigError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"moduleName": module_name, "settings": merged})


class ModuleSequenceView(TenantScopedMixin, APIView):
    def get(self, request, module_name: str):
        sequence = initialize_sequence(self.get_tenant(), module_name)
        return Response(AutoNumberSequenceSerializer(sequence).data)


class ModuleSequenceResetView(TenantScopedMixin, APIView):
    permission_classes = [IsAuthenticated, IsTenantAdmin]

    def post(self, request, module_name: str):
        serializer = SequenceResetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            sequence = reset_sequence(self.get_tenant(), module_name, serializer.validated_data["start"])
        except SequenceError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(AutoNumberSequenceSerializer(sequence).data)

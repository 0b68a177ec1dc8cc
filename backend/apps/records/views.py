from __future__ import annotations

import logging

from django.conf import settings
from django.db.models import Q
from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.metadata.services import get_active_module_config, get_module_fields
from shared.permissions import TenantScopedMixin
from .exceptions import DuplicateRecordError, RecordNotFound
from .models import FilterPreset, RecordActivity, RecordNote, RecordTask
from .serializers import (
    FilterPresetSerializer,
    RecordActivitySerializer,
    RecordListQuerySerializer,
    RecordNoteSerializer,
    RecordTaskSerializer,
    TaskQuerySerializer,
)
from .services.export import export_records_xlsx
from .services.pipeline import submit_record, submit_update
from .services.record_service import DynamicRecordService

logger = logging.getLogger(__name__)


def service_error_response(exc: ValueError) -> Response:
    if isinstance(exc, RecordNotFound):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, DuplicateRecordError):
        return Response({"detail": str(exc), "duplicates": exc.duplicates}, status=status.HTTP_409_CONFLICT)
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


def record_payload(request) -> dict:
    data = request.data
    if isinstance(data, dict) and set(data.keys()) == {"data"} and isinstance(data["data"], dict):
        return dict(data["data"])
    return dict(data)


def record_not_found(module_name: str, record_id) -> Response:
    return Response({"detail": f"{module_name} record {record_id} not found"}, status=status.HTTP_404_NOT_FOUND)


class VisibleRecordMixin(TenantScopedMixin):
    """Looks up the addressed record, hiding ones outside the user's visibility rule."""

    def get_visible_record(self, module_name: str, record_id):
        return DynamicRecordService.get_visible_record(self.get_tenant(), module_name, record_id, self.request.user)


class RecordListCreateView(TenantScopedMixin, APIView):
    def get(self, request, module_name: str):
        query = RecordListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        result = DynamicRecordService.get_records_with_filters(
            self.get_tenant(),
            module_name,
            filters=params.get("filters") or [],
            search=params.get("search") or None,
            search_fields=params.get("searchFields") or [],
            sort_by=params.get("sortBy") or None,
            sort_order=params["sortOrder"],
            page=params["page"],
            page_size=params.get("pageSize") or settings.RECORDS_DEFAULT_PAGE_SIZE,
            user=request.user,
        )
        return Response(result)

    def post(self, request, module_name: str):
        try:
            record = submit_record(self.get_tenant(), module_name, record_payload(request), user=request.user)
        except ValueError as exc:
            return service_error_response(exc)
        return Response({"record": record}, status=status.HTTP_201_CREATED)


class RecordDetailView(VisibleRecordMixin, APIView):
    def get(self, request, module_name: str, record_id: str):
        record = self.get_visible_record(module_name, record_id)
        if record is None:
            return record_not_found(module_name, record_id)
        return Response({"record": record})

    def put(self, request, module_name: str, record_id: str):
        if self.get_visible_record(module_name, record_id) is None:
            return record_not_found(module_name, record_id)
        try:
            record = submit_update(self.get_tenant(), module_name, record_id, record_payload(request), user=request.user)
        except ValueError as exc:
            return service_error_response(exc)
        return Response({"record": record})

    def patch(self, request, module_name: str, record_id: str):
        return self.put(request, module_name, record_id)

    def delete(self, request, module_name: str, record_id: str):
        if self.get_visible_record(module_name, record_id) is None:
            return record_not_found(module_name, record_id)
        try:
            DynamicRecordService.delete_record(self.get_tenant(), module_name, record_id, user=request.user)
        except ValueError as exc:
            return service_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class RecordNoteListCreateView(VisibleRecordMixin, APIView):
    def _notes(self, module_name: str, record_id: str):
        return RecordNote.objects.filter(
            tenant=self.get_tenant(), module_name=module_name, record_id=str(record_id)
        ).select_related("created_by")

    def get(self, request, module_name: str, record_id: str):
        notes = self._notes(module_name, record_id).order_by("-is_pinned", "-created_at")
        return Response({"notes": RecordNoteSerializer(notes, many=True).data})

    def post(self, request, module_name: str, record_id: str):
        record = self.get_visible_record(module_name, record_id)
        if record is None:
            return record_not_found(module_name, record_id)
        serializer = RecordNoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        note = serializer.save(tenant=self.get_tenant(), module_name=module_name, record_id=record["id"], created_by=request.user)
        return Response({"note": RecordNoteSerializer(note).data}, status=status.HTTP_201_CREATED)


class RecordActivityListCreateView(VisibleRecordMixin, APIView):
    def get(self, request, module_name: str, record_id: str):
        record = self.get_visible_record(module_name, record_id)
        if record is None:
            return record_not_found(module_name, record_id)
        activities = RecordActivity.objects.for_tenant(self.get_tenant()).filter(
            module_name=module_name, record_id=record["id"]
        ).select_related("created_by")
        return Response({"activities": RecordActivitySerializer(activities, many=True).data})

    def post(self, request, module_name: str, record_id: str):
        record = self.get_visible_record(module_name, record_id)
        if record is None:
            return record_not_found(module_name, record_id)
        serializer = RecordActivitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        activity = serializer.save(
            tenant=self.get_tenant(), module_name=module_name, record_id=record["id"], created_by=request.user
        )
        logger.info(f"Logged {activity.activity_type} activity on {module_name} {record['id']}")
        return Response({"activity": RecordActivitySerializer(activity).data}, status=status.HTTP_201_CREATED)


class RecordTaskListCreateView(VisibleRecordMixin, APIView):
    def get(self, request, module_name: str, record_id: str):
        record = self.get_visible_record(module_name, record_id)
        if record is None:
            return record_not_found(module_name, record_id)
        query = TaskQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        tasks = RecordTask.objects.for_tenant(self.get_tenant()).filter(
            module_name=module_name, record_id=record["id"]
        ).select_related("created_by")
        if query.validated_data.get("status"):
            tasks = tasks.filter(status=query.validated_data["status"])
        if query.validated_data.get("assignedTo"):
            tasks = tasks.filter(assigned_to_id=query.validated_data["assignedTo"])
        return Response({"tasks": RecordTaskSerializer(tasks, many=True).data})

    def post(self, request, module_name: str, record_id: str):
        record = self.get_visible_record(module_name, record_id)
        if record is None:
            return record_not_found(module_name, record_id)
        tenant = self.get_tenant()
        serializer = RecordTaskSerializer(data=request.data, context={"tenant": tenant})
        serializer.is_valid(raise_exception=True)
        extra = {}
        if "assigned_to" not in serializer.validated_data:
            extra["assigned_to"] = request.user
        if serializer.validated_data.get("status") == RecordTask.Status.COMPLETED:
            extra["completed_at"] = timezone.now()
        task = serializer.save(
            tenant=tenant, module_name=module_name, record_id=record["id"], created_by=request.user, **extra
        )
        return Response({"task": RecordTaskSerializer(task).data}, status=status.HTTP_201_CREATED)


class FilterPresetListCreateView(TenantScopedMixin, APIView):
    """Saved filters of an active module: the user's own plus every public one."""

    def get(self, request, module_name: str):
        tenant = self.get_tenant()
        if get_active_module_config(tenant, module_name) is None:
            return Response({"detail": f"Module {module_name} not found"}, status=status.HTTP_404_NOT_FOUND)
        presets = FilterPreset.objects.for_tenant(tenant).filter(module_name=module_name).filter(
            Q(created_by=request.user) | Q(is_public=True)
        )
        return Response({"presets": FilterPresetSerializer(presets, many=True).data})

    def post(self, request, module_name: str):
        tenant = self.get_tenant()
        if get_active_module_config(tenant, module_name) is None:
            return Response({"detail": f"Module {module_name} not found"}, status=status.HTTP_404_NOT_FOUND)
        serializer = FilterPresetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        preset = serializer.save(tenant=tenant, module_name=module_name, created_by=request.user)
        return Response({"success": True, "preset": FilterPresetSerializer(preset).data}, status=status.HTTP_201_CREATED)


class FilterPresetDetailView(TenantScopedMixin, APIView):
    def delete(self, request, module_name: str, preset_id: int):
        deleted, _ = FilterPreset.objects.for_tenant(self.get_tenant()).filter(
            pk=preset_id, module_name=module_name, created_by=request.user
        ).delete()
        if not deleted:
            return Response({"detail": "Preset not found or not yours"}, status=status.HTTP_404_NOT_FOUND)
        return Response({"success": True})


class RecordExportView(TenantScopedMixin, APIView):
    def get(self, request, module_name: str):
        tenant = self.get_tenant()
        records = DynamicRecordService.get_records(tenant, module_name)
        records = DynamicRecordService.apply_visibility(tenant, module_name, records, request.user)
        content = export_records_xlsx(module_name, records, get_module_fields(tenant, module_name))
        filename = f"{module_name}-{timezone.localdate():%Y%m%d}.xlsx"
        response = HttpResponse(
            content,
            content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response


class RecordPdfView(VisibleRecordMixin, APIView):
    def get(self, request, module_name: str, record_id: str):
        from apps.sales.services.pdf_export import DOCUMENTS, render_document_pdf

        if module_name not in DOCUMENTS:
            return Response({"detail": f"PDF export is not available for {module_name}"}, status=status.HTTP_400_BAD_REQUEST)
        tenant = self.get_tenant()
        record = self.get_visible_record(module_name, record_id)
        if record is None:
            return record_not_found(module_name, record_id)
        client = DynamicRecordService.get_record(tenant, "Clients", record["clientId"]) if record.get("clientId") else None
        business = {
            "name": tenant.name,
            "gstin": tenant.gstin or settings.BUSINESS_GSTIN,
            "address": (tenant.settings or {}).get("address", ""),
        }
        content = render_document_pdf(record, module_name, business=business, client=client)
        number = record.get("quotationNumber") or record.get("invoiceNumber") or record["id"]
        response = HttpResponse(content, content_type="application/pdf")
        response["Content-Disposition"] = f'attachment; filename="{str(number).replace("/", "-")}.pdf"'
        return response

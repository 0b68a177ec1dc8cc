from rest_framework.response import Response
from rest_framework.views import APIView

from shared.permissions import TenantScopedMixin
from .serializers import AuditLogQuerySerializer, AuditLogSerializer
from .utils import get_audit_logs


class AuditLogListView(TenantScopedMixin, APIView):
    def get(self, request):
        context = self.get_tenant_context()
        query = AuditLogQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        user_id = params.get("userId")
        if not context.can_manage():
            # Staff only see their own trail
            user_id = request.user.pk
        logs = get_audit_logs(
            context.tenant,
            entity=params.get("entity"),
            entity_id=params.get("entityId"),
            user_id=user_id,
            action=params.get("action"),
            start_date=params.get("startDate"),
            end_date=params.get("endDate"),
            limit=params["limit"],
        )
        return Response({"logs": AuditLogSerializer(logs, many=True).data})

from __future__ import annotations

import platform
from typing import Dict

from django.conf import settings
from django.db import DatabaseError, connection
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

STARTED_AT = timezone.now()


class HealthCheckView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        database = self._database_status()
        now = timezone.now()
        payload = {
            "status": "ok" if database["ok"] else "degraded",
            "uptime_seconds": int((now - STARTED_AT).total_seconds()),
            "timestamp": now.isoformat(),
            "application": {
                "debug": settings.DEBUG,
                "python": platform.python_version(),
            },
            "database": database,
        }
        http_status = status.HTTP_200_OK if database["ok"] else status.HTTP_503_SERVICE_UNAVAILABLE
        return Response(payload, status=http_status)

    def _database_status(self) -> Dict:
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except DatabaseError as exc:
            return {"ok": False, "vendor": connection.vendor, "error": str(exc)}
        return {"ok": True, "vendor": connection.vendor}

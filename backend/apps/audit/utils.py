from __future__ import annotations

import datetime
from typing import Any, Dict, Optional

from .models import AuditLog


def create_change_diff(before: Optional[Dict[str, Any]], after: Optional[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Return ``{key: {"before": x, "after": y}}`` for every key whose value differs."""
    before = before or {}
    after = after or {}
    diff = {}
    for key in {*before.keys(), *after.keys()}:
        old, new = before.get(key), after.get(key)
        if old != new:
            diff[key] = {"before": old, "after": new}
    return diff


def _client_ip(request) -> Optional[str]:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def log_audit_event(
    *,
    tenant,
    user,
    action: str,
    entity: str,
    entity_id,
    changes: Optional[Dict[str, Any]] = None,
    metadata: Optional[Dict[str, Any]] = None,
    description: str = "",
    request=None,
) -> AuditLog:
    """Persist an audit log entry while handling optional context gracefully."""
    ip_address = None
    user_agent = ""
    if request is not None:
        ip_address = _client_ip(request)
        user_agent = request.META.get("HTTP_USER_AGENT", "")[:512]
    if user is not None and not getattr(user, "is_authenticated", False):
        user = None
    return AuditLog.objects.create(
        tenant=tenant,
        user=user,
        action=action,
        entity=entity,
        entity_id=str(entity_id),
        description=description,
        changes=changes or None,
        metadata=metadata,
        ip_address=ip_address,
        user_agent=user_agent,
    )


def get_audit_logs(
    tenant,
    *,
    entity: Optional[str] = None,
    entity_id=None,
    user_id=None,
    action: Optional[str] = None,
    start_date: Optional[datetime.datetime] = None,
    end_date: Optional[datetime.datetime] = None,
    limit: int = 100,
):
    qs = AuditLog.objects.filter(tenant=tenant).select_related("user")
    if entity:
        qs = qs.filter(entity=entity)
    if entity_id:
        qs = qs.filter(entity_id=str(entity_id))
    if user_id:
        qs = qs.filter(user_id=user_id)
    if action:
        qs = qs.filter(action=action)
    if start_date:
        qs = qs.filter(timestamp__gte=start_date)
    if end_date:
        qs = qs.filter(timestamp__lte=end_date)
    return qs.order_by("-timestamp", "-id")[:limit]

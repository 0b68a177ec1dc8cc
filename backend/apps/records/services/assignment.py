"""Record owner assignment and role-based visibility."""
from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from django.contrib.auth import get_user_model

from shared.tenancy import ADMIN_ROLES

logger = logging.getLogger(__name__)

RULES = ("manual", "round_robin", "load_based")


def _owner_id(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def assignment_candidates(tenant) -> List[int]:
    User = get_user_model()
    return list(
        User.objects.filter(tenant=tenant, is_active=True, role=User.Role.STAFF)
        .order_by("pk")
        .values_list("pk", flat=True)
    )


def pick_round_robin(records: List[Dict[str, Any]], candidates: List[int]) -> Optional[int]:
    """Next candidate after the owner of the most recent assigned record (records newest first)."""
    if not candidates:
        return None
    for record in records:
        owner = _owner_id(record.get("assignedTo"))
        if owner in candidates:
            return candidates[(candidates.index(owner) + 1) % len(candidates)]
    return candidates[0]


def pick_least_loaded(records: Iterable[Dict[str, Any]], candidates: List[int]) -> Optional[int]:
    if not candidates:
        return None
    load = Counter(_owner_id(record.get("assignedTo")) for record in records)
    return min(candidates, key=lambda pk: (load.get(pk, 0), pk))


def assign_owner(tenant, module_name: str, data: Dict[str, Any], settings: Dict[str, Any]) -> Dict[str, Any]:
    """Fill ``assignedTo`` from the module's assignment rule when it is not already set."""
    from .record_service import DynamicRecordService

    config = (settings or {}).get("assignment") or {}
    if not config.get("enabled") or data.get("assignedTo") not in (None, ""):
        return data
    rule = config.get("defaultRule") or "manual"
    if rule == "manual":
        return data
    if rule not in RULES:
        logger.warning(f"Unknown assignment rule {rule!r} for {module_name}")
        return data

    candidates = assignment_candidates(tenant)
    records = DynamicRecordService.get_records(tenant, module_name)
    if rule == "round_robin":
        owner = pick_round_robin(records, candidates)
    else:
        owner = pick_least_loaded(records, candidates)
    if owner is None:
        return data
    return {**data, "assignedTo": owner}


def visible_records(records: Iterable[Dict[str, Any]], user, rules: Dict[str, str]) -> List[Dict[str, Any]]:
    """Filter records by the visibility rule configured for the user's role."""
    records = list(records)
    if user is None or getattr(user, "is_superuser", False) or getattr(user, "role", "") in ADMIN_ROLES:
        return records
    rule = (rules or {}).get(getattr(user, "role", ""), "all")
    if rule == "assigned_only":
        allowed = {user.pk}
    elif rule == "team_and_own":
        allowed = set(user.team_ids())
    else:
        return records
    return [record for record in records if _owner_id(record.get("assignedTo")) in allowed]

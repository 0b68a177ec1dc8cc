from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from ..exceptions import DuplicateRecordError

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _normalise(value: Any, criteria: str) -> str:
    text = str(value).strip().lower()
    if criteria == "fuzzy":
        return _NON_ALNUM.sub("", text)
    return text


def values_match(left: Any, right: Any, criteria: str = "exact") -> bool:
    if left in (None, "") or right in (None, ""):
        return False
    a, b = _normalise(left, criteria), _normalise(right, criteria)
    if not a or not b:
        return False
    if criteria == "partial":
        return a in b or b in a
    return a == b


def find_duplicates(tenant, module_name: str, data: Dict[str, Any], settings: Dict[str, Any], exclude_id=None) -> List[Dict[str, Any]]:
    """Return ``{recordId, field, value}`` for every existing record matching one of the check fields."""
    from .record_service import DynamicRecordService

    config = (settings or {}).get("duplicateCheck") or {}
    if not config.get("enabled"):
        return []
    fields = [field for field in config.get("checkFields") or [] if data.get(field) not in (None, "")]
    if not fields:
        return []
    criteria = config.get("matchCriteria") or "exact"

    duplicates = []
    for record in DynamicRecordService.get_records(tenant, module_name):
        if exclude_id is not None and record["id"] == str(exclude_id):
            continue
        for field in fields:
            if values_match(data[field], record.get(field), criteria):
                duplicates.append({"recordId": record["id"], "field": field, "value": record.get(field)})
    return duplicates


def check_duplicates(tenant, module_name: str, data: Dict[str, Any], settings: Dict[str, Any], exclude_id=None) -> List[Dict[str, Any]]:
    """Raise ``DuplicateRecordError`` when the module blocks duplicates, otherwise return them as a warning."""
    duplicates = find_duplicates(tenant, module_name, data, settings, exclude_id=exclude_id)
    if not duplicates:
        return []
    action = ((settings or {}).get("duplicateCheck") or {}).get("action") or "warn"
    if action == "block":
        fields = ", ".join(sorted({item["field"] for item in duplicates}))
        raise DuplicateRecordError(duplicates, f"Duplicate {module_name} record found on {fields}")
    logger.info(f"{len(duplicates)} possible duplicates for new {module_name} record in tenant {tenant.pk}")
    return duplicates

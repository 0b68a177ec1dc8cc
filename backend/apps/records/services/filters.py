"""
In-memory search, filtering, sorting and pagination over flattened records.

Records from typed tables and from ``DynamicRecord`` are flattened to the
same dict shape before reaching this module, so both behave identically.
"""
from __future__ import annotations

import datetime
import math
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from django.utils.dateparse import parse_date, parse_datetime

Record = Dict[str, Any]

OPERATORS = (
    "equals",
    "notEquals",
    "contains",
    "notContains",
    "startsWith",
    "endsWith",
    "greaterThan",
    "greaterThanOrEqual",
    "lessThan",
    "lessThanOrEqual",
    "between",
    "in",
    "notIn",
    "isNull",
    "isNotNull",
    "isEmpty",
    "isNotEmpty",
    "dateBefore",
    "dateAfter",
    "dateBetween",
)


def to_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError:
        return None


def to_date(value: Any) -> Optional[datetime.date]:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if not value:
        return None
    text = str(value)
    try:
        parsed = parse_datetime(text.replace("Z", "+00:00"))
        if parsed is not None:
            return parsed.date()
        return parse_date(text[:10])
    except ValueError:
        return None


def _text(value: Any) -> str:
    return "" if value is None else str(value).lower()


def _same(left: Any, right: Any) -> bool:
    left_num, right_num = to_number(left), to_number(right)
    if left_num is not None and right_num is not None:
        return left_num == right_num
    if isinstance(left, bool) or isinstance(right, bool):
        return _text(left) == _text(right)
    return _text(left).strip() == _text(right).strip()


def _compare(left: Any, right: Any) -> Optional[int]:
    """-1/0/1 comparing numbers numerically and everything else as text; None when left is missing."""
    if left is None or left == "":
        return None
    left_num, right_num = to_number(left), to_number(right)
    if left_num is not None and right_num is not None:
        a, b = left_num, right_num
    else:
        a, b = _text(left), _text(right)
    return (a > b) - (a < b)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict, tuple)):
        return len(value) == 0
    return False


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",")]
    return [value]


def matches(record: Record, condition: Dict[str, Any]) -> bool:
    field = condition.get("field")
    operator = condition.get("operator") or "equals"
    expected = condition.get("value")
    actual = record.get(field) if field else None

    if operator == "equals":
        return _same(actual, expected)
    if operator == "notEquals":
        return not _same(actual, expected)
    if operator == "contains":
        return _text(expected) in _text(actual)
    if operator == "notContains":
        return _text(expected) not in _text(actual)
    if operator == "startsWith":
        return _text(actual).startswith(_text(expected))
    if operator == "endsWith":
        return _text(actual).endswith(_text(expected))
    if operator in ("greaterThan", "greaterThanOrEqual", "lessThan", "lessThanOrEqual"):
        result = _compare(actual, expected)
        if result is None:
            return False
        return {
            "greaterThan": result > 0,
            "greaterThanOrEqual": result >= 0,
            "lessThan": result < 0,
            "lessThanOrEqual": result <= 0,
        }[operator]
    if operator == "between":
        low, high = _compare(actual, expected), _compare(actual, condition.get("value2"))
        return low is not None and high is not None and low >= 0 and high <= 0
    if operator == "in":
        return any(_same(actual, option) for option in _as_list(expected))
    if operator == "notIn":
        return not any(_same(actual, option) for option in _as_list(expected))
    if operator == "isNull":
        return actual is None
    if operator == "isNotNull":
        return actual is not None
    if operator == "isEmpty":
        return _is_empty(actual)
    if operator == "isNotEmpty":
        return not _is_empty(actual)
    if operator in ("dateBefore", "dateAfter", "dateBetween"):
        when = to_date(actual)
        start = to_date(expected)
        if when is None or start is None:
            return False
        if operator == "dateBefore":
            return when < start
        if operator == "dateAfter":
            return when > start
        end = to_date(condition.get("value2"))
        return end is not None and start <= when <= end
    # Unknown operators do not filter anything out
    return True


def apply_filters(records: Iterable[Record], filters: Sequence[Dict[str, Any]] = ()) -> List[Record]:
    conditions = [condition for condition in filters or () if condition and condition.get("field")]
    return [record for record in records if all(matches(record, condition) for condition in conditions)]


def search_records(records: Iterable[Record], term: Optional[str], fields: Sequence[str]) -> List[Record]:
    """Case-insensitive substring match of ``term`` against any of ``fields``."""
    records = list(records)
    needle = (term or "").strip().lower()
    if not needle:
        return records
    return [
        record
        for record in records
        if any(needle in _text(record.get(field)) for field in fields)
    ]


def _sort_key(value: Any):
    number = to_number(value)
    if number is not None:
        return (0, number, "")
    return (1, 0, _text(value))


def sort_records(records: Iterable[Record], sort_by: Optional[str], sort_order: str = "desc") -> List[Record]:
    """Sort on one key. Records missing the key keep their order after the others."""
    records = list(records)
    if not sort_by:
        return records
    present = [record for record in records if not _is_empty(record.get(sort_by))]
    missing = [record for record in records if _is_empty(record.get(sort_by))]
    present.sort(key=lambda record: _sort_key(record.get(sort_by)), reverse=(sort_order or "desc").lower() == "desc")
    return present + missing


def paginate(records: Sequence[Record], page: int = 1, page_size: int = 50) -> Dict[str, Any]:
    page = max(int(page or 1), 1)
    page_size = max(int(page_size or 1), 1)
    total = len(records)
    start = (page - 1) * page_size
    return {
        "data": list(records[start:start + page_size]),
        "pagination": {
            "page": page,
            "pageSize": page_size,
            "total": total,
            "totalPages": math.ceil(total / page_size),
        },
    }

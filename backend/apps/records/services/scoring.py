"""Weighted-sum lead scoring."""
from __future__ import annotations

from typing import Any, Dict

from .filters import to_number


def calculate_score(data: Dict[str, Any], criteria) -> int:
    score = 0
    for criterion in criteria or []:
        value = data.get(criterion.get("field"))
        if value in (None, ""):
            continue
        weights = criterion.get("weights")
        if weights:
            key = str(value)
            score += to_number(weights.get(key, weights.get(key.lower(), 0))) or 0
            continue
        number = to_number(value)
        if number is None:
            continue
        for band in criterion.get("ranges") or []:
            if number >= (to_number(band.get("min")) or 0):
                score += to_number(band.get("score")) or 0
                break
    return int(score)


def _threshold(thresholds: Dict[str, Any], key: str) -> float:
    value = to_number(thresholds.get(key))
    return float("inf") if value is None else value


def priority_for(score: int, thresholds: Dict[str, Any]) -> str:
    if score >= _threshold(thresholds, "hot"):
        return "Hot"
    if score >= _threshold(thresholds, "warm"):
        return "Warm"
    return "Cold"


def apply_scoring(data: Dict[str, Any], settings: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``data`` with ``leadScore`` and ``priority`` set when scoring is enabled."""
    scoring = (settings or {}).get("scoring") or {}
    if not scoring.get("enabled"):
        return data
    score = calculate_score(data, scoring.get("criteria"))
    return {**data, "leadScore": score, "priority": priority_for(score, scoring.get("thresholds") or {})}

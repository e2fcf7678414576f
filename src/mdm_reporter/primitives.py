"""Reusable coercion primitives shared across extraction and reporting."""

from typing import Any


def safe_list(value: Any) -> list[Any]:
    if isinstance(value, str):
        return []
    try:
        return list(value or [])
    except (TypeError, ValueError):
        return []


def optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def int_or_text(value: Any) -> int | str | None:
    """Return *value* as an int when it parses as one, else the stripped text."""
    if value is None:
        return None
    parsed = optional_int(value)
    if parsed is not None:
        return parsed
    text = str(value).strip()
    return text or None


def clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def canonical_severity(value: Any) -> str:
    sev = str(value or "INFO").upper()
    if sev in ("CRITICAL", "HIGH", "SEVERE", "FAILED"):
        return "CRITICAL"
    if sev in ("WARNING", "WARN", "MEDIUM", "MODERATE"):
        return "WARNING"
    return "INFO"


def normalize_detail(detail: Any) -> dict[str, Any]:
    if isinstance(detail, dict):
        return detail
    if detail is None:
        return {}
    return {"value": detail}


def build_alert(
    severity: str,
    category: str,
    message: str,
    detail: Any = None,
    affected_items: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    out: dict[str, Any] = {
        "severity": severity,
        "category": category,
        "message": message,
        "detail": normalize_detail(detail),
    }
    if affected_items is not None:
        out["affected_items"] = affected_items
    for key, val in extra.items():
        if val is not None:
            out[key] = val
    return out

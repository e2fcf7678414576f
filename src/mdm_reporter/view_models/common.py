"""Shared helpers for template-facing view-model builders."""

from typing import Any


def status_badge_meta(status: Any) -> dict[str, str]:
    """
    Normalize a status/severity string into badge presentation metadata.
    Returns a dict with:
      - css_class: one of status-ok/status-warn/status-fail
      - label: display text (OK, WARNING, or CRITICAL)
    """
    raw = str(status or "UNKNOWN").strip().upper()

    ok_values = {"OK", "HEALTHY", "SUCCESS", "ENFORCEMENT COMPLETED", "DOWNLOAD COMPLETED"}
    fail_values = {"CRITICAL", "FAILED", "ERROR", "DOWNLOAD FAILED", "ENFORCEMENT FAILED"}

    if raw in ok_values:
        return {"css_class": "status-ok", "label": "OK"}
    if raw in fail_values:
        return {"css_class": "status-fail", "label": "CRITICAL"}

    return {"css_class": "status-warn", "label": "WARNING"}


def build_meta(
    report_stamp: str | None = None,
    report_date: str | None = None,
    report_id: str | None = None,
) -> dict[str, str | None]:
    """Standard meta block shared across view-model builders."""
    return {
        "report_stamp": report_stamp,
        "report_date": report_date,
        "report_id": report_id,
    }

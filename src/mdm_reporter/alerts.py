"""Alert derivation and health rollups for MDM policy reports."""

from typing import Any

from mdm_reporter.models.records import InstalledPackageRecord, NormalizedSettingRecord
from mdm_reporter.primitives import build_alert, canonical_severity, safe_list

# Install status codes that end a package's lifecycle in failure.
FAILED_PACKAGE_STATUS_CODES = frozenset((30, 60))


def setting_error_alerts(records: list[NormalizedSettingRecord]) -> list[dict[str, Any]]:
    """One WARNING per setting record that correlated to an error-log entry."""
    alerts = []
    for record in records:
        if record.error is None:
            continue
        target = record.oma_uri or "/".join(p for p in (record.policy_area, record.setting_name) if p)
        alerts.append(
            build_alert(
                "WARNING",
                "policy",
                f"{target} reported error {record.error.error_code}",
                detail={
                    "scope": record.scope,
                    "component": record.error.component,
                    "subcomponent": record.error.subcomponent,
                    "error_code": record.error.error_code,
                    "timestamp": record.error.timestamp,
                    "matched_by": record.error.matched_by,
                },
                affected_items=[target],
            )
        )
    return alerts


def package_failure_alerts(packages: list[InstalledPackageRecord]) -> list[dict[str, Any]]:
    """One CRITICAL per MSI package whose download or enforcement failed."""
    alerts = []
    for package in packages:
        if package.status_code not in FAILED_PACKAGE_STATUS_CODES:
            continue
        alerts.append(
            build_alert(
                "CRITICAL",
                "software",
                f"{package.package_id or 'Unknown package'}: {package.status}",
                detail={
                    "status_code": package.status_code,
                    "last_error": package.last_error,
                    "retry_index": package.retry_index,
                    "retry_max": package.retry_max,
                },
                affected_items=[package.package_id] if package.package_id else None,
            )
        )
    return alerts


def health_rollup(alerts: list[Any]) -> str:
    """Overall health from the highest severity present."""
    severities = {
        canonical_severity(a.get("severity", "INFO"))
        for a in safe_list(alerts)
        if isinstance(a, dict)
    }
    if "CRITICAL" in severities:
        return "CRITICAL"
    if "WARNING" in severities:
        return "WARNING"
    return "HEALTHY"


def summarize_alerts(alerts: list[Any]) -> dict[str, Any]:
    """Tally alerts by canonical severity and by category."""
    counts = {"CRITICAL": 0, "WARNING": 0, "INFO": 0}
    by_category: dict[str, int] = {}
    for alert in safe_list(alerts):
        if not isinstance(alert, dict):
            continue
        counts[canonical_severity(alert.get("severity"))] += 1
        cat = str(alert.get("category", "uncategorized")).lower()
        by_category[cat] = by_category.get(cat, 0) + 1

    return {
        "total": sum(counts.values()),
        "critical_count": counts["CRITICAL"],
        "warning_count": counts["WARNING"],
        "info_count": counts["INFO"],
        "by_category": by_category,
    }


def compute_report_rollups(alerts: list[Any]) -> dict[str, Any]:
    return {"summary": summarize_alerts(alerts), "health": health_rollup(alerts)}

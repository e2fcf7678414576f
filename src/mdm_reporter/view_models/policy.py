"""MDM policy report view-model builder."""

from typing import Any

from mdm_reporter.models.mdm import MdmPolicyReportModel
from mdm_reporter.models.records import NormalizedSettingRecord

from .common import build_meta


def _setting_row(record: NormalizedSettingRecord, include_docs_url: bool) -> dict[str, Any]:
    row: dict[str, Any] = {
        "name": record.setting_name,
        "value": record.value,
        "oma_uri": record.oma_uri,
        "default_value": record.default_value,
        "policy_type": record.policy_type,
        "reg_key_path": record.reg_key_path,
        "reg_value_name": record.reg_value_name,
        "source_file": record.source_file,
        "winning_provider": record.winning_provider,
        "error": record.error.model_dump() if record.error else None,
    }
    if include_docs_url:
        row["docs_url"] = record.docs_url
    return row


def group_policy_records(
    records: list[NormalizedSettingRecord],
    include_enrollment_id: bool = True,
    include_docs_url: bool = False,
) -> list[dict[str, Any]]:
    """
    Fold flat setting records into policy groups with a nested ``settings`` list.

    Groups are keyed by (source, scope, enrollment, area) and keep first-seen
    order. A marker record (no setting name) contributes an empty list.
    """
    groups: dict[tuple[Any, ...], dict[str, Any]] = {}
    for record in records:
        key = (record.source, record.scope, record.enrollment_id, record.policy_area)
        group = groups.get(key)
        if group is None:
            group = {
                "source": record.source,
                "scope": record.scope,
                "policy_area": record.policy_area,
                "settings": [],
            }
            if include_enrollment_id:
                group["enrollment_id"] = record.enrollment_id
            if include_docs_url:
                group["docs_url"] = record.docs_url
            groups[key] = group
        if record.has_setting:
            group["settings"].append(_setting_row(record, include_docs_url))
    return list(groups.values())


def partition_groups(groups: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Split groups into with/without settings, each sorted by scope then area."""

    def _sort_key(g: dict[str, Any]) -> tuple[str, str]:
        return (str(g.get("scope") or ""), str(g.get("policy_area") or "").lower())

    with_settings = sorted((g for g in groups if g["settings"]), key=_sort_key)
    without_settings = sorted((g for g in groups if not g["settings"]), key=_sort_key)
    return {"with_settings": with_settings, "without_settings": without_settings}


def build_policy_report_view(
    model: MdmPolicyReportModel,
    include_enrollment_id: bool = True,
    include_docs_url: bool = False,
    report_stamp: str | None = None,
    report_date: str | None = None,
    report_id: str | None = None,
) -> dict[str, Any]:
    groups = group_policy_records(model.settings, include_enrollment_id, include_docs_url)
    partitioned = partition_groups(groups)
    return {
        "meta": build_meta(report_stamp, report_date, report_id),
        "device": {
            "host": model.metadata.host,
            "source_document": model.metadata.source_document,
            "device_enrollment_id": model.metadata.device_enrollment_id if include_enrollment_id else None,
        },
        "health": model.health,
        "summary": model.summary.model_dump(),
        "alerts": [a.model_dump() for a in model.alerts],
        "policies": partitioned["with_settings"],
        "policies_without_settings": partitioned["without_settings"],
        "packages": sorted((p.model_dump() for p in model.packages), key=lambda p: str(p.get("package_id") or "")),
        "options": {
            "include_enrollment_id": include_enrollment_id,
            "include_docs_url": include_docs_url,
        },
    }

"""MDM diagnostic normalization: document tree in, policy report model out."""

import logging
import xml.etree.ElementTree as ET
from typing import Any

from mdm_reporter.alerts import compute_report_rollups, package_failure_alerts, setting_error_alerts
from mdm_reporter.models.base import AlertModel, MetadataModel, SummaryModel
from mdm_reporter.models.mdm import MdmPolicyReportModel
from mdm_reporter.models.records import InstalledPackageRecord, NormalizedSettingRecord

from .assembler import RecordAssembler, RunContext
from .extract import extract_diagnostics

logger = logging.getLogger(__name__)

_ENROLLMENT_FIELDS = {"enrollment_id"}
_DOCS_FIELDS = {"docs_url"}


def normalize_mdm_diag(
    root: ET.Element,
    context: RunContext | None = None,
    source_document: str | None = None,
    host: str | None = None,
) -> MdmPolicyReportModel:
    """
    Main entry point: correlate every collection in a parsed MDMDiagReport.xml.
    """
    context = context or RunContext()
    extract = extract_diagnostics(root)
    assembler = RecordAssembler(extract, context)

    settings = assembler.build_setting_records()
    packages = assembler.build_package_records()

    alerts = setting_error_alerts(settings) + package_failure_alerts(packages)
    rollups = compute_report_rollups(alerts)

    summary_dict: dict[str, Any] = {
        "settings_total": sum(1 for r in settings if r.has_setting),
        "settings_with_errors": sum(1 for r in settings if r.error is not None),
        "policy_areas": len({(r.scope, r.policy_area) for r in settings if r.source == "policy_manager"}),
        "enrollments": len(extract.enrollments),
        "packages_total": len(packages),
        "packages_failed": sum(1 for a in alerts if a["category"] == "software"),
    }
    summary_dict.update(rollups["summary"])

    logger.debug(
        "normalize_mdm_diag: %d setting records, %d packages, health=%s",
        len(settings),
        len(packages),
        rollups["health"],
    )

    return MdmPolicyReportModel(
        metadata=MetadataModel(
            host=host,
            source_document=source_document,
            device_enrollment_id=context.device_enrollment_id,
        ),
        health=rollups["health"],
        summary=SummaryModel.model_validate(summary_dict),
        alerts=[AlertModel.model_validate(a) for a in alerts],
        settings=settings,
        packages=packages,
    )


def _excluded_fields(include_enrollment_id: bool, include_docs_url: bool) -> set[str]:
    excluded: set[str] = set()
    if not include_enrollment_id:
        excluded |= _ENROLLMENT_FIELDS
    if not include_docs_url:
        excluded |= _DOCS_FIELDS
    return excluded


def flatten_setting(
    record: NormalizedSettingRecord,
    include_enrollment_id: bool = True,
    include_docs_url: bool = False,
) -> dict[str, Any]:
    return record.model_dump(exclude=_excluded_fields(include_enrollment_id, include_docs_url))


def flatten_package(record: InstalledPackageRecord) -> dict[str, Any]:
    return record.model_dump()


def flatten_report(
    model: MdmPolicyReportModel,
    include_enrollment_id: bool = True,
    include_docs_url: bool = False,
) -> dict[str, Any]:
    """Plain-data form of a report, ready for YAML/JSON serialization."""
    excluded_metadata = set() if include_enrollment_id else {"device_enrollment_id"}
    return {
        "metadata": model.metadata.model_dump(exclude=excluded_metadata),
        "health": model.health,
        "summary": model.summary.model_dump(),
        "alerts": [a.model_dump() for a in model.alerts],
        "settings": [flatten_setting(r, include_enrollment_id, include_docs_url) for r in model.settings],
        "packages": [flatten_package(p) for p in model.packages],
    }

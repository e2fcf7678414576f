"""Record extraction from a parsed MDMDiagReport.xml tree.

Every collection is optional: a device enrolled only for compliance has no
enrollments, a freshly provisioned one has no error log, and so on. Missing
sections yield empty tuples, never errors.
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any

from mdm_reporter.models.records import (
    AdmxMetadataEntry,
    AreaMetadataEntry,
    DiagnosticsExtract,
    Enrollment,
    ErrorLogEntry,
    MsiInstallation,
    PolicyAreaSnapshot,
    ScopeEntry,
    WinningProviderFlag,
)
from mdm_reporter.primitives import clean_text, int_or_text, optional_int

from .identifiers import admx_module, scope_label

logger = logging.getLogger(__name__)

AREA_NAME_FIELD = "PolicyAreaName"
LAST_WRITE_SUFFIX = "_LastWrite"
WINNING_PROVIDER_SUFFIX = "_WinningProvider"


def _text(element: ET.Element | None, tag: str) -> str | None:
    if element is None:
        return None
    return clean_text(element.findtext(tag))


def _first_text(element: ET.Element, *tags: str) -> str | None:
    for tag in tags:
        value = _text(element, tag)
        if value is not None:
            return value
    return None


def _area_name(area: ET.Element) -> str | None:
    return clean_text(area.get(AREA_NAME_FIELD)) or _text(area, AREA_NAME_FIELD)


def _is_accounting_field(name: str) -> bool:
    return name == AREA_NAME_FIELD or name.endswith(LAST_WRITE_SUFFIX)


# ---------------------------------------------------------------------------
# Enrollments
# ---------------------------------------------------------------------------


def extract_enrollments(root: ET.Element) -> tuple[Enrollment, ...]:
    enrollments = []
    for node in root.findall("./Resources/Enrollment"):
        enrollment_id = _text(node, "EnrollmentID")
        if not enrollment_id:
            logger.debug("Skipping enrollment without EnrollmentID")
            continue

        scopes = []
        for scope in node.findall("Scope"):
            resources = tuple(
                text
                for text in (clean_text(r.text) for r in scope.findall("./Resources/Resource"))
                if text
            )
            scopes.append(ScopeEntry(scope=scope_label(scope.get("ResourceTarget")), resources=resources))

        device_owned = any(s.scope == "Device" for s in scopes) or not scopes
        enrollments.append(
            Enrollment(
                enrollment_id=enrollment_id,
                ownership="Device" if device_owned else "User",
                scopes=tuple(scopes),
            )
        )
    return tuple(enrollments)


# ---------------------------------------------------------------------------
# PolicyManager: configured areas
# ---------------------------------------------------------------------------


def area_settings(area: ET.Element) -> tuple[dict[str, str | None], bool]:
    """Ordered setting name -> raw value map for one configured policy area.

    Write-tracking companions (``*_LastWrite``) and the area-name field are
    dropped before anything is treated as a setting. An element left with only
    bare text has zero settings; the second return value flags that case.
    """
    settings: dict[str, str | None] = {}
    for child in area:
        if _is_accounting_field(child.tag):
            continue
        settings[child.tag] = clean_text(child.text)

    stray_text = not settings and clean_text(area.text) is not None
    return settings, stray_text


def extract_policy_areas(root: ET.Element) -> tuple[PolicyAreaSnapshot, ...]:
    snapshots = []
    for source in root.findall("./PolicyManager/ConfigSource"):
        enrollment_id = _text(source, "EnrollmentId")
        for policy_scope in source.findall("PolicyScope"):
            scope = scope_label(policy_scope.get("PolicyScope"))
            for area in policy_scope.findall("Area"):
                name = _area_name(area)
                if not name:
                    logger.debug("Skipping unnamed policy area under enrollment %s", enrollment_id)
                    continue
                settings, stray_text = area_settings(area)
                if stray_text:
                    logger.warning(
                        "Policy area %s (%s) holds only text content; treating it as having no settings",
                        name,
                        scope,
                    )
                snapshots.append(
                    PolicyAreaSnapshot(
                        enrollment_id=enrollment_id,
                        scope=scope,
                        area=name,
                        settings=settings,
                        stray_text=stray_text,
                    )
                )
    return tuple(snapshots)


# ---------------------------------------------------------------------------
# PolicyManager: metadata tables
# ---------------------------------------------------------------------------


def extract_area_metadata(root: ET.Element) -> tuple[AreaMetadataEntry, ...]:
    """Per-area metadata; the first entry for an (area, setting) pair wins."""
    entries: list[AreaMetadataEntry] = []
    seen: set[tuple[str, str]] = set()
    for node in root.findall("./PolicyManager/AreaMetadata"):
        area = _area_name(node)
        if not area:
            continue
        for meta in node.findall("PolicyMetadata"):
            setting = _text(meta, "PolicyName")
            if not setting:
                continue
            key = (area, setting)
            if key in seen:
                logger.debug("Duplicate area metadata for %s/%s ignored", area, setting)
                continue
            seen.add(key)
            entries.append(
                AreaMetadataEntry(
                    area=area,
                    setting=setting,
                    default_value=_text(meta, "DefaultValue"),
                    policy_type=_text(meta, "PolicyType"),
                    reg_key_path=_text(meta, "RegKeyPathRedirect"),
                    reg_value_name=_text(meta, "RegValueNameRedirect"),
                )
            )
    return tuple(entries)


def extract_admx_metadata(root: ET.Element) -> tuple[AdmxMetadataEntry, ...]:
    """ADMX-ingested metadata; the last entry for an (area, setting) pair wins."""
    table: dict[tuple[str, str], AdmxMetadataEntry] = {}
    for area in root.findall("./PolicyManager/IngestedAdmxPolicyMetadata//Area"):
        ingested_area = _area_name(area)
        if not ingested_area:
            continue
        for meta in area.findall("PolicyMetadata"):
            setting = _text(meta, "PolicyName")
            if not setting:
                continue
            table[(ingested_area, setting)] = AdmxMetadataEntry(
                ingested_area=ingested_area,
                setting=setting,
                policy_type=_text(meta, "PolicyType"),
                reg_key_path=_text(meta, "RegKeyPathRedirect"),
                reg_value_name=_text(meta, "RegValueNameRedirect"),
                source_file=_text(meta, "AdmxFile") or admx_module(ingested_area),
            )
    return tuple(table.values())


def extract_winning_providers(root: ET.Element) -> tuple[WinningProviderFlag, ...]:
    flags = []
    for values in root.findall("./PolicyManager/CurrentPolicies/CurrentPolicyValues"):
        for child in values:
            if not child.tag.endswith(WINNING_PROVIDER_SUFFIX):
                continue
            setting = child.tag[: -len(WINNING_PROVIDER_SUFFIX)]
            if setting:
                flags.append(WinningProviderFlag(setting=setting, provider=clean_text(child.text)))
    return tuple(flags)


# ---------------------------------------------------------------------------
# Diagnostics and app management
# ---------------------------------------------------------------------------


def extract_error_log(root: ET.Element) -> tuple[ErrorLogEntry, ...]:
    """Error-log entries in document (chronological) order."""
    entries = []
    for component in root.findall("./Diagnostics/ErrorLog/Component"):
        component_name = _text(component, "ComponentName")
        for sub in component.findall("SubComponent"):
            entries.append(
                ErrorLogEntry(
                    component=component_name,
                    subcomponent=_text(sub, "Name"),
                    metadata1=_text(sub, "Metadata1"),
                    metadata2=_text(sub, "Metadata2"),
                    error_code=int_or_text(sub.findtext("Error")),
                    timestamp=_text(sub, "Time"),
                )
            )
    return tuple(entries)


def extract_msi_installations(root: ET.Element) -> tuple[MsiInstallation, ...]:
    installs = []
    for user in root.findall("./EnterpriseDesktopAppManagementinfo/MsiInstallations/TargetedUser"):
        user_sid = _text(user, "UserSID")
        for package in user.findall("Package"):
            package_type = _text(package, "Type")
            for details in package.findall("Details"):
                fields: dict[str, Any] = {
                    "user_sid": user_sid,
                    "package_type": package_type,
                    "package_id": _text(details, "PackageId"),
                    "status": int_or_text(details.findtext("Status")),
                    "last_error": int_or_text(details.findtext("LastError")),
                    "version": _text(details, "ProductVersion"),
                    "command_line": _text(details, "CommandLine"),
                    "retry_index": optional_int(_first_text(details, "RetryIndex", "EnforcementRetryIndex")),
                    "retry_max": optional_int(_first_text(details, "RetryMax", "EnforcementRetryCount")),
                }
                installs.append(MsiInstallation.model_validate(fields))
    return tuple(installs)


def extract_diagnostics(root: ET.Element) -> DiagnosticsExtract:
    """Extract every record collection the correlation engine consumes."""
    extract = DiagnosticsExtract(
        enrollments=extract_enrollments(root),
        policy_areas=extract_policy_areas(root),
        area_metadata=extract_area_metadata(root),
        admx_metadata=extract_admx_metadata(root),
        winning_providers=extract_winning_providers(root),
        error_log=extract_error_log(root),
        msi_installations=extract_msi_installations(root),
    )
    logger.debug(
        "extract_diagnostics: enrollments=%d areas=%d area_metadata=%d admx=%d providers=%d errors=%d msi=%d",
        len(extract.enrollments),
        len(extract.policy_areas),
        len(extract.area_metadata),
        len(extract.admx_metadata),
        len(extract.winning_providers),
        len(extract.error_log),
        len(extract.msi_installations),
    )
    return extract

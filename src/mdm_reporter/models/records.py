"""Typed snapshots of the diagnostic document and the normalized output records.

Extracted entities are frozen: they are read once from a single document and
never mutated afterwards.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN = "unknown"
DEVICE_SCOPE = "Device"


class _Snapshot(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


# ---------------------------------------------------------------------------
# Extracted collections
# ---------------------------------------------------------------------------


class ScopeEntry(_Snapshot):
    scope: str
    resources: tuple[str, ...] = ()


class Enrollment(_Snapshot):
    enrollment_id: str
    ownership: Literal["Device", "User"] = "Device"
    scopes: tuple[ScopeEntry, ...] = ()


class PolicyAreaSnapshot(_Snapshot):
    enrollment_id: Optional[str] = None
    scope: str
    area: str
    # Insertion order follows the document.
    settings: dict[str, Optional[str]] = Field(default_factory=dict)
    stray_text: bool = False


class AreaMetadataEntry(_Snapshot):
    area: str
    setting: str
    default_value: Optional[str] = None
    policy_type: Optional[str] = None
    reg_key_path: Optional[str] = None
    reg_value_name: Optional[str] = None


class AdmxMetadataEntry(_Snapshot):
    ingested_area: str
    setting: str
    policy_type: Optional[str] = None
    reg_key_path: Optional[str] = None
    reg_value_name: Optional[str] = None
    source_file: Optional[str] = None


class WinningProviderFlag(_Snapshot):
    setting: str
    provider: Optional[str] = None


class ErrorLogEntry(_Snapshot):
    component: Optional[str] = None
    subcomponent: Optional[str] = None
    metadata1: Optional[str] = None
    metadata2: Optional[str] = None
    error_code: Optional[int | str] = None
    timestamp: Optional[str] = None


class MsiInstallation(_Snapshot):
    user_sid: Optional[str] = None
    package_type: Optional[str] = None
    package_id: Optional[str] = None
    status: Optional[int | str] = None
    last_error: Optional[int | str] = None
    version: Optional[str] = None
    command_line: Optional[str] = None
    retry_index: Optional[int] = None
    retry_max: Optional[int] = None


class DiagnosticsExtract(_Snapshot):
    enrollments: tuple[Enrollment, ...] = ()
    policy_areas: tuple[PolicyAreaSnapshot, ...] = ()
    area_metadata: tuple[AreaMetadataEntry, ...] = ()
    admx_metadata: tuple[AdmxMetadataEntry, ...] = ()
    winning_providers: tuple[WinningProviderFlag, ...] = ()
    error_log: tuple[ErrorLogEntry, ...] = ()
    msi_installations: tuple[MsiInstallation, ...] = ()


# ---------------------------------------------------------------------------
# Resolution results
# ---------------------------------------------------------------------------


class MetadataResolution(_Snapshot):
    default_value: Optional[str] = None
    policy_type: str = UNKNOWN
    reg_key_path: str = UNKNOWN
    reg_value_name: str = UNKNOWN
    source_file: Optional[str] = None
    origin: Literal["area_metadata", "admx_metadata", "none"] = "none"


class CorrelatedError(_Snapshot):
    component: Optional[str] = None
    subcomponent: Optional[str] = None
    error_code: Optional[int | str] = None
    timestamp: Optional[str] = None
    matched_by: Literal["exact", "metadata", "leaf"] = "exact"


# ---------------------------------------------------------------------------
# Output records
# ---------------------------------------------------------------------------


class NormalizedSettingRecord(_Snapshot):
    source: Literal["enrollment", "policy_manager"]
    scope: str = Field(min_length=1)
    enrollment_id: Optional[str] = None
    policy_area: str = Field(min_length=1)
    setting_name: Optional[str] = None
    value: Optional[str] = None
    oma_uri: Optional[str] = None
    default_value: Optional[str] = None
    policy_type: Optional[str] = None
    reg_key_path: Optional[str] = None
    reg_value_name: Optional[str] = None
    source_file: Optional[str] = None
    winning_provider: Optional[str] = None
    error: Optional[CorrelatedError] = None
    docs_url: Optional[str] = None

    @property
    def has_setting(self) -> bool:
        return self.setting_name is not None


class InstalledPackageRecord(_Snapshot):
    # MSI records are always attributed to the device; user_sid is kept for audit.
    scope: Literal["Device"] = DEVICE_SCOPE
    user_sid: Optional[str] = None
    package_type: Optional[str] = None
    status: str
    status_code: Optional[int] = None
    last_error: Optional[int | str] = None
    package_id: Optional[str] = None
    version: Optional[str] = None
    command_line: Optional[str] = None
    retry_index: Optional[int] = None
    retry_max: Optional[int] = None

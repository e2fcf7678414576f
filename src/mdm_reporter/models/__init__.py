from .base import AlertModel, MetadataModel, SummaryModel
from .mdm import MdmPolicyReportModel
from .records import (
    DEVICE_SCOPE,
    UNKNOWN,
    AdmxMetadataEntry,
    AreaMetadataEntry,
    CorrelatedError,
    DiagnosticsExtract,
    Enrollment,
    ErrorLogEntry,
    InstalledPackageRecord,
    MetadataResolution,
    MsiInstallation,
    NormalizedSettingRecord,
    PolicyAreaSnapshot,
    ScopeEntry,
    WinningProviderFlag,
)

__all__ = [
    "DEVICE_SCOPE",
    "UNKNOWN",
    "AdmxMetadataEntry",
    "AlertModel",
    "AreaMetadataEntry",
    "CorrelatedError",
    "DiagnosticsExtract",
    "Enrollment",
    "ErrorLogEntry",
    "InstalledPackageRecord",
    "MdmPolicyReportModel",
    "MetadataModel",
    "MetadataResolution",
    "MsiInstallation",
    "NormalizedSettingRecord",
    "PolicyAreaSnapshot",
    "ScopeEntry",
    "SummaryModel",
    "WinningProviderFlag",
]

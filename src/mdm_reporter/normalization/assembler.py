"""Assembly of normalized setting and installed-package records."""

import logging
from typing import Any

from mdm_reporter.models.records import (
    UNKNOWN,
    DiagnosticsExtract,
    InstalledPackageRecord,
    MsiInstallation,
    NormalizedSettingRecord,
)

from .errors import ErrorCorrelator
from .identifiers import documentation_keys, is_excluded_namespace, is_placeholder, split_resource
from .metadata import MetadataResolver
from .providers import WinningProviderResolver

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDED_NAMESPACES = ("EnterpriseDesktopAppManagement/MSI", "WMIBridge")

MSI_STATUS_LABELS: dict[int, str] = {
    10: "Initialized",
    20: "Download In Progress",
    25: "Pending Download Retry",
    30: "Download Failed",
    40: "Download Completed",
    48: "Pending User Session",
    50: "Enforcement In Progress",
    55: "Pending Enforcement Retry",
    60: "Enforcement Failed",
    70: "Enforcement Completed",
}


def translate_msi_status(status: Any) -> str:
    """Label for an MSI status code; unmapped codes pass through as text."""
    if status is None:
        return UNKNOWN
    if isinstance(status, int):
        return MSI_STATUS_LABELS.get(status, str(status))
    return str(status)


class RunContext:
    """Facts computed once at run start and shared by every record."""

    def __init__(
        self,
        device_enrollment_id: str | None = None,
        docs_linker: Any = None,
        primary_label: str = "Intune",
        excluded_namespaces: tuple[str, ...] | list[str] = DEFAULT_EXCLUDED_NAMESPACES,
    ) -> None:
        self.device_enrollment_id = device_enrollment_id
        self.docs_linker = docs_linker
        self.primary_label = primary_label
        self.excluded_namespaces = tuple(excluded_namespaces)


class RecordAssembler:
    def __init__(self, extract: DiagnosticsExtract, context: RunContext | None = None) -> None:
        self.extract = extract
        self.context = context or RunContext()
        self.metadata = MetadataResolver(extract.area_metadata, extract.admx_metadata)
        self.errors = ErrorCorrelator(extract.error_log)
        self.providers = WinningProviderResolver(
            extract.winning_providers,
            device_enrollment_id=self.context.device_enrollment_id,
            primary_label=self.context.primary_label,
        )

    def _docs_url(self, identifier: str) -> str | None:
        linker = self.context.docs_linker
        if linker is None:
            return None
        return linker.url_for(documentation_keys(identifier))

    def _keep_resource(self, resource: str) -> bool:
        if is_placeholder(resource):
            return False
        if is_excluded_namespace(resource, self.context.excluded_namespaces):
            logger.debug("Skipping excluded resource %s", resource)
            return False
        return True

    def build_enrollment_records(self) -> list[NormalizedSettingRecord]:
        """One record per scoped resource; no metadata or provider attribution."""
        records = []
        for enrollment in self.extract.enrollments:
            for scope_entry in enrollment.scopes:
                for resource in scope_entry.resources:
                    if not self._keep_resource(resource):
                        continue
                    area, setting = split_resource(resource)
                    records.append(
                        NormalizedSettingRecord(
                            source="enrollment",
                            scope=scope_entry.scope,
                            enrollment_id=enrollment.enrollment_id,
                            policy_area=area,
                            setting_name=setting,
                            oma_uri=resource,
                            error=self.errors.correlate(resource),
                            docs_url=self._docs_url(resource),
                        )
                    )
        return records

    def build_policy_records(self) -> list[NormalizedSettingRecord]:
        """One record per configured setting, or one marker for an empty area."""
        records = []
        for snapshot in self.extract.policy_areas:
            docs_url = self._docs_url(snapshot.area)
            if not snapshot.settings:
                records.append(
                    NormalizedSettingRecord(
                        source="policy_manager",
                        scope=snapshot.scope,
                        enrollment_id=snapshot.enrollment_id,
                        policy_area=snapshot.area,
                        error=self.errors.correlate(snapshot.area),
                        docs_url=docs_url,
                    )
                )
                continue

            for setting, value in snapshot.settings.items():
                meta = self.metadata.resolve(snapshot.area, setting)
                records.append(
                    NormalizedSettingRecord(
                        source="policy_manager",
                        scope=snapshot.scope,
                        enrollment_id=snapshot.enrollment_id,
                        policy_area=snapshot.area,
                        setting_name=setting,
                        value=value,
                        default_value=meta.default_value,
                        policy_type=meta.policy_type,
                        reg_key_path=meta.reg_key_path,
                        reg_value_name=meta.reg_value_name,
                        source_file=meta.source_file,
                        winning_provider=self.providers.resolve(setting),
                        error=self.errors.correlate_setting(snapshot.area, setting),
                        docs_url=docs_url,
                    )
                )
        return records

    def build_package_records(self) -> list[InstalledPackageRecord]:
        return [self._package_record(install) for install in self.extract.msi_installations]

    @staticmethod
    def _package_record(install: MsiInstallation) -> InstalledPackageRecord:
        status_code = install.status if isinstance(install.status, int) else None
        return InstalledPackageRecord(
            user_sid=install.user_sid,
            package_type=install.package_type,
            status=translate_msi_status(install.status),
            status_code=status_code,
            last_error=install.last_error,
            package_id=install.package_id,
            version=install.version,
            command_line=install.command_line,
            retry_index=install.retry_index,
            retry_max=install.retry_max,
        )

    def build_setting_records(self) -> list[NormalizedSettingRecord]:
        """Enrollment-derived records followed by policy-manager records."""
        return self.build_enrollment_records() + self.build_policy_records()

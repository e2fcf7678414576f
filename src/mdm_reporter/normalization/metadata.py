"""Descriptive metadata lookup for a (policy area, setting) pair."""

import logging
from collections.abc import Iterable

from mdm_reporter.models.records import (
    AdmxMetadataEntry,
    AreaMetadataEntry,
    MetadataResolution,
)

from .identifiers import admx_module

logger = logging.getLogger(__name__)

NO_METADATA = MetadataResolution()


class MetadataResolver:
    """Ordered lookup: per-area metadata first, then ADMX-ingested metadata.

    Absence of metadata is the common case and resolves to the ``unknown``
    sentinels rather than an error.
    """

    def __init__(
        self,
        area_metadata: Iterable[AreaMetadataEntry],
        admx_metadata: Iterable[AdmxMetadataEntry],
    ) -> None:
        self._area: dict[tuple[str, str], AreaMetadataEntry] = {}
        for entry in area_metadata:
            self._area.setdefault((entry.area, entry.setting), entry)

        # ingested area name -> setting -> entry
        self._admx: dict[str, dict[str, AdmxMetadataEntry]] = {}
        for admx in admx_metadata:
            self._admx.setdefault(admx.ingested_area, {})[admx.setting] = admx

    def resolve(self, area: str, setting: str | None) -> MetadataResolution:
        if setting is None:
            return NO_METADATA

        entry = self._area.get((area, setting))
        if entry is not None:
            return MetadataResolution(
                default_value=entry.default_value,
                policy_type=entry.policy_type or NO_METADATA.policy_type,
                reg_key_path=entry.reg_key_path or NO_METADATA.reg_key_path,
                reg_value_name=entry.reg_value_name or NO_METADATA.reg_value_name,
                source_file=None,
                origin="area_metadata",
            )

        admx = self._admx.get(area, {}).get(setting)
        if admx is not None:
            return MetadataResolution(
                policy_type=admx.policy_type or NO_METADATA.policy_type,
                reg_key_path=admx.reg_key_path or NO_METADATA.reg_key_path,
                reg_value_name=admx.reg_value_name or NO_METADATA.reg_value_name,
                source_file=admx.source_file or admx_module(admx.ingested_area),
                origin="admx_metadata",
            )

        logger.debug("No metadata for %s/%s", area, setting)
        return NO_METADATA

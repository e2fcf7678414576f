"""Correlation of settings with MDM diagnostics error-log entries.

Error-log entries are not keyed: the only link to a setting is free text.
Lookups therefore run as an ordered chain of progressively looser matches,
and the first entry in log order wins within each pass.
"""

import logging
from collections.abc import Iterable

from mdm_reporter.models.records import CorrelatedError, ErrorLogEntry

from .identifiers import is_path, leaf_key

logger = logging.getLogger(__name__)


def _to_correlated(entry: ErrorLogEntry, matched_by: str) -> CorrelatedError:
    return CorrelatedError(
        component=entry.component,
        subcomponent=entry.subcomponent,
        error_code=entry.error_code,
        timestamp=entry.timestamp,
        matched_by=matched_by,
    )


class ErrorCorrelator:
    def __init__(self, entries: Iterable[ErrorLogEntry]) -> None:
        self._entries = tuple(entries)

    def exact(self, identifier: str) -> CorrelatedError | None:
        """Subcomponent equals *identifier*, or Metadata2 contains it.

        The substring test catches entries recorded against an instance path,
        e.g. a Wi-Fi profile name appended to the generic CSP node.
        """
        if not identifier:
            return None
        for entry in self._entries:
            if entry.subcomponent == identifier:
                return _to_correlated(entry, "exact")
            if entry.metadata2 and identifier in entry.metadata2:
                return _to_correlated(entry, "metadata")
        return None

    def relaxed(self, identifier: str) -> CorrelatedError | None:
        """Subcomponent equals the leaf segment of a path identifier."""
        if not identifier or not is_path(identifier):
            return None
        leaf = leaf_key(identifier)
        for entry in self._entries:
            if entry.subcomponent == leaf:
                return _to_correlated(entry, "leaf")
        return None

    def correlate(self, identifier: str) -> CorrelatedError | None:
        """Exact pass, then the relaxed pass. None means applied cleanly."""
        found = self.exact(identifier) or self.relaxed(identifier)
        if found is not None:
            logger.debug("Correlated %s with error %s (%s)", identifier, found.error_code, found.matched_by)
        return found

    def correlate_setting(self, area: str, setting: str | None) -> CorrelatedError | None:
        """Configured-policy lookup: the raw setting name first, then the area."""
        if setting:
            found = self.exact(setting)
            if found is not None:
                return found
        return self.correlate(area)

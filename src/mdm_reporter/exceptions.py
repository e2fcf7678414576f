"""Exception types raised by mdm_reporter.

Only fatal conditions are raised. Missing metadata, missing error-log
correlations and unreachable documentation pages resolve to sentinel values
and never surface here.
"""

from __future__ import annotations

from typing import Any


class MdmReporterError(Exception):
    """Base exception carrying optional context (paths, commands, timeouts)."""

    def __init__(self, msg: str, ctx: dict[str, Any] | None = None) -> None:
        super().__init__(msg)
        self.msg = msg
        self.ctx = ctx or {}

    def __str__(self) -> str:
        if self.ctx:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.ctx.items())
            return f"{self.msg} [{ctx_str}]"
        return self.msg


class DocumentNotFoundError(MdmReporterError):
    """Raised when the diagnostic document is missing or unreadable."""


class MalformedDocumentError(MdmReporterError):
    """Raised when the diagnostic document cannot be parsed."""


class AcquisitionError(MdmReporterError):
    """Raised when the collection tool cannot produce a document."""


class ConfigError(MdmReporterError):
    """Raised when a configuration file is invalid."""

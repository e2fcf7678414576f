from .assembler import RecordAssembler, RunContext, translate_msi_status
from .errors import ErrorCorrelator
from .extract import extract_diagnostics
from .mdm import flatten_report, normalize_mdm_diag
from .metadata import MetadataResolver
from .providers import WinningProviderResolver

__all__ = [
    "ErrorCorrelator",
    "MetadataResolver",
    "RecordAssembler",
    "RunContext",
    "WinningProviderResolver",
    "extract_diagnostics",
    "flatten_report",
    "normalize_mdm_diag",
    "translate_msi_status",
]

from .acquire import acquire_document
from .device_identity import lookup_device_enrollment_id
from .docs import DocsLinker, build_docs_linker
from .reader import load_document, parse_document

__all__ = [
    "DocsLinker",
    "acquire_document",
    "build_docs_linker",
    "load_document",
    "lookup_device_enrollment_id",
    "parse_document",
]

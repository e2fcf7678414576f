"""Loading of the MDM diagnostic XML document."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from mdm_reporter.exceptions import DocumentNotFoundError, MalformedDocumentError

logger = logging.getLogger(__name__)

ROOT_TAG = "MDMEnterpriseDiagnosticsReport"


def parse_document(content: str | bytes) -> ET.Element:
    """Parse document text and check the root element."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise MalformedDocumentError(f"Unparseable diagnostic document: {exc}") from exc
    if root.tag != ROOT_TAG:
        raise MalformedDocumentError(
            "Unexpected root element", {"expected": ROOT_TAG, "found": root.tag}
        )
    return root


def load_document(path: str | Path) -> ET.Element:
    """Read and parse the diagnostic document at *path*."""
    source = Path(path)
    try:
        content = source.read_bytes()
    except FileNotFoundError as exc:
        raise DocumentNotFoundError("Diagnostic document not found", {"path": str(source)}) from exc
    except OSError as exc:
        raise DocumentNotFoundError(f"Cannot read diagnostic document: {exc}", {"path": str(source)}) from exc

    logger.debug("Loaded %d bytes from %s", len(content), source)
    try:
        return parse_document(content)
    except MalformedDocumentError as exc:
        exc.ctx.setdefault("path", str(source))
        raise

"""Canonicalization of the identifier spellings found in MDM diagnostic exports.

Three shapes show up across the document's collections:

* resource paths (OMA-URIs), e.g. ``./Device/Vendor/MSFT/Policy/Config/Area/Leaf``
* bare policy area names, e.g. ``BitLocker``
* composite ADMX-ingested area names, e.g. ``Chrome~Policy~googlechrome``
"""

import logging
import re
from collections.abc import Iterable

from mdm_reporter.models.records import DEVICE_SCOPE

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"
ADMX_SEPARATOR = "~"

_NUMERIC_RE = re.compile(r"^\s*\d+\s*$")


def is_path(identifier: str) -> bool:
    return PATH_SEPARATOR in identifier


def is_composite(identifier: str) -> bool:
    return ADMX_SEPARATOR in identifier


def path_segments(identifier: str) -> list[str]:
    """Non-empty path segments, with a leading ``.`` root marker dropped."""
    parts = [p for p in identifier.strip().split(PATH_SEPARATOR) if p]
    if parts and parts[0] == ".":
        parts = parts[1:]
    return parts


def is_placeholder(identifier: str | None) -> bool:
    """True for empty or pure-numeric tokens, which carry no meaning."""
    if identifier is None or not identifier.strip():
        return True
    if _NUMERIC_RE.match(identifier):
        logger.warning("Skipping numeric placeholder identifier %r", identifier)
        return True
    return False


def is_excluded_namespace(identifier: str, namespaces: Iterable[str]) -> bool:
    lowered = identifier.lower()
    return any(ns.lower() in lowered for ns in namespaces if ns)


def leaf_key(identifier: str) -> str:
    """Last path segment; the identifier itself when it is not a path."""
    parts = path_segments(identifier)
    return parts[-1] if parts else identifier


def split_resource(identifier: str) -> tuple[str, str | None]:
    """(area, setting) for a resource path: the two trailing segments."""
    parts = path_segments(identifier)
    if not parts:
        return identifier, None
    if len(parts) == 1:
        return parts[0], None
    return parts[-2], parts[-1]


def documentation_keys(identifier: str) -> list[str]:
    """Ordered documentation keys to try for *identifier*.

    Paths yield the second-to-last segment, then the third-to-last as the
    retry key (CSPs are not consistent about which level names the area).
    Bare area names yield themselves; composite ADMX names have no page.
    """
    if not identifier or is_composite(identifier):
        return []
    if not is_path(identifier):
        return [identifier]

    parts = path_segments(identifier)
    keys = []
    for offset in (2, 3):
        if len(parts) >= offset:
            key = parts[-offset]
            if key not in keys and not is_composite(key):
                keys.append(key)
    return keys


def admx_module(ingested_area: str) -> str:
    """Module segment of a composite ADMX area name."""
    return ingested_area.split(ADMX_SEPARATOR, 1)[0]


def scope_label(raw: str | None) -> str:
    """``device`` in any case becomes ``Device``; user SIDs pass through."""
    text = (raw or "").strip()
    if not text or text.lower() == "device":
        return DEVICE_SCOPE
    return text

"""Generic CSV writer for policy report tables."""

import csv
import re
from pathlib import Path
from typing import Any


def header_to_key(header: str) -> str:
    """Convert a display header to a snake_case dict key.

    >>> header_to_key("Policy Area")
    'policy_area'
    >>> header_to_key("OMA URI")
    'oma_uri'
    """
    return re.sub(r"\s+", "_", header.strip()).lower()


def _format_value(value: Any) -> str:
    if isinstance(value, list):
        return "; ".join(str(v) for v in value)
    text = str(value) if value is not None else ""
    return text.replace("\n", " ").replace("\r", "")


def export_csv(
    rows: list[dict[str, Any]],
    headers: list[str],
    output_path: str | Path,
    sort_by: str | None = None,
) -> Path:
    """Write *rows* to *output_path* as CSV with *headers* as display columns."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    resolved = {h: header_to_key(h) for h in headers}
    if sort_by and sort_by in resolved:
        s_key = resolved[sort_by]
        rows = sorted(rows, key=lambda r: str(r.get(s_key) or "").lower())

    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh, quoting=csv.QUOTE_MINIMAL)
        writer.writerow(headers)
        for row in rows:
            writer.writerow([_format_value(row.get(resolved[h])) for h in headers])
    return path

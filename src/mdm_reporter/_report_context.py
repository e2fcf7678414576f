"""Shared CLI helpers for report generation commands."""

from __future__ import annotations

import functools
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, FileSystemLoader

logger = logging.getLogger(__name__)

_VIEW_MODEL_KEYS = {"report_stamp", "report_date", "report_id"}


# ---------------------------------------------------------------------------
# Cached Jinja environment
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=1)
def get_jinja_env() -> Environment:
    """Return a cached Jinja2 Environment configured for report templates."""
    from .view_models.common import status_badge_meta as _badge  # avoid circular

    template_dir = Path(__file__).parent / "templates"
    env = Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["status_badge_meta"] = _badge
    return env


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def generate_timestamps(report_stamp: str | None = None) -> dict[str, Any]:
    """Build the full set of timestamp strings used by report commands."""
    now = datetime.now(tz=timezone.utc)
    stamp = report_stamp or now.strftime("%Y%m%d")
    date_str = now.strftime("%Y-%m-%d %H:%M:%S")
    return {
        "report_stamp": stamp,
        "report_date": date_str,
        "report_id": now.strftime("%Y%m%dT%H%M%SZ"),
    }


def vm_kwargs(common_vars: dict[str, Any]) -> dict[str, Any]:
    """Extract only the keys accepted by view-model builder functions."""
    return {k: v for k, v in common_vars.items() if k in _VIEW_MODEL_KEYS}


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


def dump_data(data: dict[str, Any], fmt: str) -> str:
    """Serialize plain report data as YAML or JSON text."""
    if fmt == "json":
        return json.dumps(data, indent=2, default=str) + "\n"
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)


def write_report(output_path: Path, base_name: str, content: str, stamp: str) -> Path:
    """Write a stamped report and a 'latest' (un-stamped) copy; return the latter."""
    stem, ext = base_name.rsplit(".", 1) if "." in base_name else (base_name, "html")
    stamped = output_path / f"{stem}_{stamp}.{ext}"
    latest = output_path / f"{stem}.{ext}"
    with open(stamped, "w", encoding="utf-8") as f:
        f.write(content)
    with open(latest, "w", encoding="utf-8") as f:
        f.write(content)
    logger.debug("Wrote %s and %s", stamped, latest)
    return latest

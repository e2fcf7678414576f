"""Lookup of the device's primary-channel enrollment id.

The MDM client registers a ``PushLaunch`` scheduled task under
``\\Microsoft\\Windows\\EnterpriseMgmt\\<enrollment id>\\``; the container
folder name is the enrollment id of the primary management channel.
"""

from __future__ import annotations

import csv
import io
import logging
import subprocess
from collections.abc import Callable
from typing import Any

from mdm_reporter.config import ReporterConfig

logger = logging.getLogger(__name__)

SCHTASKS_ARGS = ["schtasks", "/Query", "/FO", "CSV", "/NH"]


def find_enrollment_container(task_names: list[str], task_path: str, task_name: str) -> str | None:
    """Return the folder between *task_path* and *task_name*, if any task matches."""
    prefix = task_path.rstrip("\\").lower() + "\\"
    suffix = "\\" + task_name.lower()
    for full_name in task_names:
        lowered = full_name.strip().lower()
        if not (lowered.startswith(prefix) and lowered.endswith(suffix)):
            continue
        container = full_name.strip()[len(prefix) : -len(suffix)]
        if container and "\\" not in container:
            return container
    return None


def parse_task_names(output: str) -> list[str]:
    """First column of ``schtasks /FO CSV /NH`` output."""
    names = []
    for row in csv.reader(io.StringIO(output)):
        if row and row[0].startswith("\\"):
            names.append(row[0])
    return names


def lookup_device_enrollment_id(
    config: ReporterConfig,
    runner: Callable[..., Any] = subprocess.run,
) -> str | None:
    """Resolve the enrollment id once per run; None when it cannot be determined."""
    try:
        result = runner(SCHTASKS_ARGS, capture_output=True, text=True, timeout=30)
    except (OSError, subprocess.SubprocessError) as exc:
        logger.info("Scheduled task query unavailable: %s", exc)
        return None

    if getattr(result, "returncode", 0) != 0:
        logger.info("Scheduled task query failed with code %s", result.returncode)
        return None

    container = find_enrollment_container(
        parse_task_names(result.stdout or ""),
        config.enrollment_task_path,
        config.enrollment_task_name,
    )
    if container is None:
        logger.info("No %s task found under %s", config.enrollment_task_name, config.enrollment_task_path)
    else:
        logger.debug("Device enrollment id: %s", container)
    return container

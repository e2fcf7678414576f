"""Acquisition of the diagnostic document via MdmDiagnosticsTool."""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from mdm_reporter.config import ReporterConfig
from mdm_reporter.exceptions import AcquisitionError

logger = logging.getLogger(__name__)


def build_tool_args(config: ReporterConfig) -> list[str]:
    return [config.diag_tool_path, "-out", config.diag_output_dir]


def wait_for_file(
    path: Path,
    timeout: float,
    poll_interval: float,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Poll until *path* exists or *timeout* seconds elapse."""
    deadline = clock() + timeout
    while True:
        if path.is_file():
            return True
        if clock() >= deadline:
            return False
        sleep(poll_interval)


def _discard_previous_report(target: Path) -> None:
    """Remove a report left by an earlier run; only a freshly written file is accepted."""
    if not target.exists():
        return
    logger.info("Removing previous diagnostic report %s", target)
    try:
        target.unlink()
    except OSError as exc:
        raise AcquisitionError(f"Cannot remove previous report: {exc}", {"path": str(target)}) from exc


def run_collection_tool(
    config: ReporterConfig,
    runner: Callable[..., Any] = subprocess.run,
) -> Path:
    """Run the collection tool and wait for its report file to appear."""
    target = config.diag_report_path
    Path(config.diag_output_dir).mkdir(parents=True, exist_ok=True)
    _discard_previous_report(target)
    args = build_tool_args(config)
    logger.info("Collecting MDM diagnostics: %s", " ".join(args))

    try:
        result = runner(args, capture_output=True, text=True, timeout=config.acquisition_timeout)
    except FileNotFoundError as exc:
        raise AcquisitionError("Collection tool not found", {"tool": config.diag_tool_path}) from exc
    except subprocess.TimeoutExpired as exc:
        raise AcquisitionError("Collection tool timed out", {"timeout": config.acquisition_timeout}) from exc
    except OSError as exc:
        raise AcquisitionError(f"Collection tool failed to start: {exc}", {"tool": config.diag_tool_path}) from exc

    if getattr(result, "returncode", 0) != 0:
        logger.warning("Collection tool exited with code %s: %s", result.returncode, (result.stderr or "").strip())

    if not wait_for_file(target, config.acquisition_timeout, config.acquisition_poll_interval):
        raise AcquisitionError(
            "Diagnostic document did not appear",
            {"path": str(target), "timeout": config.acquisition_timeout},
        )
    return target


def acquire_document(
    path: str | Path | None,
    config: ReporterConfig,
    runner: Callable[..., Any] = subprocess.run,
) -> Path:
    """Return *path* when it exists, otherwise collect a fresh document."""
    if path is not None:
        candidate = Path(path)
        if candidate.is_file():
            return candidate
        logger.info("%s not found; invoking the collection tool", candidate)
    return run_collection_tool(config, runner=runner)

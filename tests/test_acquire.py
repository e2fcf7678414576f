"""Tests for collecting the document with the diagnostics tool."""

import subprocess
from types import SimpleNamespace

import pytest

from mdm_reporter.collection.acquire import acquire_document, build_tool_args, run_collection_tool, wait_for_file
from mdm_reporter.config import ReporterConfig
from mdm_reporter.exceptions import AcquisitionError


def _config(tmp_path, **overrides):
    values = {
        "diag_tool_path": "MdmDiagnosticsTool.exe",
        "diag_output_dir": str(tmp_path / "out"),
        "acquisition_timeout": 0.05,
        "acquisition_poll_interval": 0.01,
    }
    values.update(overrides)
    return ReporterConfig(**values)


class FakeRunner:
    """Records invocations; optionally writes the report like the real tool."""

    def __init__(self, write_to=None, returncode=0, raises=None):
        self.write_to = write_to
        self.returncode = returncode
        self.raises = raises
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        if self.raises is not None:
            raise self.raises
        if self.write_to is not None:
            self.write_to.write_text("<MDMEnterpriseDiagnosticsReport/>", encoding="utf-8")
        return SimpleNamespace(returncode=self.returncode, stdout="", stderr="")


def test_tool_args(tmp_path):
    config = _config(tmp_path)
    assert build_tool_args(config) == ["MdmDiagnosticsTool.exe", "-out", str(tmp_path / "out")]


def test_existing_path_skips_tool(sample_path, tmp_path):
    runner = FakeRunner()
    assert acquire_document(sample_path, _config(tmp_path), runner=runner) == sample_path
    assert runner.calls == []


def test_missing_path_runs_tool(tmp_path):
    config = _config(tmp_path)
    runner = FakeRunner(write_to=config.diag_report_path)
    result = acquire_document(tmp_path / "nope.xml", config, runner=runner)
    assert result == config.diag_report_path
    assert len(runner.calls) == 1
    assert runner.calls[0][1]["timeout"] == config.acquisition_timeout


def test_nonzero_exit_still_accepts_report(tmp_path):
    config = _config(tmp_path)
    runner = FakeRunner(write_to=config.diag_report_path, returncode=1)
    assert run_collection_tool(config, runner=runner) == config.diag_report_path


def test_report_never_appears(tmp_path):
    with pytest.raises(AcquisitionError) as excinfo:
        run_collection_tool(_config(tmp_path), runner=FakeRunner())
    assert "did not appear" in str(excinfo.value)


@pytest.mark.parametrize(
    "error, message",
    [
        (FileNotFoundError("no such file"), "not found"),
        (subprocess.TimeoutExpired(cmd="tool", timeout=1), "timed out"),
        (PermissionError("denied"), "failed to start"),
    ],
)
def test_tool_failures(tmp_path, error, message):
    with pytest.raises(AcquisitionError) as excinfo:
        run_collection_tool(_config(tmp_path), runner=FakeRunner(raises=error))
    assert message in str(excinfo.value)


def test_wait_for_file_polls_until_deadline(tmp_path):
    ticks = iter([0.0, 0.5, 1.0, 1.5, 2.5])
    sleeps = []
    found = wait_for_file(
        tmp_path / "never.xml",
        timeout=2.0,
        poll_interval=0.5,
        clock=lambda: next(ticks),
        sleep=sleeps.append,
    )
    assert found is False
    assert sleeps == [0.5, 0.5, 0.5]


def test_wait_for_file_immediate(sample_path):
    assert wait_for_file(sample_path, timeout=0, poll_interval=1, sleep=lambda _: None) is True


def test_stale_report_not_accepted_after_failed_run(tmp_path):
    config = _config(tmp_path)
    config.diag_report_path.parent.mkdir(parents=True)
    config.diag_report_path.write_text("<stale/>", encoding="utf-8")

    with pytest.raises(AcquisitionError, match="did not appear"):
        run_collection_tool(config, runner=FakeRunner(returncode=1))
    assert not config.diag_report_path.exists()


def test_stale_report_replaced_by_fresh_one(tmp_path):
    config = _config(tmp_path)
    config.diag_report_path.parent.mkdir(parents=True)
    config.diag_report_path.write_text("<stale/>", encoding="utf-8")

    path = run_collection_tool(config, runner=FakeRunner(write_to=config.diag_report_path))
    assert path.read_text(encoding="utf-8") == "<MDMEnterpriseDiagnosticsReport/>"

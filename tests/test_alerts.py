"""Tests for alert derivation and health rollups."""

from mdm_reporter.alerts import (
    compute_report_rollups,
    health_rollup,
    package_failure_alerts,
    setting_error_alerts,
    summarize_alerts,
)
from mdm_reporter.models.records import CorrelatedError, InstalledPackageRecord, NormalizedSettingRecord


def _setting(error=None, oma_uri=None):
    return NormalizedSettingRecord(
        source="policy_manager",
        scope="Device",
        policy_area="BitLocker",
        setting_name="RequireDeviceEncryption",
        oma_uri=oma_uri,
        error=error,
    )


def _package(code, label):
    return InstalledPackageRecord(package_id="{P}", status=label, status_code=code)


def test_setting_errors_become_warnings():
    error = CorrelatedError(subcomponent="BitLocker", error_code=-2016281112, matched_by="exact")
    alerts = setting_error_alerts([_setting(), _setting(error=error)])
    assert len(alerts) == 1
    alert = alerts[0]
    assert alert["severity"] == "WARNING"
    assert alert["category"] == "policy"
    assert alert["affected_items"] == ["BitLocker/RequireDeviceEncryption"]
    assert alert["detail"]["matched_by"] == "exact"


def test_setting_alert_prefers_oma_uri():
    uri = "./Vendor/MSFT/Policy/Config/BitLocker/RequireDeviceEncryption"
    alerts = setting_error_alerts([_setting(error=CorrelatedError(error_code=1), oma_uri=uri)])
    assert alerts[0]["affected_items"] == [uri]


def test_only_failed_packages_alert():
    packages = [
        _package(70, "Enforcement Completed"),
        _package(30, "Download Failed"),
        _package(60, "Enforcement Failed"),
        _package(None, "Busy"),
    ]
    alerts = package_failure_alerts(packages)
    assert [a["severity"] for a in alerts] == ["CRITICAL", "CRITICAL"]
    assert alerts[1]["message"] == "{P}: Enforcement Failed"


def test_rollups():
    alerts = [
        {"severity": "WARNING", "category": "policy"},
        {"severity": "CRITICAL", "category": "software"},
        {"severity": "info", "category": "Policy"},
    ]
    summary = summarize_alerts(alerts)
    assert summary == {
        "total": 3,
        "critical_count": 1,
        "warning_count": 1,
        "info_count": 1,
        "by_category": {"policy": 2, "software": 1},
    }
    assert health_rollup(alerts) == "CRITICAL"
    assert health_rollup(alerts[:1]) == "WARNING"
    assert compute_report_rollups([])["health"] == "HEALTHY"

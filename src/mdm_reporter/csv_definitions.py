"""Declarative CSV export definitions for policy reports."""

from typing import Any

CSV_DEFINITIONS: list[dict[str, Any]] = [
    {
        "report_name": "mdm_policy_settings",
        "data_path": "settings",
        "headers": [
            "Scope",
            "Policy Area",
            "Setting Name",
            "Value",
            "Default Value",
            "Policy Type",
            "Winning Provider",
            "Error Code",
            "OMA URI",
            "Reg Key Path",
            "Reg Value Name",
            "Source File",
        ],
        "sort_by": "Policy Area",
    },
    {
        "report_name": "mdm_installed_packages",
        "data_path": "packages",
        "headers": [
            "Package Id",
            "Package Type",
            "Status",
            "Last Error",
            "Version",
            "Retry Index",
            "Retry Max",
            "Command Line",
        ],
        "sort_by": "Package Id",
    },
]


def get_definitions() -> list[dict[str, Any]]:
    return list(CSV_DEFINITIONS)


def csv_rows(flat_report: dict[str, Any], data_path: str) -> list[dict[str, Any]]:
    """Rows for one definition; nested error dicts contribute ``error_code``."""
    rows = []
    for item in flat_report.get(data_path) or []:
        if not isinstance(item, dict):
            continue
        row = dict(item)
        error = row.get("error")
        row["error_code"] = error.get("error_code") if isinstance(error, dict) else None
        rows.append(row)
    return rows

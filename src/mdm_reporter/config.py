"""Reporter configuration: defaults, YAML loading and validation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mdm_reporter.exceptions import ConfigError

logger = logging.getLogger(__name__)

# User-level config file
USER_CONFIG_PATH = Path.home() / ".config" / "mdm_reporter" / "config.yaml"

DEFAULT_DOCS_URL_TEMPLATE = "https://learn.microsoft.com/en-us/windows/client-management/mdm/policy-csp-{key}"


class ReporterConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Acquisition
    diag_tool_path: str = r"C:\Windows\System32\MdmDiagnosticsTool.exe"
    diag_output_dir: str = r"C:\ProgramData\mdm_reporter\MDMDiag"
    diag_report_filename: str = "MDMDiagReport.xml"
    acquisition_timeout: float = Field(default=120.0, gt=0)
    acquisition_poll_interval: float = Field(default=1.0, gt=0)

    # Device identity
    enrollment_task_path: str = r"\Microsoft\Windows\EnterpriseMgmt"
    enrollment_task_name: str = "PushLaunch"
    primary_channel_label: str = "Intune"

    # Identifier filtering
    excluded_namespaces: list[str] = Field(
        default_factory=lambda: ["EnterpriseDesktopAppManagement/MSI", "WMIBridge"]
    )

    # Documentation links
    docs_url_template: str = DEFAULT_DOCS_URL_TEMPLATE
    docs_probe_timeout: float = Field(default=5.0, gt=0)
    connectivity_probe_url: str = "https://learn.microsoft.com"

    @field_validator("docs_url_template")
    @classmethod
    def _template_has_key(cls, value: str) -> str:
        if "{key}" not in value:
            raise ValueError("docs_url_template must contain a '{key}' placeholder")
        return value

    @property
    def diag_report_path(self) -> Path:
        return Path(self.diag_output_dir) / self.diag_report_filename


def load_config(path: str | Path | None = None) -> ReporterConfig:
    """Load configuration from *path*, else the user config file, else defaults.

    An explicitly given path must exist. The user-level file is optional.
    """
    if path is not None:
        source = Path(path)
        if not source.is_file():
            raise ConfigError("Config file not found", {"path": str(source)})
    elif USER_CONFIG_PATH.is_file():
        source = USER_CONFIG_PATH
    else:
        logger.debug("No config file found; using built-in defaults")
        return ReporterConfig()

    try:
        with open(source, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read config: {exc}", {"path": str(source)}) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Config file is not a YAML mapping", {"path": str(source)})

    try:
        config = ReporterConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config: {exc}", {"path": str(source)}) from exc

    logger.debug("Loaded config from %s", source)
    return config

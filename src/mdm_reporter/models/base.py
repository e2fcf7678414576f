from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict


class MetadataModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    host: Optional[str] = None
    report_type: str = "mdm_policy"
    source_document: Optional[str] = None
    device_enrollment_id: Optional[str] = None
    generated_at: str = Field(default_factory=lambda: datetime.now(tz=timezone.utc).isoformat())


class AlertModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    severity: str
    category: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)
    affected_items: list[Any] = Field(default_factory=list)


class SummaryModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    settings_total: int = 0
    settings_with_errors: int = 0
    policy_areas: int = 0
    enrollments: int = 0
    packages_total: int = 0
    packages_failed: int = 0
    total: int = 0
    critical_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)

from pydantic import BaseModel, ConfigDict, Field

from .base import AlertModel, MetadataModel, SummaryModel
from .records import InstalledPackageRecord, NormalizedSettingRecord


class MdmPolicyReportModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    metadata: MetadataModel
    health: str = "UNKNOWN"
    summary: SummaryModel
    alerts: list[AlertModel] = Field(default_factory=list)
    settings: list[NormalizedSettingRecord] = Field(default_factory=list)
    packages: list[InstalledPackageRecord] = Field(default_factory=list)

from pydantic import BaseModel, Field
from typing import Literal


class AccuRevConfig(BaseModel):
    exe_path: str = "accurev"
    username: str = ""
    password_env: str = "ACCUREV_PASSWORD"
    timeout: float | None = Field(default=300.0, gt=0)
    path_separator: Literal["\\", "/"] = "\\"
    epoch_timestamps: bool = False


class FieldMappingConfig(BaseModel):
    issue_id: str = "issueNum"
    release: str = "targetRelease"
    title: str = "shortDescription"
    description: str = "description"
    status: str = "status"


class AccuWorkConfig(BaseModel):
    depot: str = ""
    fields: FieldMappingConfig = Field(default_factory=FieldMappingConfig)
    closed_statuses: list[str] = Field(default_factory=lambda: ["Closed"])
    filter_category: str | None = None
    category_id_filter: list[str] = Field(default_factory=list)


class AccuBridgeConfig(BaseModel):
    accurev: AccuRevConfig = Field(default_factory=AccuRevConfig)
    accuwork: AccuWorkConfig = Field(default_factory=AccuWorkConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"

"""System settings and system log schemas."""

from typing import Any, Dict, Literal, Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

from wms.schemas.common import not_null

SettingType = Literal["string", "number", "boolean", "json"]
LogLevel = Literal["debug", "info", "warning", "error", "critical"]


# ========== settings ==========

class SettingCreate(BaseModel):
    key: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-zA-Z0-9_.\-]+$")
    value: Optional[str] = None
    type: SettingType = "string"
    description: Optional[str] = None
    group: str = Field("general", max_length=50)
    is_public: bool = False
    is_editable: bool = True


class SettingUpdate(BaseModel):
    value: Optional[str] = None
    type: Optional[SettingType] = None
    description: Optional[str] = None
    group: Optional[str] = Field(None, max_length=50)
    is_public: Optional[bool] = None
    is_editable: Optional[bool] = None

    check_not_null = not_null("type", "group", "is_public", "is_editable")


class SettingResponse(BaseModel):
    id: int
    key: str
    value: Optional[str] = None
    type: str
    description: Optional[str] = None
    group: str
    is_public: bool
    is_editable: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SettingListData(BaseModel):
    settings: List[SettingResponse]
    total: int


class PublicSetting(BaseModel):
    key: str
    value: Optional[str] = None
    type: str

    class Config:
        from_attributes = True


class SettingGroup(BaseModel):
    group: str
    count: int


# ========== logs ==========

class SystemLogCreate(BaseModel):
    level: LogLevel = "info"
    action: str = Field(..., min_length=1, max_length=100)
    message: str = Field(..., min_length=1)
    context: Optional[Dict[str, Any]] = None
    module: Optional[str] = Field(None, max_length=50)
    entity_type: Optional[str] = Field(None, max_length=50)
    entity_id: Optional[str] = Field(None, max_length=64)


class SystemLogResponse(BaseModel):
    id: int
    level: str
    action: str
    message: str
    context: Optional[Dict[str, Any]] = None
    user_id: Optional[int] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    module: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SystemLogListData(BaseModel):
    logs: List[SystemLogResponse]
    total: int


class SystemLogStats(BaseModel):
    total: int
    by_level: Dict[str, int]
    by_module: Dict[str, int]
    by_action: Dict[str, int]

from typing import Any, Dict, Literal, Optional, List
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

Priority = Literal["low", "normal", "high", "urgent"]


class NotificationCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    data: Optional[Dict[str, Any]] = None
    user_id: Optional[int] = Field(None, description="defaults to the current user")
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    status: str = Field("pending", max_length=20)
    priority: Priority = "normal"
    metadata: Optional[Dict[str, Any]] = None


class NotificationResponse(BaseModel):
    id: int
    type: str
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    user_id: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str
    priority: str
    sent_at: Optional[datetime] = None
    read_at: Optional[datetime] = None
    retry_count: int
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class NotificationListData(BaseModel):
    notifications: List[NotificationResponse]
    total: int
    unread: int = 0

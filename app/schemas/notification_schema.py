# app/schemas/notification_schema.py

import enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.models.notification import SeverityEnum

class NotificationOut(BaseModel):
    """
    用於 API 回傳的通知格式
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: Optional[str] = None
    type: str
    title: str
    message: Optional[str] = None
    severity: SeverityEnum = SeverityEnum.INFO
    data: Dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    created_at: datetime

    # 資料庫裡的 data 可能是 NULL，輸出時一律是 mapping
    @field_validator("data", mode="before")
    @classmethod
    def default_empty_data(cls, value: Any) -> Any:
        return {} if value is None else value


class NotificationListOut(BaseModel):
    notifications: List[NotificationOut]
    unread_count: int = 0


class NotificationEnvelope(BaseModel):
    # id 不存在時為 None
    notification: Optional[NotificationOut] = None


class MessageOut(BaseModel):
    message: str


class ReadAllOut(MessageOut):
    updated: int = 0


class NotificationFilter(BaseModel):
    """列表查詢條件 (全部以 AND 組合)"""
    user_id: Optional[str] = None
    unread_only: bool = False
    type: Optional[str] = None
    limit: int = 50
    offset: int = 0


class ReadAllScope(str, enum.Enum):
    ALL = "all"    # 影響所有使用者的通知
    USER = "user"


class ReadAllRequest(BaseModel):
    """
    PUT /notifications/read-all 的 body。
    沒有 user_id 就是 ReadAllScope.ALL。
    user_id 可能以數字送來 (e.g. 1)，一律轉成字串。
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    user_id: Optional[str] = None

    @property
    def scope(self) -> ReadAllScope:
        return ReadAllScope.USER if self.user_id else ReadAllScope.ALL

# app/models/notification.py

import enum
import uuid
from sqlalchemy import Column, String, TEXT, BOOLEAN, CHAR, JSON, TIMESTAMP, Enum, func
from app.core.database import Base

class SeverityEnum(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # 為 NULL 時代表廣播 / 系統通知
    user_id = Column(String(64), nullable=True, index=True)

    # 分類標籤 (e.g. training_complete, device_offline)，不做列舉檢查
    type = Column(String(50), nullable=False)

    title = Column(String(255), nullable=False)
    message = Column(TEXT)
    severity = Column(
        # CHECK constraint：外部寫入者只能使用 info / warning / error
        Enum(
            SeverityEnum,
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            create_constraint=True,
            name="ck_notifications_severity",
        ),
        default=SeverityEnum.INFO,
        nullable=False,
    )

    # 任意結構的附加資料；讀出時由 schema 把 NULL 轉成 {}
    data = Column(JSON, nullable=True, default=dict)

    # 只會由 False 變成 True
    is_read = Column(BOOLEAN, default=False, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

# app/repositories/notification_repo.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func
from typing import List, Optional

from app.models.notification import Notification
from app.schemas.notification_schema import NotificationFilter

class NotificationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_notifications(self, filters: NotificationFilter) -> List[Notification]:
        """
        依條件列出通知 (依時間降序排列)，套用 offset / limit 分頁
        """
        stmt = select(Notification)
        if filters.user_id:
            stmt = stmt.where(Notification.user_id == filters.user_id)
        if filters.unread_only:
            stmt = stmt.where(Notification.is_read == False)  # noqa: E712
        if filters.type:
            stmt = stmt.where(Notification.type == filters.type)

        stmt = (
            stmt.order_by(Notification.created_at.desc())
            .offset(filters.offset)
            .limit(filters.limit)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def count_unread(self, user_id: Optional[str] = None) -> int:
        """
        未讀數量；只依 user_id 篩選，不受 type / unread_only 影響
        """
        stmt = select(func.count(Notification.id)).where(Notification.is_read == False)  # noqa: E712
        if user_id:
            stmt = stmt.where(Notification.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def get_notification_by_id(self, notification_id: str) -> Optional[Notification]:
        # populate_existing: 以資料庫的值覆蓋 session 中已載入的物件
        stmt = (
            select(Notification)
            .where(Notification.id == notification_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def mark_as_read(self, notification_id: str) -> int:
        """
        將單一通知設為已讀，回傳受影響筆數 (id 不存在時為 0)
        """
        stmt = (
            update(Notification)
            .where(Notification.id == notification_id)
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    async def mark_all_as_read(self, user_id: Optional[str] = None) -> int:
        """
        user_id 為 None 時不加條件，整張表都會被標記
        """
        stmt = update(Notification).values(is_read=True)
        if user_id:
            stmt = stmt.where(Notification.user_id == user_id)
        result = await self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount

    async def delete_notification(self, notification_id: str) -> int:
        stmt = delete(Notification).where(Notification.id == notification_id)
        result = await self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount

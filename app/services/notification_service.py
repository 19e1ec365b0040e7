# app/services/notification_service.py

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import ErrorCode, ServiceError
from app.repositories.notification_repo import NotificationRepository
from app.schemas.notification_schema import (
    NotificationFilter,
    NotificationListOut,
    NotificationOut,
    ReadAllRequest,
    ReadAllScope,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

class NotificationService:
    """
    通知的列表 / 已讀 / 刪除。
    不快取任何狀態，每個請求各自建立 (NotificationService(db))。
    通知由其他模組寫入，這裡不負責建立。
    """

    def __init__(self, db: AsyncSession, timeout: Optional[float] = None):
        self.db = db
        self.repo = NotificationRepository(db)
        self.timeout = settings.STORE_TIMEOUT_SECONDS if timeout is None else timeout

    # commit 不設上限：被取消的 commit 仍可能在 driver 執行緒中完成
    async def _bounded(self, operation: Awaitable[T]) -> T:
        return await asyncio.wait_for(operation, timeout=self.timeout)

    async def list_notifications(self, filters: NotificationFilter) -> NotificationListOut:
        """
        (API 用) 取得一頁通知，以及該使用者的未讀總數
        """
        try:
            notifications = await self._bounded(self.repo.list_notifications(filters))
            unread_count = await self._bounded(self.repo.count_unread(filters.user_id))
        except (SQLAlchemyError, asyncio.TimeoutError) as e:
            await self.db.rollback()
            logger.error(f"列出通知失敗: {e}", exc_info=True)
            raise ServiceError(ErrorCode.LIST_ERROR, "Failed to list notifications")

        return NotificationListOut(
            notifications=[NotificationOut.model_validate(n) for n in notifications],
            unread_count=unread_count or 0,
        )

    async def mark_notification_as_read(self, notification_id: str) -> Optional[NotificationOut]:
        """
        (API 用) 將通知設為已讀，回傳更新後重新讀取的通知。
        UPDATE 與重新讀取在同一個 transaction 內；id 不存在時回傳 None。
        """
        try:
            updated = await self._bounded(self.repo.mark_as_read(notification_id))
            notification = await self._bounded(self.repo.get_notification_by_id(notification_id))
            await self.db.commit()
        except (SQLAlchemyError, asyncio.TimeoutError) as e:
            await self.db.rollback()
            logger.error(f"標記已讀失敗: {e}", exc_info=True)
            raise ServiceError(ErrorCode.UPDATE_ERROR, "Failed to mark notification as read")

        if notification is None:
            logger.info(f"標記已讀: 通知 {notification_id} 不存在 (updated={updated})")
            return None
        logger.info(f"標記已讀: {notification_id}")
        return NotificationOut.model_validate(notification)

    async def mark_all_as_read(self, request: ReadAllRequest) -> int:
        """
        (API 用) 批次設為已讀，回傳受影響筆數。
        scope 為 ALL 時會影響所有使用者的通知。
        """
        if request.scope is ReadAllScope.ALL:
            logger.warning("標記全部已讀: 未指定 user_id，將影響所有使用者的通知")
            user_id = None
        else:
            user_id = request.user_id

        try:
            updated = await self._bounded(self.repo.mark_all_as_read(user_id))
            await self.db.commit()
        except (SQLAlchemyError, asyncio.TimeoutError) as e:
            await self.db.rollback()
            logger.error(f"標記全部已讀失敗: {e}", exc_info=True)
            raise ServiceError(ErrorCode.UPDATE_ERROR, "Failed to mark all as read")

        logger.info(f"標記全部已讀: scope={request.scope.value}, user_id={user_id}, updated={updated}")
        return updated

    async def delete_notification(self, notification_id: str) -> None:
        """
        (API 用) 刪除通知；id 不存在時不視為錯誤
        """
        try:
            deleted = await self._bounded(self.repo.delete_notification(notification_id))
            await self.db.commit()
        except (SQLAlchemyError, asyncio.TimeoutError) as e:
            await self.db.rollback()
            logger.error(f"刪除通知失敗: {e}", exc_info=True)
            raise ServiceError(ErrorCode.DELETE_ERROR, "Failed to delete notification")

        logger.info(f"刪除通知: {notification_id} (deleted={deleted})")

# app/routers/notification_router.py

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.services.notification_service import NotificationService
from app.schemas.notification_schema import (
    MessageOut,
    NotificationEnvelope,
    NotificationFilter,
    NotificationListOut,
    ReadAllOut,
    ReadAllRequest,
)

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"]
)

@router.get(
    "",
    response_model=NotificationListOut,
    summary="列出通知與未讀數量"
)
async def list_notifications(
    user_id: Optional[str] = None,
    unread_only: Optional[str] = None,
    type: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    db: AsyncSession = Depends(get_db)
):
    """
    依 user_id / unread_only / type 篩選 (AND)，依建立時間倒序。
    unread_count 只依 user_id 計算，不受其他條件影響。
    """
    filters = NotificationFilter(
        user_id=user_id,
        unread_only=unread_only == "true",
        type=type,
        limit=limit,
        offset=offset,
    )
    service = NotificationService(db)
    return await service.list_notifications(filters)

@router.put(
    "/read-all",
    response_model=ReadAllOut,
    summary="將通知全部設為已讀"
)
async def mark_all_as_read(
    request: Optional[ReadAllRequest] = Body(None),
    db: AsyncSession = Depends(get_db)
):
    """
    body 帶 user_id 時只影響該使用者；不帶則影響所有使用者的通知。
    """
    service = NotificationService(db)
    updated = await service.mark_all_as_read(request or ReadAllRequest())
    return ReadAllOut(message="All notifications marked as read", updated=updated)

@router.put(
    "/{notification_id}/read",
    response_model=NotificationEnvelope,
    summary="將通知設為已讀"
)
async def mark_as_read(
    notification_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    回傳更新後的通知；id 不存在時 notification 為 null。
    """
    service = NotificationService(db)
    notification = await service.mark_notification_as_read(notification_id)
    return NotificationEnvelope(notification=notification)

@router.delete(
    "/{notification_id}",
    response_model=MessageOut,
    summary="刪除通知"
)
async def delete_notification(
    notification_id: str,
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    await service.delete_notification(notification_id)
    return MessageOut(message="Notification deleted")

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from app.core.config import settings
from app.core.exceptions import ErrorCode, ServiceError
from app.schemas.notification_schema import NotificationFilter, ReadAllRequest
from app.services.notification_service import NotificationService


def run_with_service(action, timeout=None):
    """Run ``action(service)`` on a fresh event loop and session."""
    async def _run():
        engine = create_async_engine(settings.DATABASE_URL, poolclass=NullPool)
        session_factory = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
        try:
            async with session_factory() as session:
                return await action(NotificationService(session, timeout=timeout))
        finally:
            await engine.dispose()
    return asyncio.run(_run())


def test_list_orders_by_created_at_descending(example_rows):
    result = run_with_service(lambda s: s.list_notifications(NotificationFilter()))
    assert [n.id for n in result.notifications] == ["A", "B", "C"]
    assert result.unread_count == 2


def test_unread_count_defaults_to_zero_for_unknown_user(example_rows):
    result = run_with_service(lambda s: s.list_notifications(NotificationFilter(user_id="nobody")))
    assert result.notifications == []
    assert result.unread_count == 0


def test_mark_read_then_list_shows_read(example_rows):
    notification = run_with_service(lambda s: s.mark_notification_as_read("C"))
    assert notification.id == "C"
    assert notification.is_read is True
    assert notification.data == {"ref": "C"}

    result = run_with_service(lambda s: s.list_notifications(NotificationFilter(user_id="2")))
    assert result.notifications[0].is_read is True
    assert result.unread_count == 0


def test_mark_read_is_idempotent(example_rows):
    first = run_with_service(lambda s: s.mark_notification_as_read("B"))
    second = run_with_service(lambda s: s.mark_notification_as_read("B"))
    assert first.is_read is True
    assert second.is_read is True


def test_mark_read_unknown_id_returns_none(example_rows):
    assert run_with_service(lambda s: s.mark_notification_as_read("missing")) is None


def test_mark_all_read_scoped_to_user_leaves_others(example_rows, fetch):
    updated = run_with_service(lambda s: s.mark_all_as_read(ReadAllRequest(user_id="2")))
    assert updated == 1
    assert fetch("C").is_read is True
    assert fetch("A").is_read is False


def test_mark_all_read_unscoped_marks_every_user(example_rows, fetch):
    updated = run_with_service(lambda s: s.mark_all_as_read(ReadAllRequest()))
    assert updated == 3
    assert {fetch(i).is_read for i in ("A", "B", "C")} == {True}


def test_delete_then_list_never_returns_id(example_rows):
    run_with_service(lambda s: s.delete_notification("A"))
    result = run_with_service(lambda s: s.list_notifications(NotificationFilter()))
    assert "A" not in [n.id for n in result.notifications]
    assert result.unread_count == 1


def test_delete_unknown_id_does_not_raise(example_rows):
    run_with_service(lambda s: s.delete_notification("missing"))


def test_slow_store_is_reported_as_update_error(example_rows, fetch):
    async def action(service):
        async def slow(user_id):
            await asyncio.sleep(1)
            return 0
        service.repo.mark_all_as_read = slow
        return await service.mark_all_as_read(ReadAllRequest(user_id="1"))

    with pytest.raises(ServiceError) as exc_info:
        run_with_service(action, timeout=0.01)

    assert exc_info.value.code is ErrorCode.UPDATE_ERROR
    assert exc_info.value.status_code == 500
    assert fetch("A").is_read is False


def test_slow_list_is_reported_as_list_error(example_rows):
    async def action(service):
        async def slow(filters):
            await asyncio.sleep(1)
            return []
        service.repo.list_notifications = slow
        return await service.list_notifications(NotificationFilter())

    with pytest.raises(ServiceError) as exc_info:
        run_with_service(action, timeout=0.01)

    assert exc_info.value.code is ErrorCode.LIST_ERROR
    assert exc_info.value.message == "Failed to list notifications"


def test_slow_delete_is_reported_as_delete_error(example_rows, fetch):
    async def action(service):
        async def slow(notification_id):
            await asyncio.sleep(1)
            return 0
        service.repo.delete_notification = slow
        return await service.delete_notification("A")

    with pytest.raises(ServiceError) as exc_info:
        run_with_service(action, timeout=0.01)

    assert exc_info.value.code is ErrorCode.DELETE_ERROR
    assert fetch("A") is not None

import os
import sys
import tempfile
from datetime import datetime, timedelta

# Ensure backend package is on sys.path for imports during tests
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Settings are read when app.core.config is imported, so the test database
# must be configured before any app module is loaded.
DB_PATH = os.path.join(tempfile.mkdtemp(prefix="fedlearn-tests-"), "notifications.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.core.database import Base
from app.models.notification import Notification

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0)
_UNSET = object()


def _make_notification(
    notification_id,
    user_id="1",
    is_read=False,
    minutes_ago=0,
    type="info",
    data=_UNSET,
    title=None,
):
    """Build a row; larger ``minutes_ago`` means older."""
    return Notification(
        id=notification_id,
        user_id=user_id,
        type=type,
        title=title or f"Notification {notification_id}",
        message=f"Body of {notification_id}",
        data={"ref": notification_id} if data is _UNSET else data,
        is_read=is_read,
        created_at=BASE_TIME - timedelta(minutes=minutes_ago),
    )


@pytest.fixture
def make_notification():
    return _make_notification


@pytest.fixture
def sync_engine():
    engine = create_engine(f"sqlite:///{DB_PATH}")
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def seed(sync_engine):
    def _seed(*rows):
        with Session(sync_engine) as session:
            session.add_all(rows)
            session.commit()
    return _seed


@pytest.fixture
def fetch(sync_engine):
    """Read a row straight from the database, bypassing the service."""
    def _fetch(notification_id):
        with Session(sync_engine) as session:
            return session.get(Notification, notification_id)
    return _fetch


@pytest.fixture
def example_rows(seed):
    # A(user=1, unread) newest, B(user=1, read), C(user=2, unread) oldest
    seed(
        _make_notification("A", user_id="1", is_read=False, minutes_ago=1, type="alert"),
        _make_notification("B", user_id="1", is_read=True, minutes_ago=2, type="info"),
        _make_notification("C", user_id="2", is_read=False, minutes_ago=3, type="alert"),
    )


@pytest.fixture
def client(sync_engine):
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client

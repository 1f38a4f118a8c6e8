"""Shared test fixtures and helpers."""

import os

# Keep the module-level engine off disk; tests bind their own engine below
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, enable_foreign_keys, get_db
from app.domain.bookings.router import get_notifier
from app.main import app
from app.services.notification_service import NotificationResult


class FakeNotifier:
    """Records notification calls instead of sending anything."""

    def __init__(self):
        self.created = []
        self.status_changes = []

    async def send_created(self, booking):
        self.created.append(booking)
        return NotificationResult()

    async def send_status_changed(self, booking, previous_status=""):
        self.status_changes.append((booking, previous_status))
        return NotificationResult()

    async def aclose(self):
        pass


def booking_payload(**overrides) -> dict:
    """A valid intake body; keyword arguments replace or add fields."""
    payload = {
        "brand": "Apple",
        "model": "iPhone 13",
        "service": "Screen Replacement",
        "selectedIssues": [" Cracked screen ", ""],
        "name": "Asha Rao",
        "phone": "9876543210",
        "email": "Asha@Example.com",
        "address": "12 Main St",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def client(session_factory, notifier):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def created_booking(client) -> dict:
    response = client.post("/bookings", json=booking_payload())
    assert response.status_code == 201
    return response.json()

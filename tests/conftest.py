"""Shared fixtures for the test-suite."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

TEST_DB_PATH = Path(__file__).parent / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)
os.environ.pop("SMTP_HOST", None)

from tourguide.config import Settings, reset_settings_cache  # noqa: E402
from tourguide.domain.entities import ChannelResult, DeliveryMessage, Reservation  # noqa: E402
from tourguide.infrastructure.email import DeliveryChannel  # noqa: E402

reset_settings_cache()


class RecordingChannel(DeliveryChannel):
    """Delivery channel double that records every message it receives."""

    def __init__(
        self,
        name: str,
        *,
        succeed: bool = True,
        error: Exception | None = None,
        message_id: str | None = "msg-1",
    ) -> None:
        self.name = name
        self.succeed = succeed
        self.error = error
        self.message_id = message_id
        self.messages: list[DeliveryMessage] = []

    async def deliver(self, message: DeliveryMessage) -> ChannelResult:
        self.messages.append(message)
        if self.error is not None:
            raise self.error
        if not self.succeed:
            return ChannelResult(success=False, error=f"{self.name} rejected the message")
        return ChannelResult(success=True, message_id=self.message_id)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url=os.environ["DATABASE_URL"],
        operator_email="ops@example.com",
        mail_reply_to="info@example.com",
        poller_retry_delay_seconds=0,
        _env_file=None,
    )


@pytest.fixture
def channel_factory():
    return RecordingChannel


@pytest.fixture
def make_reservation():
    def factory(**overrides) -> Reservation:
        values = {
            "id": "res-1",
            "service_id": "svc-1",
            "service_name": "Tour X",
            "service_type": "excursion",
            "full_name": "Ana Pérez",
            "email": "a@b.com",
            "phone": None,
            "participants": 2,
            "reservation_date": "2026-11-02",
            "reservation_time": "09:00",
        }
        values.update(overrides)
        return Reservation(**values)

    return factory


@pytest.fixture
def database():
    """Provide a clean schema in the test database."""

    from tourguide.infrastructure import database as database_module

    database_module.initialize_database()
    database_module.Base.metadata.drop_all(bind=database_module.engine, checkfirst=True)
    database_module.Base.metadata.create_all(bind=database_module.engine)
    yield database_module
    database_module.Base.metadata.drop_all(bind=database_module.engine, checkfirst=True)


@pytest.fixture
def db_session(database):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


def pytest_sessionfinish(session, exitstatus) -> None:
    from tourguide.infrastructure import database as database_module

    database_module.engine.dispose()
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()

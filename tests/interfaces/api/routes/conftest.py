"""Fixtures for the HTTP and websocket route tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tourguide.main import create_app


@pytest.fixture
def primary_channel(channel_factory):
    return channel_factory("sendgrid", succeed=False)


@pytest.fixture
def secondary_channel(channel_factory):
    return channel_factory("smtp")


@pytest.fixture
def client(database, settings, primary_channel, secondary_channel):
    app = create_app(settings, channels=[primary_channel, secondary_channel])
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def drain(client):
    """Wait for the background notifications scheduled by the last requests."""

    def wait(timeout: float = 2.0) -> None:
        client.portal.call(client.app.state.task_runner.drain, timeout)

    return wait


@pytest.fixture
def reservation_payload():
    return {
        "service_id": "svc-1",
        "service_name": "Tour X",
        "full_name": "Ana Pérez",
        "email": "a@b.com",
        "participants": 2,
        "reservation_date": "2026-11-02",
        "reservation_time": "09:00",
        "price": 50.0,
    }

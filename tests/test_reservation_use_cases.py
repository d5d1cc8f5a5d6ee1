"""Tests for the reservation services backed by the SQLite test database."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from tourguide.application.errors import CONNECTION_ERROR, NOT_FOUND, VALIDATION_ERROR
from tourguide.application.use_cases.reservations import (
    create_reservation,
    get_reservation,
    get_reservation_stats,
    list_reservations,
    update_reservation,
)


def _payload(**overrides):
    data = {
        "service_id": "svc-1",
        "service_name": "Tour X",
        "full_name": "Ana Pérez",
        "email": "a@b.com",
        "participants": 2,
        "reservation_date": "2026-11-02",
        "reservation_time": "09:00",
    }
    data.update(overrides)
    return data


class _RecordingOrchestrator:
    def __init__(self) -> None:
        self.created = []
        self.updated = []

    def on_reservation_created(self, reservation) -> None:
        self.created.append(reservation)

    def on_reservation_updated(self, reservation, previous) -> None:
        self.updated.append((reservation, previous))


def test_create_reservation_applies_defaults_and_notifies(db_session) -> None:
    orchestrator = _RecordingOrchestrator()

    result = create_reservation(db_session, _payload(phone="  "), orchestrator)

    assert result.ok
    reservation = result.data
    assert reservation.id
    assert reservation.status == "pending"
    assert reservation.payment_status == "pending"
    assert reservation.service_type == "excursion"
    assert reservation.phone is None
    assert reservation.created_at is not None
    assert orchestrator.created == [reservation]


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": ""},
        {"email": "not-an-email"},
        {"service_name": None},
        {"participants": 0},
        {"status": "archived"},
        {"price": "10"},
        {"price": -5},
        {"participants": "2"},
    ],
)
def test_create_reservation_rejects_invalid_payloads(db_session, overrides) -> None:
    orchestrator = _RecordingOrchestrator()

    result = create_reservation(db_session, _payload(**overrides), orchestrator)

    assert not result.ok
    assert result.error.code == VALIDATION_ERROR
    assert orchestrator.created == []


def test_create_reservation_reports_connection_errors() -> None:
    session = MagicMock()
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("connection reset"))
    orchestrator = _RecordingOrchestrator()

    result = create_reservation(session, _payload(), orchestrator)

    assert result.error.code == CONNECTION_ERROR
    assert result.error.retryable is True
    session.rollback.assert_called_once()
    assert orchestrator.created == []


def test_get_reservation_not_found(db_session) -> None:
    result = get_reservation(db_session, "missing")

    assert result.error.code == NOT_FOUND


def test_update_reservation_notifies_status_changes(db_session) -> None:
    created = create_reservation(db_session, _payload()).data
    orchestrator = _RecordingOrchestrator()

    result = update_reservation(
        db_session,
        created.id,
        {"status": "confirmed", "payment_link": "https://pay.example.com/1"},
        orchestrator,
    )

    assert result.ok
    assert result.data.status == "confirmed"
    assert result.data.payment_link == "https://pay.example.com/1"
    updated, previous = orchestrator.updated[0]
    assert previous.status == "pending"
    assert updated.status == "confirmed"


def test_update_reservation_without_transition_is_silent(db_session) -> None:
    created = create_reservation(db_session, _payload()).data
    orchestrator = _RecordingOrchestrator()

    result = update_reservation(
        db_session, created.id, {"admin_notes": "VIP", "status": None}, orchestrator
    )

    assert result.data.admin_notes == "VIP"
    assert result.data.status == "pending"
    assert orchestrator.updated == []


def test_update_reservation_errors(db_session) -> None:
    created = create_reservation(db_session, _payload()).data

    missing = update_reservation(db_session, "missing", {"status": "confirmed"})
    invalid = update_reservation(db_session, created.id, {"payment_status": "refunded"})
    bad_price = update_reservation(db_session, created.id, {"price": "10"})

    assert missing.error.code == NOT_FOUND
    assert invalid.error.code == VALIDATION_ERROR
    assert bad_price.error.code == VALIDATION_ERROR


def test_list_reservations_filters_and_paginates(db_session) -> None:
    for index in range(3):
        create_reservation(db_session, _payload(email=f"guest{index}@example.com"))
    create_reservation(db_session, _payload(service_id="svc-2", status="confirmed"))

    first_page = list_reservations(db_session, page=1, limit=2).data
    filtered = list_reservations(db_session, status="confirmed").data
    by_email = list_reservations(db_session, email="guest1").data

    assert first_page.total == 4
    assert len(first_page.items) == 2
    assert [item.service_id for item in filtered.items] == ["svc-2"]
    assert [item.email for item in by_email.items] == ["guest1@example.com"]


def test_reservation_stats_count_each_status(db_session) -> None:
    create_reservation(db_session, _payload())
    create_reservation(db_session, _payload(status="confirmed"))
    create_reservation(db_session, _payload(status="confirmed"))

    stats = get_reservation_stats(db_session)

    assert stats.total == 3
    assert stats.pending == 1
    assert stats.confirmed == 2
    assert stats.cancelled == 0


def test_reservation_stats_fall_back_to_zeros() -> None:
    session = MagicMock()
    session.query.side_effect = OperationalError("SELECT", {}, Exception("timeout"))

    stats = get_reservation_stats(session)

    assert stats.total == 0

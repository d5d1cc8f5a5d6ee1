"""Tests for the reservation event fan-out."""

from __future__ import annotations

from dataclasses import replace

import pytest

from tourguide.application.use_cases.notifications import ReservationEventOrchestrator
from tourguide.domain.entities import AdminNotice
from tourguide.infrastructure.email import TieredEmailDispatcher
from tourguide.infrastructure.notifications import BackgroundTaskRunner, EmergencyFeed


class _NoticeStore:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.notices: list[AdminNotice] = []

    def insert(self, notice: AdminNotice) -> AdminNotice:
        if self.fail:
            raise RuntimeError("notification table unavailable")
        self.notices.append(notice)
        return notice


@pytest.fixture
def wiring(settings, channel_factory):
    def build(*, primary_ok=True, secondary_ok=True, store_fails=False, bind=True):
        primary = channel_factory("sendgrid", succeed=primary_ok)
        secondary = channel_factory("smtp", succeed=secondary_ok)
        runner = BackgroundTaskRunner()
        if bind:
            runner.bind()
        feed = EmergencyFeed(seed=False)
        store = _NoticeStore(fail=store_fails)
        orchestrator = ReservationEventOrchestrator(
            dispatcher=TieredEmailDispatcher([primary, secondary], settings),
            feed=feed,
            notices=store,
            runner=runner,
        )
        return orchestrator, primary, secondary, runner, feed, store

    return build


@pytest.mark.anyio
async def test_created_reservation_falls_back_to_secondary(wiring, make_reservation) -> None:
    orchestrator, primary, secondary, runner, feed, store = wiring(primary_ok=False)
    reservation = make_reservation(email="a@b.com", participants=2, service_name="Tour X")

    orchestrator.on_reservation_created(reservation)

    # Nothing has been sent yet: the caller does not wait for the fan-out.
    assert primary.messages == []
    assert secondary.messages == []
    assert runner.pending == 4

    await runner.drain(timeout=2.0)

    confirmations = [m for m in secondary.messages if m.kind == "confirmation"]
    assert len(confirmations) == 1
    assert confirmations[0].recipient == "a@b.com"
    assert "Tour X" in confirmations[0].subject
    assert [m.subject for m in primary.messages if m.kind == "confirmation"] == [
        confirmations[0].subject
    ]

    notices = [m for m in secondary.messages if m.kind == "admin_notice"]
    assert notices[0].recipient == "ops@example.com"
    assert notices[0].reply_to == "a@b.com"

    assert len(store.notices) == 1
    assert store.notices[0].type == "reservation"
    assert [entry.type for entry in feed.list()] == ["reservation"]


@pytest.mark.anyio
async def test_feed_entry_survives_total_delivery_failure(wiring, make_reservation) -> None:
    orchestrator, primary, secondary, runner, feed, store = wiring(
        primary_ok=False, secondary_ok=False, store_fails=True
    )

    orchestrator.on_reservation_created(make_reservation())
    await runner.drain(timeout=2.0)

    assert len(primary.messages) == 2
    assert len(secondary.messages) == 2
    assert store.notices == []
    assert feed.list()[0].metadata["service_name"] == "Tour X"


def test_feed_entry_is_published_inline_without_event_loop(wiring, make_reservation) -> None:
    orchestrator, primary, secondary, runner, feed, store = wiring(bind=False)

    orchestrator.on_reservation_created(make_reservation())

    assert [entry.type for entry in feed.list()] == ["reservation"]
    assert primary.messages == []


@pytest.mark.anyio
async def test_confirmed_status_with_payment_link_sends_payment_email(
    wiring, make_reservation
) -> None:
    orchestrator, primary, secondary, runner, feed, store = wiring()
    previous = make_reservation(price=50.0, payment_link="https://pay.example.com/1")
    updated = replace(previous, status="confirmed")

    orchestrator.on_reservation_updated(updated, previous)
    await runner.drain(timeout=2.0)

    assert [m.kind for m in primary.messages] == ["payment_link"]
    assert store.notices[0].title == "Reserva confirmada"
    assert store.notices[0].metadata["previous_status"] == "pending"


@pytest.mark.anyio
async def test_cancelled_status_sends_status_update(wiring, make_reservation) -> None:
    orchestrator, primary, secondary, runner, feed, store = wiring()
    previous = make_reservation()
    updated = replace(previous, status="cancelled", admin_notes="Sin disponibilidad")

    orchestrator.on_reservation_updated(updated, previous)
    await runner.drain(timeout=2.0)

    assert [m.kind for m in primary.messages] == ["confirmation"]
    assert "cancelada" in primary.messages[0].html
    assert "Sin disponibilidad" in primary.messages[0].html


@pytest.mark.anyio
async def test_paid_status_publishes_payment_and_confirms(wiring, make_reservation) -> None:
    orchestrator, primary, secondary, runner, feed, store = wiring()
    previous = make_reservation(price=50.0)
    updated = replace(previous, payment_status="paid")

    orchestrator.on_reservation_updated(updated, previous)
    await runner.drain(timeout=2.0)

    entry = feed.list()[0]
    assert entry.type == "success"
    assert entry.metadata["amount"] == 100.0
    assert [m.subject for m in primary.messages] == [
        "Pago Confirmado - Tour X | QR Tour Guide"
    ]
    assert store.notices == []


@pytest.mark.anyio
async def test_unchanged_statuses_schedule_nothing(wiring, make_reservation) -> None:
    orchestrator, primary, secondary, runner, feed, store = wiring()
    reservation = make_reservation()

    orchestrator.on_reservation_updated(replace(reservation, admin_notes="x"), reservation)

    assert runner.pending == 0
    assert feed.list() == []


class _BrokenRunner:
    """Runner that refuses the tasks named in ``failing``."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing
        self.scheduled: list[str] = []

    def spawn(self, factory, *, name: str) -> None:
        if self.failing is None or name in self.failing:
            raise RuntimeError("scheduler closed")
        self.scheduled.append(name)


def _orchestrator_with(runner, settings, channel_factory):
    feed = EmergencyFeed(seed=False)
    orchestrator = ReservationEventOrchestrator(
        dispatcher=TieredEmailDispatcher([channel_factory("sendgrid")], settings),
        feed=feed,
        notices=_NoticeStore(),
        runner=runner,
    )
    return orchestrator, feed


def test_failed_schedule_does_not_skip_other_tasks(
    settings, channel_factory, make_reservation
) -> None:
    runner = _BrokenRunner(failing={"admin-notice"})
    orchestrator, feed = _orchestrator_with(runner, settings, channel_factory)

    orchestrator.on_reservation_created(make_reservation())

    assert sorted(runner.scheduled) == [
        "customer-confirmation",
        "feed-entry",
        "operator-notice",
    ]


def test_feed_entry_is_published_when_scheduling_fails(
    settings, channel_factory, make_reservation
) -> None:
    runner = _BrokenRunner()
    orchestrator, feed = _orchestrator_with(runner, settings, channel_factory)

    orchestrator.on_reservation_created(make_reservation())

    assert runner.scheduled == []
    assert [entry.type for entry in feed.list()] == ["reservation"]

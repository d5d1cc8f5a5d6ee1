"""Persistence helpers for reservation entities."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from tourguide.domain.entities import PAYMENT_STATUS_PAID, Reservation
from tourguide.infrastructure.models import ReservationModel
from tourguide.utils import ensure_app_naive_datetime, ensure_app_timezone

_UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "payment_status",
        "admin_notes",
        "price",
        "payment_link",
        "reservation_date",
        "reservation_time",
        "participants",
        "special_requests",
        "phone",
        "updated_at",
    }
)


class ReservationRepository:
    """Provide CRUD operations for :class:`Reservation` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, reservation: Reservation) -> Reservation:
        model = ReservationModel()
        self._apply_entity_to_model(model, reservation)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, reservation_id: str) -> Reservation | None:
        model = self.session.get(ReservationModel, reservation_id)
        return self._to_entity(model) if model is not None else None

    def update(self, reservation_id: str, changes: Mapping[str, Any]) -> Reservation | None:
        """Apply ``changes`` to the stored row and return the updated entity."""

        model = self.session.get(ReservationModel, reservation_id)
        if model is None:
            return None
        for name, value in changes.items():
            if name not in _UPDATABLE_FIELDS:
                raise ValueError(f"El campo '{name}' no se puede actualizar")
            if name == "updated_at":
                value = ensure_app_naive_datetime(value)
            setattr(model, name, value)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list(
        self,
        *,
        status: str | None = None,
        service_id: str | None = None,
        email: str | None = None,
        offset: int = 0,
        limit: int | None = 50,
    ) -> tuple[Sequence[Reservation], int]:
        """Return a page of reservations and the total row count for the filters."""

        query = self.session.query(ReservationModel)
        if status:
            query = query.filter(ReservationModel.status == status)
        if service_id:
            query = query.filter(ReservationModel.service_id == service_id)
        if email:
            query = query.filter(ReservationModel.email.ilike(f"%{email}%"))

        total = query.count()
        query = query.order_by(ReservationModel.created_at.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()], total

    def count_by_status(self) -> dict[str, int]:
        rows = (
            self.session.query(ReservationModel.status, func.count(ReservationModel.id))
            .group_by(ReservationModel.status)
            .all()
        )
        return {status: int(count) for status, count in rows}

    def count_by_payment_status(self) -> dict[str, int]:
        rows = (
            self.session.query(
                ReservationModel.payment_status, func.count(ReservationModel.id)
            )
            .group_by(ReservationModel.payment_status)
            .all()
        )
        return {status: int(count) for status, count in rows}

    def paid_revenue(self) -> float:
        total = (
            self.session.query(
                func.coalesce(
                    func.sum(ReservationModel.price * ReservationModel.participants), 0
                )
            )
            .filter(ReservationModel.payment_status == PAYMENT_STATUS_PAID)
            .scalar()
        )
        return float(total or 0)

    def list_recent(self, limit: int = 5) -> Sequence[Reservation]:
        models = (
            self.session.query(ReservationModel)
            .order_by(ReservationModel.created_at.desc())
            .limit(limit)
            .all()
        )
        return [self._to_entity(model) for model in models]

    @staticmethod
    def _apply_entity_to_model(model: ReservationModel, reservation: Reservation) -> None:
        model.id = reservation.id
        model.service_id = reservation.service_id
        model.service_name = reservation.service_name
        model.service_type = reservation.service_type
        model.full_name = reservation.full_name
        model.email = reservation.email
        model.phone = reservation.phone
        model.participants = reservation.participants
        model.reservation_date = reservation.reservation_date
        model.reservation_time = reservation.reservation_time
        model.special_requests = reservation.special_requests
        model.admin_notes = reservation.admin_notes
        model.status = reservation.status
        model.payment_status = reservation.payment_status
        model.price = reservation.price
        model.payment_link = reservation.payment_link
        model.created_at = ensure_app_naive_datetime(reservation.created_at)
        model.updated_at = ensure_app_naive_datetime(reservation.updated_at)

    @staticmethod
    def _to_entity(model: ReservationModel) -> Reservation:
        return Reservation(
            id=model.id,
            service_id=model.service_id,
            service_name=model.service_name,
            service_type=model.service_type,
            full_name=model.full_name,
            email=model.email,
            phone=model.phone,
            participants=model.participants,
            reservation_date=model.reservation_date,
            reservation_time=model.reservation_time,
            special_requests=model.special_requests,
            admin_notes=model.admin_notes,
            status=model.status,
            payment_status=model.payment_status,
            price=model.price,
            payment_link=model.payment_link,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["ReservationRepository"]

"""Persistence helpers for admin notices."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Callable, Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from tourguide.domain.entities import AdminNotice
from tourguide.infrastructure.models import NotificationModel
from tourguide.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide CRUD operations for :class:`AdminNotice` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notice: AdminNotice) -> AdminNotice:
        model = NotificationModel()
        self._apply_entity_to_model(model, notice)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_for_audience(
        self, audience: str = "admin", *, limit: int | None = 50
    ) -> Sequence[AdminNotice]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.target_audience == audience)
            .filter(NotificationModel.status == "sent")
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def mark_as_read(self, notice_ids: Iterable[int]) -> None:
        ids = [notice_id for notice_id in notice_ids if notice_id is not None]
        if not ids:
            return
        self.session.query(NotificationModel).filter(
            NotificationModel.id.in_(ids)
        ).update({NotificationModel.is_read: True}, synchronize_session=False)
        self.session.commit()

    def count_for_audience(self, audience: str = "admin") -> tuple[int, int]:
        """Return ``(total, unread)`` notice counts for ``audience``."""

        base = self.session.query(func.count(NotificationModel.id)).filter(
            NotificationModel.target_audience == audience
        )
        total = base.scalar() or 0
        unread = base.filter(NotificationModel.is_read.is_(False)).scalar() or 0
        return int(total), int(unread)

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notice: AdminNotice) -> None:
        now = now_in_app_timezone()
        model.title = notice.title
        model.message = notice.message
        model.type = notice.type
        model.target_audience = notice.target_audience
        model.status = notice.status
        model.extra = notice.metadata or {}
        model.is_read = notice.is_read
        model.created_at = ensure_app_naive_datetime(notice.created_at or now)
        model.sent_at = ensure_app_naive_datetime(notice.sent_at or now)

    @staticmethod
    def _to_entity(model: NotificationModel) -> AdminNotice:
        return AdminNotice(
            id=model.id,
            title=model.title,
            message=model.message,
            type=model.type,
            target_audience=model.target_audience,
            status=model.status,
            metadata=model.extra or {},
            is_read=bool(model.is_read),
            created_at=ensure_app_timezone(model.created_at),
            sent_at=ensure_app_timezone(model.sent_at),
        )


class AdminNoticeStore:
    """Table-like sink for admin notices written from background tasks.

    Each call opens its own session so it can run outside the request that
    triggered it.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def insert(self, notice: AdminNotice) -> AdminNotice:
        session = self._session_factory()
        try:
            return NotificationRepository(session).create(notice)
        finally:
            session.close()

    def list_recent(self, limit: int = 50) -> Sequence[AdminNotice]:
        session = self._session_factory()
        try:
            return NotificationRepository(session).list_for_audience("admin", limit=limit)
        finally:
            session.close()


__all__ = ["AdminNoticeStore", "NotificationRepository"]

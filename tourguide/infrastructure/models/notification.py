"""SQLAlchemy model for persisted admin notices."""

from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text

from tourguide.infrastructure.database import Base
from tourguide.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for back-office notifications."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="info")
    target_audience = Column(String(20), nullable=False, default="admin", index=True)
    status = Column(String(20), nullable=False, default="sent")
    # ``metadata`` is reserved on declarative classes.
    extra = Column("metadata", JSON, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    sent_at = Column(DateTime(), nullable=True)


__all__ = ["NotificationModel"]

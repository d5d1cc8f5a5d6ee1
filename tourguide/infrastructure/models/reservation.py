"""SQLAlchemy model for reservations."""

from sqlalchemy import Column, DateTime, Float, Integer, String, Text

from tourguide.infrastructure.database import Base
from tourguide.utils import now_in_app_naive_datetime


class ReservationModel(Base):
    """Database representation for reservations."""

    __tablename__ = "reservation"

    id = Column(String(36), primary_key=True)
    service_id = Column(String(64), nullable=True, index=True)
    service_name = Column(String(200), nullable=False)
    service_type = Column(String(50), nullable=False, default="excursion")
    full_name = Column(String(150), nullable=False)
    email = Column(String(254), nullable=False, index=True)
    phone = Column(String(40), nullable=True)
    participants = Column(Integer, nullable=False, default=1)
    reservation_date = Column(String(10), nullable=False)
    reservation_time = Column(String(8), nullable=True)
    special_requests = Column(Text, nullable=True)
    admin_notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    payment_status = Column(String(20), nullable=False, default="pending")
    price = Column(Float, nullable=True)
    payment_link = Column(String(500), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["ReservationModel"]

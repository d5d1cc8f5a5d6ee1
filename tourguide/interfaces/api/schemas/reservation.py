"""Reservation schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

ReservationStatus = Literal["pending", "confirmed", "cancelled", "completed"]
PaymentStatus = Literal["pending", "paid", "failed"]


class ReservationCreate(BaseModel):
    service_id: str | None = Field(default=None, max_length=64)
    service_name: str = Field(..., min_length=1, max_length=200)
    service_type: str | None = Field(default=None, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=50)
    participants: int = Field(..., ge=1, description="Cantidad de personas de la reserva")
    reservation_date: str = Field(..., min_length=1, description="Fecha solicitada (YYYY-MM-DD)")
    reservation_time: str | None = Field(default=None, max_length=20)
    special_requests: str | None = None
    price: float | None = Field(default=None, ge=0, description="Precio por persona en USD")
    payment_link: str | None = None


class ReservationUpdate(BaseModel):
    status: ReservationStatus | None = None
    payment_status: PaymentStatus | None = None
    admin_notes: str | None = None
    price: float | None = Field(default=None, ge=0)
    payment_link: str | None = None
    reservation_date: str | None = None
    reservation_time: str | None = None
    participants: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(extra="forbid")


class ReservationRead(BaseModel):
    id: str
    service_id: str | None
    service_name: str
    service_type: str
    full_name: str
    email: str
    phone: str | None
    participants: int
    reservation_date: str
    reservation_time: str | None
    special_requests: str | None
    admin_notes: str | None
    status: str
    payment_status: str
    price: float | None
    payment_link: str | None
    total_amount: float
    created_at: datetime | None
    updated_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class ReservationPageRead(BaseModel):
    items: list[ReservationRead]
    total: int
    page: int
    limit: int

    model_config = ConfigDict(from_attributes=True)


class ReservationStatsRead(BaseModel):
    total: int = Field(..., description="Cantidad total de reservas")
    pending: int
    confirmed: int
    cancelled: int
    completed: int

    model_config = ConfigDict(from_attributes=True)

"""Schemas for dashboard endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from .reservation import ReservationRead, ReservationStatsRead


class PaymentSummaryRead(BaseModel):
    paid: int = Field(..., description="Reservas con pago confirmado")
    pending: int = Field(..., description="Reservas con pago pendiente")
    failed: int = Field(..., description="Reservas con pago fallido")
    confirmed_revenue: float = Field(..., description="Ingresos de reservas pagadas en USD")

    model_config = ConfigDict(from_attributes=True)


class CountSummaryRead(BaseModel):
    total: int
    unread: int

    model_config = ConfigDict(from_attributes=True)


class DashboardStatsRead(BaseModel):
    reservations: ReservationStatsRead
    payments: PaymentSummaryRead
    notices: CountSummaryRead
    recent_reservations: list[ReservationRead]
    feed: CountSummaryRead

    model_config = ConfigDict(from_attributes=True)


class DashboardReportRead(BaseModel):
    stats: DashboardStatsRead
    loading: bool
    error: str | None = Field(
        default=None, description="Aviso cuando alguna fuente no respondió a tiempo"
    )
    timed_out: bool
    failed_sources: list[str]

    model_config = ConfigDict(from_attributes=True)

"""Reservation event fan-out."""

from .orchestrator import ReservationEventOrchestrator

__all__ = ["ReservationEventOrchestrator"]

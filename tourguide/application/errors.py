"""Error taxonomy shared by the application services."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.exc import DisconnectionError, OperationalError, TimeoutError as PoolTimeoutError

T = TypeVar("T")

VALIDATION_ERROR = "VALIDATION_ERROR"
CONNECTION_ERROR = "CONNECTION_ERROR"
PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
NOT_FOUND = "NOT_FOUND"

CONNECTION_ERROR_MESSAGE = (
    "Error de conexión con la base de datos. Por favor, intenta de nuevo en unos momentos."
)

_CONNECTION_EXCEPTIONS: tuple[type[BaseException], ...] = (
    OperationalError,
    DisconnectionError,
    PoolTimeoutError,
    TimeoutError,
    ConnectionError,
)

_CONNECTION_PATTERN = re.compile(
    r"connection|network|timeout|timed out|reset|ECONNRESET|ETIMEDOUT|fetch",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ServiceError:
    """Failure reported by a service instead of raising."""

    code: str
    message: str
    details: str | None = None

    @property
    def retryable(self) -> bool:
        return self.code == CONNECTION_ERROR


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Value-or-error envelope returned by the reservation services."""

    data: T | None = None
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "ServiceResult[T]":
        return cls(data=data)

    @classmethod
    def failure(
        cls, code: str, message: str, details: str | None = None
    ) -> "ServiceResult[T]":
        return cls(error=ServiceError(code=code, message=message, details=details))


def is_connection_error(exc: BaseException) -> bool:
    """Return ``True`` when ``exc`` looks like a transient connectivity problem."""

    if isinstance(exc, _CONNECTION_EXCEPTIONS):
        return True
    return bool(_CONNECTION_PATTERN.search(str(exc)))


def classify_error(exc: BaseException, *, fallback_message: str) -> ServiceError:
    """Map ``exc`` to a :class:`ServiceError`."""

    if isinstance(exc, ValueError):
        return ServiceError(code=VALIDATION_ERROR, message=str(exc))
    if is_connection_error(exc):
        return ServiceError(
            code=CONNECTION_ERROR, message=CONNECTION_ERROR_MESSAGE, details=str(exc)
        )
    return ServiceError(code=PERSISTENCE_ERROR, message=fallback_message, details=str(exc))


__all__ = [
    "CONNECTION_ERROR",
    "CONNECTION_ERROR_MESSAGE",
    "NOT_FOUND",
    "PERSISTENCE_ERROR",
    "ServiceError",
    "ServiceResult",
    "VALIDATION_ERROR",
    "classify_error",
    "is_connection_error",
]

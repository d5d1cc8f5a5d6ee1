"""Helper utilities shared across API route handlers."""

from fastapi import HTTPException, status

from tourguide.application.errors import (
    CONNECTION_ERROR,
    NOT_FOUND,
    VALIDATION_ERROR,
    ServiceError,
)

_STATUS_BY_CODE = {
    VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    NOT_FOUND: status.HTTP_404_NOT_FOUND,
    CONNECTION_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def service_error_to_http(error: ServiceError) -> HTTPException:
    """Translate a :class:`ServiceError` into the matching HTTP error."""

    status_code = _STATUS_BY_CODE.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = {"Retry-After": "5"} if error.code == CONNECTION_ERROR else None
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": error.message},
        headers=headers,
    )

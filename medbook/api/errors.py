from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger

from medbook.api.schemas import ErrorResponse
from medbook.domain.exceptions import (
    AppointmentNotFoundError,
    ClinicError,
    DoctorNotFoundError,
    DuplicateRecordError,
    InvalidStateTransitionError,
    PatientNotFoundError,
    SlotTakenError,
    StoreIOError,
)

_STATUS_BY_ERROR: dict[type[ClinicError], int] = {
    PatientNotFoundError: 404,
    DoctorNotFoundError: 404,
    AppointmentNotFoundError: 404,
    SlotTakenError: 409,
    DuplicateRecordError: 409,
    InvalidStateTransitionError: 409,
    StoreIOError: 500,
}


def status_for(exc: ClinicError) -> int:
    """HTTP status for an error kind; validation failures default to 400."""
    for error_type, status in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status
    return 400


async def clinic_error_handler(request: Request, exc: ClinicError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc.reason)
    body = ErrorResponse(error=exc.kind, message=exc.reason)
    return JSONResponse(status_code=status, content=body.model_dump())

"""Domain errors and their HTTP mapping"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CallbookError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(CallbookError):
    status_code = 400


class AppointmentNotFound(CallbookError):
    status_code = 404

    def __init__(self, appointment_id: int | None = None):
        super().__init__("Appointment not found")
        self.appointment_id = appointment_id


class ServiceUnavailable(CallbookError):
    status_code = 500


class IllegalTransition(CallbookError):
    status_code = 409

    def __init__(self, appointment_id: int, current: str, target: str):
        super().__init__(
            f"Illegal status transition {current} -> {target} for appointment {appointment_id}"
        )
        self.appointment_id = appointment_id
        self.current = current
        self.target = target


async def callbook_error_handler(request: Request, exc: CallbookError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report body and path validation failures as 400 with a single message"""
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")

    for error in exc.errors():
        loc = error.get("loc") or ()
        # An absent body carries no serviceType either
        if error.get("type") == "missing" and ("serviceType" in loc or loc == ("body",)):
            return JSONResponse(status_code=400, content={"error": "serviceType is required"})
        if loc[:1] == ("path",):
            return JSONResponse(status_code=400, content={"error": "Invalid appointment id"})

    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "request"
    message = first.get("msg", "Invalid request")
    return JSONResponse(status_code=400, content={"error": f"{field}: {message}"})

"""Appointment router - booking request and polling endpoints"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...call_queue import OutboundCallQueue
from ...database import get_db
from ...exceptions import CallbookError, ServiceUnavailable
from ...models import AppointmentStatus
from .schemas import AppointmentCreate, AppointmentResultResponse, AppointmentStatusResponse
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_call_queue(request: Request) -> OutboundCallQueue:
    return request.app.state.call_queue


def get_appointment_service(
    db: Session = Depends(get_db),
    queue: OutboundCallQueue = Depends(get_call_queue),
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db, queue)


@router.post("")
async def create_appointment(
    data: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Create an appointment request; 201 when a call is queued, 200 when it failed at once"""
    try:
        created = await service.create_appointment(data)
    except CallbookError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to create appointment: {type(e).__name__}: {e}")
        raise ServiceUnavailable("Failed to create appointment") from e

    status_code = (
        status.HTTP_201_CREATED
        if created.status == AppointmentStatus.PENDING.value
        else status.HTTP_200_OK
    )
    return JSONResponse(status_code=status_code, content=created.model_dump())


@router.get("/{appointment_id}/status", response_model=AppointmentStatusResponse)
async def get_appointment_status(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return service.get_status(appointment_id)
    except CallbookError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to fetch status for {appointment_id}: {e}")
        raise ServiceUnavailable("Failed to fetch status") from e


@router.get("/{appointment_id}/result", response_model=AppointmentResultResponse)
async def get_appointment_result(
    appointment_id: int,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Final result; callLog stays null until a call attempt has completed"""
    try:
        return service.get_result(appointment_id)
    except CallbookError:
        raise
    except Exception as e:
        logger.error(f"❌ Failed to fetch result for {appointment_id}: {e}")
        raise ServiceUnavailable("Failed to fetch result") from e

"""Appointment service - Booking request intake and polling reads"""

import logging

from sqlalchemy.orm import Session

from ...call_queue import OutboundCallJob, OutboundCallQueue
from ...exceptions import AppointmentNotFound, ValidationFailed
from ...models import Appointment, AppointmentStatus, Urgency
from ...services.appointment_lifecycle import AppointmentLifecycle
from ..providers.repository import ProviderRepository
from .repository import AppointmentRepository
from .schemas import (
    PROVIDER_NOT_FOUND_MESSAGE,
    AppointmentCreate,
    AppointmentCreated,
    AppointmentResultResponse,
    AppointmentStatusResponse,
    CallLogResponse,
    parse_result_payload,
)

logger = logging.getLogger(__name__)

CALL_QUEUED_MESSAGE = "Appointment request created. Call will be placed shortly."


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session, queue: OutboundCallQueue):
        self.db = db
        self.queue = queue
        self.repo = AppointmentRepository()
        self.providers = ProviderRepository()
        self.lifecycle = AppointmentLifecycle(db)

    async def create_appointment(self, data: AppointmentCreate) -> AppointmentCreated:
        """
        Record the request, resolve a provider and enqueue the call.

        Returns PENDING when a call job was queued, or FAILED when no
        provider offers the requested service.
        """
        service_type = (data.serviceType or "").strip()
        if not service_type:
            raise ValidationFailed("serviceType is required")

        appointment = self.repo.create_appointment(
            self.db,
            service_type=service_type,
            preferred_date_from=data.preferredDateFrom,
            preferred_date_to=data.preferredDateTo,
            preferred_time_window=data.preferredTimeWindow or None,
            location=data.location or None,
            urgency=(data.urgency or Urgency.FLEXIBLE).value,
        )
        logger.info(f"📥 Appointment {appointment.id} created for '{service_type}'")

        # MVP: first match wins, no ranking by rating or location
        provider = self.providers.find_first_by_service_type(self.db, service_type)
        if provider is None:
            logger.warning(f"⚠️ No provider for '{service_type}', appointment {appointment.id}")
            self.lifecycle.fail_no_provider(appointment)
            return AppointmentCreated(
                id=appointment.id,
                status=AppointmentStatus.FAILED.value,
                message=PROVIDER_NOT_FOUND_MESSAGE,
            )

        await self.queue.enqueue(
            OutboundCallJob(
                appointmentId=appointment.id,
                providerPhone=provider.phone,
                providerName=provider.name,
                serviceType=service_type,
                preferredTimeWindow=data.preferredTimeWindow or None,
            )
        )

        return AppointmentCreated(
            id=appointment.id,
            status=AppointmentStatus.PENDING.value,
            message=CALL_QUEUED_MESSAGE,
        )

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.repo.get_appointment_with_call_log(self.db, appointment_id)
        if appointment is None:
            raise AppointmentNotFound(appointment_id)
        return appointment

    def get_status(self, appointment_id: int) -> AppointmentStatusResponse:
        appointment = self.get_appointment(appointment_id)
        return AppointmentStatusResponse(
            id=appointment.id,
            status=appointment.status,
            updatedAt=appointment.updated_at,
        )

    def get_result(self, appointment_id: int) -> AppointmentResultResponse:
        appointment = self.get_appointment(appointment_id)
        call_log = appointment.call_log
        return AppointmentResultResponse(
            id=appointment.id,
            status=appointment.status,
            result=(
                parse_result_payload(appointment.result_payload)
                if appointment.result_payload
                else None
            ),
            callLog=(
                CallLogResponse(
                    startedAt=call_log.started_at,
                    endedAt=call_log.ended_at,
                    transcript=call_log.transcript,
                    error=call_log.error,
                )
                if call_log
                else None
            ),
        )

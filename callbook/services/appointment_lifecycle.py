"""
Appointment lifecycle state machine
PENDING -> CALLING -> {CONFIRMED, FAILED}, plus PENDING -> FAILED when no provider matches.
The appointment row is the system of record; terminal states never re-open.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ..domain.appointments.repository import AppointmentRepository
from ..domain.appointments.schemas import CallFailed, CallSucceeded, ProviderNotFound
from ..exceptions import IllegalTransition
from ..models import Appointment, AppointmentStatus, CallLog, CallLogStatus

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.CALLING, AppointmentStatus.FAILED}),
    AppointmentStatus.CALLING: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.FAILED}),
    AppointmentStatus.CONFIRMED: frozenset(),
    AppointmentStatus.FAILED: frozenset(),
}


def can_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


class AppointmentLifecycle:
    """Applies legal status transitions to appointments"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def _transition(
        self,
        appointment: Appointment,
        target: AppointmentStatus,
        result_payload: Optional[dict] = None,
        call_log: Optional[CallLog] = None,
    ) -> Appointment:
        current = AppointmentStatus(appointment.status)
        if not can_transition(current, target):
            raise IllegalTransition(appointment.id, current.value, target.value)

        self.repo.set_status(
            self.db, appointment, target, result_payload=result_payload, call_log=call_log
        )
        logger.info(f"🔁 Appointment {appointment.id}: {current.value} -> {target.value}")
        return appointment

    def fail_no_provider(self, appointment: Appointment) -> Appointment:
        """PENDING -> FAILED at creation time when provider lookup misses"""
        return self._transition(
            appointment, AppointmentStatus.FAILED, result_payload=ProviderNotFound().model_dump()
        )

    def begin_call(self, appointment_id: int) -> Optional[Appointment]:
        """
        PENDING -> CALLING when the worker picks up the job.

        Returns None when the appointment is missing or already terminal, so
        a redelivered job does nothing. An appointment left in CALLING by an
        attempt that died before reaching a terminal state is resumed as is.
        """
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if appointment is None:
            logger.warning(f"⚠️ Appointment {appointment_id} not found, skipping call")
            return None

        current = AppointmentStatus(appointment.status)
        if current.is_terminal:
            logger.info(
                f"⏭️ Appointment {appointment_id} already {current.value}, skipping call"
            )
            return None
        if current == AppointmentStatus.CALLING:
            logger.info(f"🔄 Resuming appointment {appointment_id} in CALLING")
            return appointment

        return self._transition(appointment, AppointmentStatus.CALLING)

    def confirm(
        self,
        appointment: Appointment,
        result: CallSucceeded,
        call_sid: str,
        transcript: str,
        started_at: datetime,
        ended_at: datetime,
    ) -> Appointment:
        """CALLING -> CONFIRMED, writing the call log with the transcript"""
        call_log = CallLog(
            call_sid=call_sid,
            status=CallLogStatus.COMPLETED.value,
            started_at=started_at,
            ended_at=ended_at,
            transcript=transcript,
        )
        return self._transition(
            appointment,
            AppointmentStatus.CONFIRMED,
            result_payload=result.model_dump(),
            call_log=call_log,
        )

    def fail_call(
        self,
        appointment_id: int,
        result: CallFailed,
        error: str,
        call_sid: Optional[str] = None,
        transcript: Optional[str] = None,
        started_at: Optional[datetime] = None,
    ) -> Optional[Appointment]:
        """
        CALLING -> FAILED after a call attempt raised.

        Check-before-act: an appointment that is already terminal is left alone.
        """
        self.db.rollback()
        appointment = self.repo.get_appointment(self.db, appointment_id)
        if appointment is None:
            return None

        current = AppointmentStatus(appointment.status)
        if current.is_terminal:
            logger.info(f"⏭️ Appointment {appointment_id} already {current.value}, not failing")
            return appointment

        call_log = None
        if self.repo.get_call_log(self.db, appointment_id) is None:
            call_log = CallLog(
                call_sid=call_sid,
                status=CallLogStatus.FAILED.value,
                started_at=started_at,
                ended_at=datetime.utcnow(),
                transcript=transcript,
                error=error,
            )

        return self._transition(
            appointment,
            AppointmentStatus.FAILED,
            result_payload=result.model_dump(),
            call_log=call_log,
        )

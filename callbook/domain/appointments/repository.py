"""Appointment repository - Database operations for appointments and call logs"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment, AppointmentStatus, CallLog


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def create_appointment(db: Session, **appointment_data) -> Appointment:
        """Create a new appointment in PENDING"""
        appointment = Appointment(status=AppointmentStatus.PENDING.value, **appointment_data)
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def get_appointment(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_appointment_with_call_log(db: Session, appointment_id: int) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.call_log))
            .filter(Appointment.id == appointment_id)
            .first()
        )

    @staticmethod
    def set_status(
        db: Session,
        appointment: Appointment,
        status: AppointmentStatus,
        result_payload: Optional[dict] = None,
        call_log: Optional[CallLog] = None,
    ) -> Appointment:
        """Write a status change, its payload and call log in one commit"""
        appointment.status = status.value
        if result_payload is not None:
            appointment.result_payload = result_payload
        if call_log is not None:
            appointment.call_log = call_log

        db.commit()
        db.refresh(appointment)
        return appointment

    @staticmethod
    def get_call_log(db: Session, appointment_id: int) -> Optional[CallLog]:
        return db.query(CallLog).filter(CallLog.appointment_id == appointment_id).first()

"""Tests for the appointment state machine."""

from datetime import datetime

import pytest

from callbook.domain.appointments.repository import AppointmentRepository
from callbook.domain.appointments.schemas import (
    CallFailed,
    CallSucceeded,
    ProviderNotFound,
    parse_result_payload,
)
from callbook.exceptions import IllegalTransition
from callbook.models import AppointmentStatus, CallLog
from callbook.services.appointment_lifecycle import AppointmentLifecycle, can_transition

S = AppointmentStatus


def _create(db, **kwargs):
    return AppointmentRepository.create_appointment(db, service_type="dentist", **kwargs)


def _success() -> CallSucceeded:
    return CallSucceeded(
        providerName="Smile Dental Clinic",
        confirmedDate="2026-10-18T10:00:00Z",
        confirmedTime="10:00 AM",
        message="Appointment confirmed with Smile Dental Clinic",
    )


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (S.PENDING, S.CALLING, True),
        (S.PENDING, S.FAILED, True),
        (S.CALLING, S.CONFIRMED, True),
        (S.CALLING, S.FAILED, True),
        (S.PENDING, S.CONFIRMED, False),
        (S.CALLING, S.PENDING, False),
        (S.CONFIRMED, S.FAILED, False),
        (S.FAILED, S.CALLING, False),
        (S.FAILED, S.CONFIRMED, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_new_appointment_is_pending_without_result(db):
    appointment = _create(db)

    assert appointment.status == "PENDING"
    assert appointment.result_payload is None
    assert appointment.urgency == "flexible"


def test_fail_no_provider(db):
    appointment = _create(db)
    AppointmentLifecycle(db).fail_no_provider(appointment)

    assert appointment.status == "FAILED"
    assert appointment.result_payload == {
        "outcome": "provider_not_found",
        "error": "No provider found for this service type",
    }


def test_begin_call_moves_pending_to_calling(db):
    appointment = _create(db)
    started = AppointmentLifecycle(db).begin_call(appointment.id)

    assert started.id == appointment.id
    assert started.status == "CALLING"
    assert started.result_payload is None


def test_begin_call_resumes_calling(db):
    appointment = _create(db)
    lifecycle = AppointmentLifecycle(db)
    lifecycle.begin_call(appointment.id)

    resumed = lifecycle.begin_call(appointment.id)
    assert resumed is not None
    assert resumed.status == "CALLING"


@pytest.mark.parametrize("terminal", ["fail_no_provider", "confirm"])
def test_begin_call_skips_terminal(db, terminal):
    appointment = _create(db)
    lifecycle = AppointmentLifecycle(db)
    if terminal == "fail_no_provider":
        lifecycle.fail_no_provider(appointment)
    else:
        lifecycle.begin_call(appointment.id)
        now = datetime.utcnow()
        lifecycle.confirm(appointment, _success(), "SIM-1", "transcript", now, now)
    status_before = appointment.status

    assert lifecycle.begin_call(appointment.id) is None
    db.refresh(appointment)
    assert appointment.status == status_before


def test_begin_call_unknown_appointment(db):
    assert AppointmentLifecycle(db).begin_call(999) is None


def test_confirm_writes_call_log(db):
    appointment = _create(db)
    lifecycle = AppointmentLifecycle(db)
    lifecycle.begin_call(appointment.id)
    now = datetime.utcnow()

    lifecycle.confirm(appointment, _success(), "SIM-1", "Called Smile Dental Clinic.", now, now)

    assert appointment.status == "CONFIRMED"
    assert appointment.result_payload["providerName"] == "Smile Dental Clinic"
    assert appointment.result_payload["confirmedTime"] == "10:00 AM"
    log = db.query(CallLog).filter(CallLog.appointment_id == appointment.id).one()
    assert log.status == "COMPLETED"
    assert log.call_sid == "SIM-1"
    assert log.transcript == "Called Smile Dental Clinic."
    assert log.error is None


def test_confirm_from_pending_is_illegal(db):
    appointment = _create(db)
    now = datetime.utcnow()

    with pytest.raises(IllegalTransition):
        AppointmentLifecycle(db).confirm(appointment, _success(), "SIM-1", "t", now, now)

    db.refresh(appointment)
    assert appointment.status == "PENDING"
    assert appointment.result_payload is None


def test_fail_call_records_reason_and_error(db):
    appointment = _create(db)
    lifecycle = AppointmentLifecycle(db)
    lifecycle.begin_call(appointment.id)

    lifecycle.fail_call(appointment.id, CallFailed(), error="RuntimeError: line busy", call_sid="SIM-2")

    db.refresh(appointment)
    assert appointment.status == "FAILED"
    assert appointment.result_payload == {"outcome": "call_failed", "error": "Call failed"}
    log = db.query(CallLog).filter(CallLog.appointment_id == appointment.id).one()
    assert log.status == "FAILED"
    assert log.error == "RuntimeError: line busy"


def test_fail_call_leaves_confirmed_alone(db):
    appointment = _create(db)
    lifecycle = AppointmentLifecycle(db)
    lifecycle.begin_call(appointment.id)
    now = datetime.utcnow()
    lifecycle.confirm(appointment, _success(), "SIM-1", "t", now, now)

    lifecycle.fail_call(appointment.id, CallFailed(), error="late failure")

    db.refresh(appointment)
    assert appointment.status == "CONFIRMED"
    assert appointment.result_payload["outcome"] == "call_succeeded"
    assert db.query(CallLog).count() == 1


def test_result_payload_variants_round_trip():
    assert isinstance(parse_result_payload(ProviderNotFound().model_dump()), ProviderNotFound)
    assert isinstance(parse_result_payload(CallFailed(error="Call timed out").model_dump()), CallFailed)
    parsed = parse_result_payload(_success().model_dump())
    assert isinstance(parsed, CallSucceeded)
    assert parsed.providerName == "Smile Dental Clinic"

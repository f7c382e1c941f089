"""Tests for the outbound call queue producer."""

from callbook.call_queue import PROCESS_OUTBOUND_CALL, OutboundCallJob, job_id_for


def _job(appointment_id: int = 42) -> OutboundCallJob:
    return OutboundCallJob(
        appointmentId=appointment_id,
        providerPhone="+15551234567",
        providerName="Smile Dental Clinic",
        serviceType="dentist",
        preferredTimeWindow="morning",
    )


def test_job_id_is_derived_from_appointment():
    assert job_id_for(42) == "call-42"


async def test_enqueue_names_job_after_appointment(call_queue, arq_pool):
    job_id = await call_queue.enqueue(_job())

    assert job_id == "call-42"
    queued = arq_pool.jobs["call-42"]
    assert queued.function == PROCESS_OUTBOUND_CALL
    assert queued.queue_name == "outbound-calls"
    assert queued.args == (
        {
            "appointmentId": 42,
            "providerPhone": "+15551234567",
            "providerName": "Smile Dental Clinic",
            "serviceType": "dentist",
            "preferredTimeWindow": "morning",
        },
    )


async def test_second_enqueue_is_noop(call_queue, arq_pool):
    assert await call_queue.enqueue(_job()) == "call-42"
    assert await call_queue.enqueue(_job()) is None

    assert list(arq_pool.jobs) == ["call-42"]


async def test_different_appointments_get_separate_jobs(call_queue, arq_pool):
    await call_queue.enqueue(_job(1))
    await call_queue.enqueue(_job(2))

    assert sorted(arq_pool.jobs) == ["call-1", "call-2"]

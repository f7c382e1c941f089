"""
Outbound call queue on arq
One job per appointment, named from the appointment id so a second enqueue is a no-op.
"""

import logging
from typing import Optional

from arq.connections import ArqRedis
from pydantic import BaseModel

from .config import OUTBOUND_CALL_QUEUE

logger = logging.getLogger(__name__)

PROCESS_OUTBOUND_CALL = "process_outbound_call"


class OutboundCallJob(BaseModel):
    appointmentId: int
    providerPhone: str
    providerName: str
    serviceType: str
    preferredTimeWindow: Optional[str] = None


def job_id_for(appointment_id: int) -> str:
    return f"call-{appointment_id}"


class OutboundCallQueue:
    """Producer side of the outbound call queue"""

    def __init__(self, pool: ArqRedis, queue_name: str = OUTBOUND_CALL_QUEUE):
        self.pool = pool
        self.queue_name = queue_name

    async def enqueue(self, job: OutboundCallJob) -> Optional[str]:
        """Enqueue the call job; returns None if one already exists for the appointment"""
        job_id = job_id_for(job.appointmentId)
        queued = await self.pool.enqueue_job(
            PROCESS_OUTBOUND_CALL,
            job.model_dump(),
            _job_id=job_id,
            _queue_name=self.queue_name,
        )
        if queued is None:
            logger.info(f"📋 Call job {job_id} already exists, not enqueued again")
            return None

        logger.info(f"📋 Call job queued: {job_id} -> {job.providerName}")
        return queued.job_id

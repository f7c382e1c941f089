"""
Outbound call placement
The simulated placer walks the call state through a fixed script until real
telephony replaces it.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..call_state import CallState, CallStateStore, CallStatus
from ..config import CALL_SIMULATION_DELAY

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallRequest:
    appointment_id: int
    provider_phone: str
    provider_name: str
    service_type: str
    preferred_time_window: Optional[str] = None


@dataclass(frozen=True)
class CallOutcome:
    call_sid: str
    transcript: str
    confirmed_date: str
    confirmed_time: str
    started_at: datetime
    ended_at: datetime


class CallPlacer:
    """Places one call and returns its outcome, raising on failure"""

    async def place_call(self, request: CallRequest, call_state: CallStateStore) -> CallOutcome:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class SimulatedCallPlacer(CallPlacer):
    def __init__(self, delay: float = CALL_SIMULATION_DELAY, confirmed_time: str = "10:00 AM"):
        self.delay = delay
        self.confirmed_time = confirmed_time

    async def place_call(self, request: CallRequest, call_state: CallStateStore) -> CallOutcome:
        started_at = datetime.utcnow()
        call_sid = f"SIMULATED-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"

        await call_state.set(
            call_sid,
            CallState(
                appointmentId=request.appointment_id,
                callSid=call_sid,
                status=CallStatus.INITIATED,
            ),
        )
        await call_state.map_appointment_to_call(request.appointment_id, call_sid)

        logger.info(
            f"📞 Dialing {request.provider_name} ({request.provider_phone}) "
            f"for appointment {request.appointment_id}"
        )
        await call_state.update(call_sid, status=CallStatus.CONNECTED, lastAudioTs=time.time())

        window = f" ({request.preferred_time_window})" if request.preferred_time_window else ""
        transcript = (
            f"[Simulated] Called {request.provider_name} for {request.service_type}{window}."
        )
        await call_state.update(call_sid, status=CallStatus.NEGOTIATING, transcript=transcript)

        await asyncio.sleep(self.delay)

        transcript = f"{transcript} Appointment confirmed."
        ended_at = datetime.utcnow()
        await call_state.update(
            call_sid, status=CallStatus.CONFIRMED, transcript=transcript, lastAudioTs=time.time()
        )

        return CallOutcome(
            call_sid=call_sid,
            transcript=transcript,
            confirmed_date=ended_at.isoformat() + "Z",
            confirmed_time=self.confirmed_time,
            started_at=started_at,
            ended_at=ended_at,
        )

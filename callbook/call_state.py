"""
Redis-backed store for in-flight call session state
Best-effort cache: the appointment row stays the source of truth
"""

import enum
import json
import logging
from typing import Any, Optional

from pydantic import BaseModel
from redis.asyncio import Redis

from .config import CALL_STATE_TTL_SECONDS

logger = logging.getLogger(__name__)

CALL_STATE_PREFIX = "call-state:"
APPOINTMENT_CALL_PREFIX = "appointment-call:"


class CallStatus(str, enum.Enum):
    INITIATED = "INITIATED"
    CONNECTED = "CONNECTED"
    NEGOTIATING = "NEGOTIATING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"
    ENDED = "ENDED"


class CallState(BaseModel):
    appointmentId: int
    callSid: str
    negotiationSessionId: Optional[str] = None
    status: CallStatus
    lastAudioTs: Optional[float] = None
    transcript: Optional[str] = None


def call_state_key(call_sid: str) -> str:
    return f"{CALL_STATE_PREFIX}{call_sid}"


def appointment_call_key(appointment_id: int) -> str:
    return f"{APPOINTMENT_CALL_PREFIX}{appointment_id}"


class CallStateStore:
    """Call state keyed by call SID, with an appointment -> call SID index.

    Every write resets the key's expiry to the full TTL. Reads of a missing
    or expired key return None; backend errors are logged and read as absence.
    """

    def __init__(self, redis: Redis, ttl: int = CALL_STATE_TTL_SECONDS):
        self.redis = redis
        self.ttl = ttl

    async def set(self, call_sid: str, state: CallState) -> bool:
        key = call_state_key(call_sid)
        try:
            await self.redis.setex(key, self.ttl, state.model_dump_json())
            logger.debug(f"✅ Call state SET: {key} ({state.status.value}, TTL: {self.ttl}s)")
            return True
        except Exception as e:
            logger.error(f"❌ Call state set error for {key}: {e}")
            return False

    async def get(self, call_sid: str) -> Optional[CallState]:
        key = call_state_key(call_sid)
        try:
            value = await self.redis.get(key)
            if not value:
                logger.debug(f"❌ Call state MISS: {key}")
                return None
            return CallState.model_validate(json.loads(value))
        except Exception as e:
            # Unreadable or outdated entries count as a miss
            logger.error(f"❌ Call state get error for {key}: {e}")
            return None

    async def update(self, call_sid: str, **updates: Any) -> Optional[CallState]:
        """Merge field overwrites into the current state; no-op when absent"""
        current = await self.get(call_sid)
        if current is None:
            logger.debug(f"Call state update dropped, no session for {call_sid}")
            return None

        merged = current.model_copy(update=updates)
        await self.set(call_sid, merged)
        return merged

    async def delete(self, call_sid: str) -> bool:
        key = call_state_key(call_sid)
        try:
            await self.redis.delete(key)
            logger.debug(f"✅ Call state DELETE: {key}")
            return True
        except Exception as e:
            logger.error(f"❌ Call state delete error for {key}: {e}")
            return False

    async def map_appointment_to_call(self, appointment_id: int, call_sid: str) -> bool:
        key = appointment_call_key(appointment_id)
        try:
            await self.redis.setex(key, self.ttl, call_sid)
            return True
        except Exception as e:
            logger.error(f"❌ Call state set error for {key}: {e}")
            return False

    async def get_call_sid_by_appointment(self, appointment_id: int) -> Optional[str]:
        key = appointment_call_key(appointment_id)
        try:
            value = await self.redis.get(key)
        except Exception as e:
            logger.error(f"❌ Call state get error for {key}: {e}")
            return None

        if isinstance(value, bytes):
            value = value.decode()
        return value or None

    async def get_by_appointment(self, appointment_id: int) -> Optional[CallState]:
        call_sid = await self.get_call_sid_by_appointment(appointment_id)
        if call_sid is None:
            return None
        return await self.get(call_sid)

"""Appointment domain schemas - request/response bodies and result payload variants"""

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from ...models import Urgency

PROVIDER_NOT_FOUND_MESSAGE = "No provider found for this service type"
CALL_FAILED_MESSAGE = "Call failed"
CALL_TIMED_OUT_MESSAGE = "Call timed out"
CALL_CANCELLED_MESSAGE = "Call cancelled"


class AppointmentCreate(BaseModel):
    """Schema for a booking request; serviceType is checked by the service"""

    serviceType: Optional[str] = None
    preferredDateFrom: Optional[datetime] = None
    preferredDateTo: Optional[datetime] = None
    preferredTimeWindow: Optional[str] = None
    location: Optional[str] = None
    urgency: Optional[Urgency] = None


class AppointmentCreated(BaseModel):
    id: int
    status: str
    message: str


class AppointmentStatusResponse(BaseModel):
    id: int
    status: str
    updatedAt: Optional[datetime] = None


class CallLogResponse(BaseModel):
    startedAt: Optional[datetime] = None
    endedAt: Optional[datetime] = None
    transcript: Optional[str] = None
    error: Optional[str] = None


# ============================================================================
# RESULT PAYLOADS
# ============================================================================


class ProviderNotFound(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Literal["provider_not_found"] = "provider_not_found"
    error: str = PROVIDER_NOT_FOUND_MESSAGE


class CallSucceeded(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Literal["call_succeeded"] = "call_succeeded"
    providerName: str
    confirmedDate: str
    confirmedTime: str
    message: str


class CallFailed(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Literal["call_failed"] = "call_failed"
    error: str = CALL_FAILED_MESSAGE


ResultPayload = Annotated[
    Union[ProviderNotFound, CallSucceeded, CallFailed], Field(discriminator="outcome")
]

_result_adapter = TypeAdapter(ResultPayload)


def parse_result_payload(data: dict) -> Union[ProviderNotFound, CallSucceeded, CallFailed]:
    """Recover the stored variant from its JSON form"""
    return _result_adapter.validate_python(data)


class AppointmentResultResponse(BaseModel):
    id: int
    status: str
    result: Optional[ResultPayload] = None
    callLog: Optional[CallLogResponse] = None

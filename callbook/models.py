import enum

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class AppointmentStatus(str, enum.Enum):
    PENDING = "PENDING"
    CALLING = "CALLING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (AppointmentStatus.CONFIRMED, AppointmentStatus.FAILED)


class Urgency(str, enum.Enum):
    ASAP = "ASAP"
    FLEXIBLE = "flexible"


class CallLogStatus(str, enum.Enum):
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class Provider(Base):
    """Bookable business, provisioned by seed or import and read-only at request time"""

    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)  # E.164
    service_type = Column(String(100), nullable=False, index=True)  # free-text category
    location = Column(String(255), nullable=True)
    rating = Column(Float, nullable=True)

    created_at = Column(DateTime, server_default=func.now())


class Appointment(Base):
    """One booking request and the durable record of its lifecycle"""

    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    service_type = Column(String(100), nullable=False)
    preferred_date_from = Column(DateTime, nullable=True)
    preferred_date_to = Column(DateTime, nullable=True)
    preferred_time_window = Column(String(100), nullable=True)  # e.g. "morning", "after 3pm"
    location = Column(String(255), nullable=True)
    urgency = Column(String(20), default=Urgency.FLEXIBLE.value, nullable=False)
    status = Column(String(20), default=AppointmentStatus.PENDING.value, nullable=False, index=True)
    # Tagged result variant, set only on CONFIRMED or FAILED
    result_payload = Column(JSON, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    call_log = relationship(
        "CallLog",
        back_populates="appointment",
        uselist=False,
        cascade="all, delete-orphan",
    )


class CallLog(Base):
    """Outcome of the placed call, at most one per appointment"""

    __tablename__ = "call_logs"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    call_sid = Column(String(255), nullable=True)  # external call session identifier
    status = Column(String(20), nullable=False)
    started_at = Column(DateTime, nullable=True)
    ended_at = Column(DateTime, nullable=True)
    transcript = Column(Text, nullable=True)
    error = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    appointment = relationship("Appointment", back_populates="call_log")

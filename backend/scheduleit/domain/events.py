"""
Domain events raised by the Appointment aggregate.

Events are facts, named in the past tense and never mutated after creation.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from .value_objects import TimeSlot


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DomainEvent:
    """Base class for everything the aggregate records."""

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class AppointmentBooked(DomainEvent):
    """An appointment was booked for a customer."""

    appointment_id: UUID
    customer_id: UUID
    time_slot: TimeSlot
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class AppointmentCanceled(DomainEvent):
    """An appointment was canceled before it started."""

    appointment_id: UUID
    occurred_at: datetime = field(default_factory=_utcnow)

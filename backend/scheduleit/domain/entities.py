"""
Domain entities - Pure business logic, no framework dependencies.

The Appointment aggregate owns its TimeSlot, its status state machine and
the buffer of domain events it raises. Nothing else mutates an appointment.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple, Union

from .events import AppointmentBooked, AppointmentCanceled, DomainEvent
from .exceptions import DomainRuleViolation
from .value_objects import TimeSlot, ensure_utc


class AppointmentStatus(str, Enum):
    """Closed set of appointment states. Values are the wire names."""

    SCHEDULED = "Scheduled"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELED = "Canceled"
    NO_SHOW = "NoShow"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]

    @classmethod
    def parse(cls, value: Union["AppointmentStatus", str, int]) -> "AppointmentStatus":
        """Resolve a status from a member, wire name or legacy numeric code.

        Raises ValueError for anything that is not one of the five statuses.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Unsupported status: {value!r}")
        if isinstance(value, int):
            if value in _LEGACY_CODES:
                return _LEGACY_CODES[value]
            raise ValueError(f"Unsupported status: {value!r}")
        if isinstance(value, str):
            key = value.strip()
            if key.isdigit():
                return cls.parse(int(key))
            key = key.replace("_", "").replace("-", "").replace(" ", "").lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        raise ValueError(f"Unsupported status: {value!r}")


_STATUS_LABELS = {
    AppointmentStatus.SCHEDULED: "scheduled",
    AppointmentStatus.IN_PROGRESS: "in progress",
    AppointmentStatus.COMPLETED: "completed",
    AppointmentStatus.CANCELED: "canceled",
    AppointmentStatus.NO_SHOW: "no-show",
}

# Numeric codes used by the first version of the API.
_LEGACY_CODES = {
    1: AppointmentStatus.SCHEDULED,
    2: AppointmentStatus.CANCELED,
    3: AppointmentStatus.COMPLETED,
    4: AppointmentStatus.IN_PROGRESS,
    5: AppointmentStatus.NO_SHOW,
}

# The whole lifecycle. Scheduled -> Scheduled is handled as a no-op by
# mark_scheduled and is therefore not listed here.
ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset(
        {
            AppointmentStatus.IN_PROGRESS,
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELED,
            AppointmentStatus.NO_SHOW,
        }
    ),
    AppointmentStatus.IN_PROGRESS: frozenset({AppointmentStatus.COMPLETED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}


def _describe(statuses: FrozenSet[AppointmentStatus]) -> str:
    if not statuses:
        return "none"
    return ", ".join(sorted(s.label for s in statuses))


class AggregateRoot:
    """Holds the ordered buffer of events raised since the last flush."""

    def __init__(self) -> None:
        self._pending_events: List[DomainEvent] = []

    @property
    def pending_events(self) -> Tuple[DomainEvent, ...]:
        return tuple(self._pending_events)

    def _record_event(self, event: DomainEvent) -> None:
        self._pending_events.append(event)

    def pull_events(self) -> List[DomainEvent]:
        """Return pending events in emission order and clear the buffer."""
        events = list(self._pending_events)
        self._pending_events.clear()
        return events


@dataclass(eq=False)
class Appointment(AggregateRoot):
    """Aggregate root for a booked appointment.

    Build new appointments with :meth:`create`. The dataclass constructor is
    only meant for repositories rehydrating stored state.
    """

    customer_id: uuid.UUID
    time_slot: TimeSlot
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self) -> None:
        AggregateRoot.__init__(self)
        if self.notes is None:
            self.notes = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Appointment):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @classmethod
    def create(
        cls,
        customer_id: uuid.UUID,
        start: datetime,
        end: datetime,
        now: datetime,
        notes: Optional[str] = None,
    ) -> "Appointment":
        """Book a new appointment and record an AppointmentBooked event."""
        time_slot = TimeSlot.create(start, end, now)
        appointment = cls(customer_id=customer_id, time_slot=time_slot, notes=notes or "")
        appointment._record_event(
            AppointmentBooked(
                appointment_id=appointment.id,
                customer_id=customer_id,
                time_slot=time_slot,
            )
        )
        return appointment

    @property
    def is_active(self) -> bool:
        return self.status in (
            AppointmentStatus.SCHEDULED,
            AppointmentStatus.IN_PROGRESS,
        )

    def is_overlapping(self, start: datetime, end: datetime) -> bool:
        """True when this appointment still blocks the given interval."""
        return self.status != AppointmentStatus.CANCELED and self.time_slot.overlaps(
            start, end
        )

    # -- transitions -----------------------------------------------------

    def _transition_to(self, target: AppointmentStatus) -> None:
        if self.status == target:
            raise DomainRuleViolation(f"Appointment is already {target.label}.")
        allowed = ALLOWED_TRANSITIONS[self.status]
        if target not in allowed:
            raise DomainRuleViolation(
                f"Cannot mark a {self.status.label} appointment as {target.label}; "
                f"allowed from {self.status.label}: {_describe(allowed)}."
            )
        self.status = target

    def cancel(self, now: datetime) -> None:
        if self.status == AppointmentStatus.CANCELED:
            raise DomainRuleViolation("Appointment is already canceled.")
        if AppointmentStatus.CANCELED not in ALLOWED_TRANSITIONS[self.status]:
            raise DomainRuleViolation(
                f"Cannot cancel a {self.status.label} appointment."
            )
        if self.time_slot.start <= ensure_utc(now):
            raise DomainRuleViolation(
                "Cannot cancel an appointment that has already started or finished."
            )

        self.status = AppointmentStatus.CANCELED
        self._record_event(AppointmentCanceled(appointment_id=self.id))

    def mark_in_progress(self) -> None:
        self._transition_to(AppointmentStatus.IN_PROGRESS)

    def mark_completed(self) -> None:
        self._transition_to(AppointmentStatus.COMPLETED)

    def mark_no_show(self) -> None:
        self._transition_to(AppointmentStatus.NO_SHOW)

    def mark_scheduled(self) -> None:
        """Idempotent re-application of Scheduled; never a real transition."""
        if self.status != AppointmentStatus.SCHEDULED:
            raise DomainRuleViolation("Cannot revert to Scheduled.")

    def apply_status(self, status: AppointmentStatus, now: datetime) -> None:
        """Route a requested status to the matching transition method."""
        if status == AppointmentStatus.SCHEDULED:
            self.mark_scheduled()
        elif status == AppointmentStatus.IN_PROGRESS:
            self.mark_in_progress()
        elif status == AppointmentStatus.COMPLETED:
            self.mark_completed()
        elif status == AppointmentStatus.CANCELED:
            self.cancel(now)
        elif status == AppointmentStatus.NO_SHOW:
            self.mark_no_show()
        else:  # pragma: no cover - the enum is closed
            raise ValueError(f"Unsupported status: {status!r}")

    def ensure_can_be_deleted(self) -> None:
        if self.status != AppointmentStatus.SCHEDULED:
            raise DomainRuleViolation(
                f"Only scheduled appointments can be deleted; this one is {self.status.label}."
            )


@dataclass
class Customer:
    """Domain entity representing a Customer."""

    name: str = ""
    email: str = ""
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self):
        """Validate business rules."""
        self.name = (self.name or "").strip()
        self.email = (self.email or "").strip().lower()
        if not self.name:
            raise ValueError("Name is required")
        if not self.email:
            raise ValueError("Email is required")
        if "@" not in self.email:
            raise ValueError("Invalid email format")

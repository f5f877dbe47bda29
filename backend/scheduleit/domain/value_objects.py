"""Value objects for appointment scheduling."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import ClassVar

from .exceptions import DomainRuleViolation


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class TimeSlot:
    """Immutable half-open UTC interval ``[start, end)``.

    Use :meth:`create` for new bookings; it enforces every scheduling rule.
    Plain construction is reserved for rehydrating stored appointments, whose
    slots may legitimately lie in the past.
    """

    start: datetime
    end: datetime

    MIN_DURATION: ClassVar[timedelta] = timedelta(minutes=30)
    MAX_DURATION: ClassVar[timedelta] = timedelta(hours=12)

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", ensure_utc(self.start))
        object.__setattr__(self, "end", ensure_utc(self.end))
        if self.start >= self.end:
            raise DomainRuleViolation("Start time must precede end time.")

    @classmethod
    def create(cls, start: datetime, end: datetime, now: datetime) -> "TimeSlot":
        """Validate and build a slot for a new appointment.

        Checks run in a fixed order and the first failure is reported:
        past start, start not before end, too short, too long.
        """
        start = ensure_utc(start)
        end = ensure_utc(end)
        now = ensure_utc(now)

        if start <= now:
            raise DomainRuleViolation("Appointment cannot be scheduled in the past.")
        if start >= end:
            raise DomainRuleViolation("Start time must precede end time.")

        duration = end - start
        if duration < cls.MIN_DURATION:
            raise DomainRuleViolation(
                "Appointment duration must be at least 30 minutes."
            )
        if duration > cls.MAX_DURATION:
            raise DomainRuleViolation("Appointment duration cannot exceed 12 hours.")

        return cls(start=start, end=end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps(self, other_start: datetime, other_end: datetime) -> bool:
        """Half-open overlap test; touching endpoints do not overlap."""
        return self.start < ensure_utc(other_end) and self.end > ensure_utc(
            other_start
        )

"""
Data Transfer Objects (DTOs) and validation schemas.

Following SOLID principles:
- Single Responsibility: Each schema validates one specific data contract
- Open/Closed: Schemas can be extended without modification

Timestamps leave the API as ISO-8601 UTC strings with a trailing ``Z``.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from scheduleit.core.exceptions import ValidationError
from scheduleit.core.validation import (
    CUSTOMER_EMAIL_MAX_LENGTH,
    CUSTOMER_NAME_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    get_validator,
    require_json_object,
)


def format_utc(value: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class BookAppointmentRequest:
    """DTO for appointment booking requests."""

    customer_id: UUID
    start_utc: datetime
    end_utc: datetime
    notes: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "BookAppointmentRequest":
        """Build a request from the camelCase JSON body, raising ValidationError."""
        result = get_validator("book_appointment").validate(require_json_object(data))
        result.raise_if_invalid()
        cleaned = result.cleaned_data
        return cls(
            customer_id=cleaned["customer_id"],
            start_utc=cleaned["start"],
            end_utc=cleaned["end"],
            notes=cleaned.get("notes") or None,
        )

    def validate(self) -> None:
        """Validate the request data.

        Only shape is checked here; slot rules belong to the TimeSlot.
        """
        if not isinstance(self.customer_id, UUID):
            raise ValidationError("customerId must be a valid UUID", "customerId")
        if not isinstance(self.start_utc, datetime):
            raise ValidationError("startUtc is required", "startUtc")
        if not isinstance(self.end_utc, datetime):
            raise ValidationError("endUtc is required", "endUtc")
        if self.notes is not None and len(self.notes) > NOTES_MAX_LENGTH:
            raise ValidationError(
                f"notes must be at most {NOTES_MAX_LENGTH} characters", "notes"
            )


@dataclass
class AppointmentResponse:
    """DTO for appointment API responses."""

    id: UUID
    customer_id: UUID
    start_utc: datetime
    end_utc: datetime
    status: str
    notes: str

    @classmethod
    def from_domain(cls, appointment) -> "AppointmentResponse":
        """Create response from domain entity."""
        return cls(
            id=appointment.id,
            customer_id=appointment.customer_id,
            start_utc=appointment.time_slot.start,
            end_utc=appointment.time_slot.end,
            status=appointment.status.value,
            notes=appointment.notes or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "customerId": str(self.customer_id),
            "startUtc": format_utc(self.start_utc),
            "endUtc": format_utc(self.end_utc),
            "status": self.status,
            "notes": self.notes,
        }


@dataclass
class AppointmentStatusResponse:
    """Result of a status change."""

    id: UUID
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": str(self.id), "status": self.status}


@dataclass
class UpcomingAppointmentResponse:
    """Upcoming appointment enriched with the customer's display name."""

    id: UUID
    customer_id: UUID
    customer_name: str
    start_utc: datetime
    end_utc: datetime
    status: str

    @classmethod
    def from_domain(cls, appointment, customer_name: str = "") -> "UpcomingAppointmentResponse":
        return cls(
            id=appointment.id,
            customer_id=appointment.customer_id,
            customer_name=customer_name or "",
            start_utc=appointment.time_slot.start,
            end_utc=appointment.time_slot.end,
            status=appointment.status.value,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": str(self.id),
            "customerId": str(self.customer_id),
            "customerName": self.customer_name,
            "startUtc": format_utc(self.start_utc),
            "endUtc": format_utc(self.end_utc),
            "status": self.status,
        }


@dataclass
class TodayStatsResponse:
    """Dashboard numbers for the current UTC day."""

    total_appointments: int
    today_appointments: int
    upcoming_today: List[UpcomingAppointmentResponse] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalAppointments": self.total_appointments,
            "todayAppointments": self.today_appointments,
            "upcomingToday": [item.to_dict() for item in self.upcoming_today],
        }


@dataclass
class CreateCustomerRequest:
    """DTO for customer creation requests."""

    name: str
    email: str

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "CreateCustomerRequest":
        result = get_validator("create_customer").validate(require_json_object(data))
        result.raise_if_invalid()
        return cls(name=result.cleaned_data["name"], email=result.cleaned_data["email"])

    def validate(self) -> None:
        """Validate the request data."""
        name = (self.name or "").strip()
        email = (self.email or "").strip()
        if not name:
            raise ValidationError("Name is required", "name")
        if len(name) > CUSTOMER_NAME_MAX_LENGTH:
            raise ValidationError(
                f"Name must be at most {CUSTOMER_NAME_MAX_LENGTH} characters", "name"
            )
        if not email or "@" not in email:
            raise ValidationError("Valid email is required", "email")
        if len(email) > CUSTOMER_EMAIL_MAX_LENGTH:
            raise ValidationError(
                f"Email must be at most {CUSTOMER_EMAIL_MAX_LENGTH} characters", "email"
            )


@dataclass
class CustomerResponse:
    """DTO for customer API responses."""

    id: UUID
    name: str
    email: str

    @classmethod
    def from_domain(cls, customer) -> "CustomerResponse":
        """Create response from domain entity."""
        return cls(id=customer.id, name=customer.name, email=customer.email)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["id"] = str(self.id)
        return data

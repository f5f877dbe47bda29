"""
Common validation utilities for ScheduleIt controllers.

This module provides consistent validation patterns across all controllers
and API endpoints. Validators check the *shape* of incoming data and convert
it to Python types; scheduling rules (past slots, durations, overlaps,
transitions) stay in the domain and the workflows.
"""

import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from scheduleit.core.exceptions import ValidationError
from scheduleit.domain.entities import AppointmentStatus
from scheduleit.domain.value_objects import ensure_utc

logger = logging.getLogger(__name__)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

NOTES_MAX_LENGTH = 1000
CUSTOMER_NAME_MAX_LENGTH = 100
CUSTOMER_EMAIL_MAX_LENGTH = 200


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.is_valid: bool = True
        self.cleaned_data: Dict[str, Any] = {}

    def add_error(self, message: str, field: Optional[str] = None):
        """Add validation error."""
        error_msg = f"{field}: {message}" if field else message
        self.errors.append(error_msg)
        self.is_valid = False
        logger.debug(f"Validation error: {error_msg}")

    def raise_if_invalid(self) -> None:
        """Raise a ValidationError carrying every collected message."""
        if not self.is_valid:
            raise ValidationError("; ".join(self.errors))


def parse_utc_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp (a trailing 'Z' is accepted) into aware UTC.

    Raises ValueError for anything that is not a parseable timestamp.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def require_json_object(data: Any) -> Dict[str, Any]:
    """Return a request body as a dict; a missing body counts as empty."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_uuid(value: Any, field_name: str = "id") -> UUID:
    """Parse a UUID or raise ValidationError naming the field."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(f"{field_name} must be a valid UUID", field_name)


class BaseValidator:
    """Base validator with common validation methods."""

    def validate(
        self, data: Dict[str, Any]
    ) -> ValidationResult:  # pragma: no cover - interface definition
        """Validate data for a specific request type."""
        raise NotImplementedError("Subclasses must implement validate")

    @staticmethod
    def validate_required_field(
        value: Any, field_name: str, result: ValidationResult
    ) -> bool:
        """Validate that a required field is present and not empty."""
        if (
            value is None
            or value == ""
            or (isinstance(value, str) and value.strip() == "")
        ):
            result.add_error("is required", field_name)
            return False
        return True

    @staticmethod
    def validate_uuid(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[UUID]:
        """Validate and convert a UUID field."""
        if value is None or value == "":
            return None
        try:
            return UUID(str(value))
        except (TypeError, ValueError, AttributeError):
            result.add_error("must be a valid UUID", field_name)
            return None

    @staticmethod
    def validate_datetime(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[datetime]:
        """Validate and convert an ISO-8601 timestamp to aware UTC."""
        if value is None or value == "":
            return None
        try:
            return parse_utc_datetime(value)
        except (TypeError, ValueError):
            result.add_error("must be an ISO-8601 timestamp", field_name)
            return None

    @staticmethod
    def validate_string(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
    ) -> Optional[str]:
        """Validate string field."""
        if value is None:
            return None

        if not isinstance(value, str):
            value = str(value)

        value = value.strip()

        if min_length is not None and len(value) < min_length:
            result.add_error(f"must be at least {min_length} characters", field_name)
            return None

        if max_length is not None and len(value) > max_length:
            result.add_error(f"must be at most {max_length} characters", field_name)
            return None

        return value


class BookAppointmentValidator(BaseValidator):
    """Validator for booking requests: ``customerId``, ``startUtc``, ``endUtc``, ``notes``."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        self.validate_required_field(data.get("customerId"), "customerId", result)
        self.validate_required_field(data.get("startUtc"), "startUtc", result)
        self.validate_required_field(data.get("endUtc"), "endUtc", result)

        customer_id = self.validate_uuid(data.get("customerId"), "customerId", result)
        if customer_id is not None:
            result.cleaned_data["customer_id"] = customer_id

        start = self.validate_datetime(data.get("startUtc"), "startUtc", result)
        if start is not None:
            result.cleaned_data["start"] = start

        end = self.validate_datetime(data.get("endUtc"), "endUtc", result)
        if end is not None:
            result.cleaned_data["end"] = end

        notes = self.validate_string(
            data.get("notes"), "notes", result, max_length=NOTES_MAX_LENGTH
        )
        result.cleaned_data["notes"] = notes or ""

        return result


class UpdateStatusValidator(BaseValidator):
    """Validator for status change requests. The status value itself is
    resolved by the transition workflow so unsupported values surface there."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        if self.validate_required_field(data.get("status"), "status", result):
            result.cleaned_data["status"] = data.get("status")

        return result


class DateRangeValidator(BaseValidator):
    """Validator for ``startUtc``/``endUtc`` query parameters."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        self.validate_required_field(data.get("startUtc"), "startUtc", result)
        self.validate_required_field(data.get("endUtc"), "endUtc", result)

        start = self.validate_datetime(data.get("startUtc"), "startUtc", result)
        end = self.validate_datetime(data.get("endUtc"), "endUtc", result)
        if start is not None:
            result.cleaned_data["start"] = start
        if end is not None:
            result.cleaned_data["end"] = end

        return result


class CreateCustomerValidator(BaseValidator):
    """Validator for customer creation requests."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        self.validate_required_field(data.get("name"), "name", result)
        self.validate_required_field(data.get("email"), "email", result)

        name = self.validate_string(
            data.get("name"),
            "name",
            result,
            min_length=1,
            max_length=CUSTOMER_NAME_MAX_LENGTH,
        )
        if name:
            result.cleaned_data["name"] = name

        email = self.validate_string(
            data.get("email"),
            "email",
            result,
            min_length=1,
            max_length=CUSTOMER_EMAIL_MAX_LENGTH,
        )
        if email:
            if _EMAIL_PATTERN.match(email):
                result.cleaned_data["email"] = email.lower()
            else:
                result.add_error("must be a valid email address", "email")

        return result


def parse_status(value: Any) -> AppointmentStatus:
    """Resolve a requested status or raise ValidationError."""
    try:
        return AppointmentStatus.parse(value)
    except ValueError:
        raise ValidationError(
            f"Unsupported status transition: {value!r}", "status"
        )


# Factory function to get appropriate validator
def get_validator(request_type: str) -> BaseValidator:
    """Get validator instance for request type."""
    validators = {
        "book_appointment": BookAppointmentValidator(),
        "update_status": UpdateStatusValidator(),
        "date_range": DateRangeValidator(),
        "create_customer": CreateCustomerValidator(),
    }

    validator = validators.get(request_type.lower())
    if not validator:
        raise ValueError(f"No validator found for request type: {request_type}")

    return validator

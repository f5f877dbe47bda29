"""
Unit tests for request validators and DTO payload parsing.
"""

import uuid
from datetime import datetime, timezone

import pytest

from scheduleit.core.exceptions import ValidationError
from scheduleit.core.validation import (
    ValidationResult,
    get_validator,
    parse_status,
    parse_utc_datetime,
    parse_uuid,
    require_json_object,
)
from scheduleit.domain.entities import AppointmentStatus
from scheduleit.schemas.dtos import BookAppointmentRequest, CreateCustomerRequest


@pytest.mark.unit
class TestParsing:
    def test_parse_utc_datetime_accepts_z_suffix(self):
        assert parse_utc_datetime("2030-01-15T10:00:00Z") == datetime(
            2030, 1, 15, 10, 0, tzinfo=timezone.utc
        )

    def test_parse_utc_datetime_converts_offsets(self):
        parsed = parse_utc_datetime("2030-01-15T12:00:00+02:00")
        assert parsed == datetime(2030, 1, 15, 10, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["", "tomorrow", None, 42])
    def test_parse_utc_datetime_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_utc_datetime(value)

    def test_parse_uuid(self):
        value = uuid.uuid4()
        assert parse_uuid(str(value)) == value
        with pytest.raises(ValidationError) as exc_info:
            parse_uuid("abc", "customerId")
        assert exc_info.value.field == "customerId"

    def test_parse_status(self):
        assert parse_status("in_progress") == AppointmentStatus.IN_PROGRESS
        with pytest.raises(ValidationError, match="Unsupported status"):
            parse_status("Archived")


@pytest.mark.unit
class TestValidators:
    def test_book_appointment_validator(self):
        customer_id = uuid.uuid4()
        result = get_validator("book_appointment").validate(
            {
                "customerId": str(customer_id),
                "startUtc": "2030-01-15T10:00:00Z",
                "endUtc": "2030-01-15T11:00:00Z",
                "notes": "  hello  ",
            }
        )

        assert result.is_valid
        assert result.cleaned_data["customer_id"] == customer_id
        assert result.cleaned_data["notes"] == "hello"

    def test_book_appointment_validator_collects_all_errors(self):
        result = get_validator("book_appointment").validate(
            {"customerId": "nope", "startUtc": "later"}
        )

        assert not result.is_valid
        joined = "; ".join(result.errors)
        assert "customerId: must be a valid UUID" in joined
        assert "endUtc: is required" in joined
        assert "startUtc: must be an ISO-8601 timestamp" in joined

    def test_notes_length_limit(self):
        result = get_validator("book_appointment").validate(
            {
                "customerId": str(uuid.uuid4()),
                "startUtc": "2030-01-15T10:00:00Z",
                "endUtc": "2030-01-15T11:00:00Z",
                "notes": "x" * 1001,
            }
        )
        assert not result.is_valid

    def test_create_customer_validator(self):
        result = get_validator("create_customer").validate(
            {"name": " Ada ", "email": "ADA@Example.com"}
        )
        assert result.is_valid
        assert result.cleaned_data == {"name": "Ada", "email": "ada@example.com"}

    def test_create_customer_validator_rejects_bad_email(self):
        result = get_validator("create_customer").validate({"name": "Ada", "email": "ada"})
        assert not result.is_valid

    def test_unknown_validator(self):
        with pytest.raises(ValueError):
            get_validator("refund")

    def test_raise_if_invalid_joins_messages(self):
        result = ValidationResult()
        result.add_error("is required", "name")
        result.add_error("is required", "email")

        with pytest.raises(ValidationError, match="name: is required; email: is required"):
            result.raise_if_invalid()


@pytest.mark.unit
class TestRequestPayloads:
    def test_book_request_from_payload(self):
        customer_id = uuid.uuid4()
        request = BookAppointmentRequest.from_payload(
            {
                "customerId": str(customer_id),
                "startUtc": "2030-01-15T10:00:00Z",
                "endUtc": "2030-01-15T11:00:00Z",
            }
        )

        assert request.customer_id == customer_id
        assert request.notes is None
        request.validate()

    def test_book_request_from_empty_payload(self):
        with pytest.raises(ValidationError):
            BookAppointmentRequest.from_payload({})

    def test_customer_request_from_payload(self):
        request = CreateCustomerRequest.from_payload({"name": "Ada", "email": "a@b.co"})
        assert request.email == "a@b.co"

    def test_missing_body_counts_as_empty(self):
        assert require_json_object(None) == {}

    @pytest.mark.parametrize("body", [[], ["x"], 7, "text", True])
    def test_non_object_body_is_rejected(self, body):
        with pytest.raises(ValidationError, match="Request body must be a JSON object"):
            require_json_object(body)

    def test_from_payload_rejects_list_body(self):
        with pytest.raises(ValidationError, match="must be a JSON object"):
            CreateCustomerRequest.from_payload(["Ada", "a@b.co"])

"""
Appointment controller for handling HTTP requests following SOLID principles.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Depends on service abstractions (Dependency Inversion)

Errors raised by the service propagate to the handlers registered in
``core.api_utils.register_error_handlers``.
"""

import logging

from flask import Blueprint, current_app, request

from ..core.api_utils import api_response
from ..core.validation import (
    get_validator,
    parse_utc_datetime,
    parse_uuid,
    require_json_object,
)
from ..core.exceptions import ValidationError
from ..db.session import SessionLocal
from ..repositories.appointment_repo import AppointmentRepository
from ..repositories.customer_repo import CustomerRepository
from ..schemas.dtos import AppointmentStatusResponse, BookAppointmentRequest
from ..services.appointment_service import AppointmentService
from ..services.event_dispatcher import get_event_dispatcher

logger = logging.getLogger(__name__)

appointments_bp = Blueprint("appointments", __name__, url_prefix="/api/appointments")


def _build_service(db) -> AppointmentService:
    # Setup dependencies following SOLID principles
    event_sink = current_app.extensions.get("scheduleit.event_sink") or get_event_dispatcher()
    return AppointmentService(
        AppointmentRepository(db),
        CustomerRepository(db),
        event_sink,
    )


@appointments_bp.route("", methods=["POST"])
def book_appointment():
    """Book an appointment from ``{customerId, startUtc, endUtc, notes?}``."""
    booking = BookAppointmentRequest.from_payload(request.get_json(silent=True))
    db = SessionLocal()
    try:
        appointment_id = _build_service(db).book_appointment(booking)
        return api_response(
            True, "Appointment booked", {"id": str(appointment_id)}, 201
        )
    finally:
        db.close()


@appointments_bp.route("/range", methods=["GET"])
def appointments_in_range():
    result = get_validator("date_range").validate(request.args.to_dict())
    result.raise_if_invalid()
    db = SessionLocal()
    try:
        appointments = _build_service(db).get_appointments_in_range(
            result.cleaned_data["start"], result.cleaned_data["end"]
        )
        return api_response(
            True,
            f"{len(appointments)} appointment(s) found",
            [apt.to_dict() for apt in appointments],
        )
    finally:
        db.close()


@appointments_bp.route("/stats/today", methods=["GET"])
def today_stats():
    """Counts for the dashboard. ``nowUtc`` overrides the server clock."""
    now = None
    raw_now = request.args.get("nowUtc")
    if raw_now:
        try:
            now = parse_utc_datetime(raw_now)
        except ValueError:
            raise ValidationError("nowUtc must be an ISO-8601 timestamp", "nowUtc")

    db = SessionLocal()
    try:
        stats = _build_service(db).get_today_stats(now)
        return api_response(True, "Today's statistics", stats.to_dict())
    finally:
        db.close()


@appointments_bp.route("/<appointment_id>", methods=["GET"])
def get_appointment(appointment_id):
    parsed_id = parse_uuid(appointment_id, "appointmentId")
    db = SessionLocal()
    try:
        appointment = _build_service(db).get_appointment(parsed_id)
        return api_response(True, "Appointment found", appointment.to_dict())
    finally:
        db.close()


@appointments_bp.route("/<appointment_id>/status", methods=["PATCH"])
def update_status(appointment_id):
    parsed_id = parse_uuid(appointment_id, "appointmentId")
    result = get_validator("update_status").validate(
        require_json_object(request.get_json(silent=True))
    )
    result.raise_if_invalid()

    db = SessionLocal()
    try:
        status = _build_service(db).update_status(parsed_id, result.cleaned_data["status"])
        return api_response(
            True,
            "Appointment status updated",
            AppointmentStatusResponse(id=parsed_id, status=status.value).to_dict(),
        )
    finally:
        db.close()


@appointments_bp.route("/<appointment_id>/cancel", methods=["POST"])
def cancel_appointment(appointment_id):
    parsed_id = parse_uuid(appointment_id, "appointmentId")
    db = SessionLocal()
    try:
        status = _build_service(db).cancel_appointment(parsed_id)
        return api_response(
            True,
            "Appointment canceled",
            AppointmentStatusResponse(id=parsed_id, status=status.value).to_dict(),
        )
    finally:
        db.close()


@appointments_bp.route("/<appointment_id>", methods=["DELETE"])
def delete_appointment(appointment_id):
    parsed_id = parse_uuid(appointment_id, "appointmentId")
    db = SessionLocal()
    try:
        _build_service(db).delete_appointment(parsed_id)
        return "", 204
    finally:
        db.close()

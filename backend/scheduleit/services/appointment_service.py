"""
Appointment service following SOLID principles.

Workflows load aggregates through the repositories, let the aggregate decide,
save once, and only then hand the recorded events to the event sink.
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import UUID

from scheduleit.core.config import UPCOMING_TODAY_LIMIT
from scheduleit.core.exceptions import (
    NotFoundError,
    OperationCancelledError,
    ValidationError,
)
from scheduleit.core.logging_config import log_performance
from scheduleit.core.validation import parse_status
from scheduleit.domain.entities import Appointment, AppointmentStatus
from scheduleit.domain.exceptions import DomainRuleViolation
from scheduleit.domain.interfaces import (
    IAppointmentRepository,
    ICustomerRepository,
    IEventSink,
)
from scheduleit.domain.value_objects import ensure_utc
from scheduleit.schemas.dtos import (
    AppointmentResponse,
    BookAppointmentRequest,
    TodayStatsResponse,
    UpcomingAppointmentResponse,
)

logger = logging.getLogger(__name__)

OVERLAP_MESSAGE = "This time slot overlaps with an existing appointment."


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AppointmentService:
    """Application service for appointment-related use-cases.

    This service demonstrates:
    - Single Responsibility: Handles only appointment workflows and queries
    - Dependency Inversion: Depends on interfaces, not concrete implementations
    """

    def __init__(
        self,
        appointment_repo: IAppointmentRepository,
        customer_repo: ICustomerRepository,
        event_sink: IEventSink,
        clock: Optional[Callable[[], datetime]] = None,
        upcoming_limit: int = UPCOMING_TODAY_LIMIT,
    ):
        self.appointment_repo = appointment_repo
        self.customer_repo = customer_repo
        self.event_sink = event_sink
        self.clock = clock or _utcnow
        self.upcoming_limit = upcoming_limit

    # ------------------------------------------------------------------
    # Workflows
    # ------------------------------------------------------------------

    def book_appointment(
        self,
        request: BookAppointmentRequest,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> UUID:
        """Book a new appointment.

        Business Rules:
        - Customer must exist
        - Slot must not overlap a non-canceled appointment
        - Slot rules (future start, 30 min to 12 h) are enforced by TimeSlot
        """
        started = time.perf_counter()
        request.validate()
        now = self._resolve_now(now)

        self._check_cancelled(cancel_event, "customer lookup")
        customer = self.customer_repo.get_by_id(request.customer_id)
        if customer is None:
            logger.info(
                "Booking rejected: unknown customer",
                extra={"context": {"customer_id": str(request.customer_id)}},
            )
            raise NotFoundError(f"Customer with ID '{request.customer_id}' not found.")

        self._check_cancelled(cancel_event, "overlap check")
        # Not atomic with add(); concurrent bookings can both pass this check.
        if self.appointment_repo.has_overlapping(request.start_utc, request.end_utc):
            logger.info(
                "Booking rejected: overlapping slot",
                extra={
                    "context": {
                        "customer_id": str(request.customer_id),
                        "start_utc": request.start_utc,
                        "end_utc": request.end_utc,
                    }
                },
            )
            raise ValidationError(OVERLAP_MESSAGE)

        try:
            appointment = Appointment.create(
                customer_id=request.customer_id,
                start=request.start_utc,
                end=request.end_utc,
                now=now,
                notes=request.notes,
            )
        except DomainRuleViolation as e:
            logger.info(
                f"Booking rejected: {e.message}",
                extra={"context": {"customer_id": str(request.customer_id)}},
            )
            raise

        self._check_cancelled(cancel_event, "save")
        self.appointment_repo.add(appointment)
        self.appointment_repo.save()
        self._publish_events(appointment)

        log_performance(
            "book_appointment",
            (time.perf_counter() - started) * 1000,
            appointment_id=str(appointment.id),
        )
        return appointment.id

    def update_status(
        self,
        appointment_id: UUID,
        status,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> AppointmentStatus:
        """Move an appointment to ``status`` following the transition table."""
        target = parse_status(status)

        self._check_cancelled(cancel_event, "load")
        appointment = self._load(appointment_id)
        previous = appointment.status

        try:
            appointment.apply_status(target, self._resolve_now(now))
        except DomainRuleViolation as e:
            logger.info(
                f"Status change rejected: {e.message}",
                extra={
                    "context": {
                        "appointment_id": str(appointment_id),
                        "from": previous.value,
                        "to": target.value,
                    }
                },
            )
            raise

        self._check_cancelled(cancel_event, "save")
        self.appointment_repo.save()
        self._publish_events(appointment)

        logger.info(
            "Appointment status updated",
            extra={
                "context": {
                    "appointment_id": str(appointment_id),
                    "from": previous.value,
                    "to": appointment.status.value,
                }
            },
        )
        return appointment.status

    def cancel_appointment(
        self,
        appointment_id: UUID,
        now: Optional[datetime] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> AppointmentStatus:
        """Cancel an appointment that has not started yet."""
        self._check_cancelled(cancel_event, "load")
        appointment = self._load(appointment_id)

        try:
            appointment.cancel(self._resolve_now(now))
        except DomainRuleViolation as e:
            logger.info(
                f"Cancellation rejected: {e.message}",
                extra={"context": {"appointment_id": str(appointment_id)}},
            )
            raise

        self._check_cancelled(cancel_event, "save")
        self.appointment_repo.save()
        self._publish_events(appointment)
        return appointment.status

    def delete_appointment(
        self,
        appointment_id: UUID,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """Delete an appointment. Only Scheduled appointments may be removed."""
        self._check_cancelled(cancel_event, "load")
        appointment = self._load(appointment_id)
        appointment.ensure_can_be_deleted()

        self._check_cancelled(cancel_event, "save")
        self.appointment_repo.remove(appointment)
        self.appointment_repo.save()
        logger.info(
            "Appointment deleted",
            extra={"context": {"appointment_id": str(appointment_id)}},
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_appointment(self, appointment_id: UUID) -> AppointmentResponse:
        return AppointmentResponse.from_domain(self._load(appointment_id))

    def get_appointments_in_range(
        self, start: datetime, end: datetime
    ) -> List[AppointmentResponse]:
        """Appointments of any status whose slot intersects ``[start, end)``."""
        if ensure_utc(start) >= ensure_utc(end):
            raise ValidationError("Start must be before end.")
        appointments = self.appointment_repo.get_in_range(start, end)
        return [AppointmentResponse.from_domain(apt) for apt in appointments]

    def get_customer_appointments(self, customer_id: UUID) -> List[AppointmentResponse]:
        if self.customer_repo.get_by_id(customer_id) is None:
            raise NotFoundError(f"Customer with ID '{customer_id}' not found.")
        appointments = self.appointment_repo.get_by_customer(customer_id)
        return [AppointmentResponse.from_domain(apt) for apt in appointments]

    def get_today_stats(self, now: Optional[datetime] = None) -> TodayStatsResponse:
        """Totals for the dashboard plus the next appointments of the UTC day."""
        now = self._resolve_now(now)

        total = self.appointment_repo.count_all()
        today = self.appointment_repo.count_today(now)
        upcoming = self.appointment_repo.get_upcoming_today(now, self.upcoming_limit)

        # Batch fetch names to avoid one customer query per appointment
        names = {
            customer.id: customer.name
            for customer in self.customer_repo.get_by_ids(
                [apt.customer_id for apt in upcoming]
            )
        }

        return TodayStatsResponse(
            total_appointments=total,
            today_appointments=today,
            upcoming_today=[
                UpcomingAppointmentResponse.from_domain(
                    apt, names.get(apt.customer_id, "")
                )
                for apt in upcoming
            ],
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_now(self, now: Optional[datetime]) -> datetime:
        return ensure_utc(now) if now is not None else ensure_utc(self.clock())

    def _load(self, appointment_id: UUID) -> Appointment:
        appointment = self.appointment_repo.get_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError(f"Appointment with ID '{appointment_id}' not found.")
        return appointment

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event], stage: str) -> None:
        if cancel_event is not None and cancel_event.is_set():
            logger.info(
                "Operation cancelled by caller",
                extra={"context": {"stage": stage}},
            )
            raise OperationCancelledError(f"Operation cancelled before {stage}.")

    def _publish_events(self, appointment: Appointment) -> None:
        events = appointment.pull_events()
        if events:
            self.event_sink.publish(events)

"""
Appointment repository implementation following SOLID principles.

Maps between the Appointment aggregate and AppointmentModel rows. The
session is shared with the other repositories of the same request, so
``save()`` acts as the unit-of-work commit.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from scheduleit.db.base import AppointmentModel
from scheduleit.domain.entities import Appointment, AppointmentStatus
from scheduleit.domain.interfaces import IAppointmentRepository
from scheduleit.domain.value_objects import TimeSlot, ensure_utc

logger = logging.getLogger(__name__)


def to_db_timestamp(value: datetime) -> datetime:
    """Aware or naive datetime -> naive UTC for storage and comparisons."""
    return ensure_utc(value).replace(tzinfo=None)


def from_db_timestamp(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc)


def utc_day_bounds(moment: datetime):
    """Naive UTC ``[midnight, next midnight)`` of the day containing ``moment``."""
    day_start = to_db_timestamp(moment).replace(hour=0, minute=0, second=0, microsecond=0)
    return day_start, day_start + timedelta(days=1)


class AppointmentRepository(IAppointmentRepository):
    """Repository for Appointment persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session
        # Rows behind aggregates handed out by this repository, keyed by id
        self._tracked: Dict[UUID, AppointmentModel] = {}
        self._loaded: Dict[UUID, Appointment] = {}

    def get_by_id(self, appointment_id: UUID) -> Optional[Appointment]:
        db_appointment = self.db.get(AppointmentModel, appointment_id)
        return self._to_domain(db_appointment) if db_appointment else None

    def has_overlapping(self, start: datetime, end: datetime) -> bool:
        stmt = (
            select(AppointmentModel.id)
            .where(AppointmentModel.status != AppointmentStatus.CANCELED.value)
            .where(AppointmentModel.start_utc < to_db_timestamp(end))
            .where(AppointmentModel.end_utc > to_db_timestamp(start))
            .limit(1)
        )
        return self.db.execute(stmt).first() is not None

    def get_in_range(self, start: datetime, end: datetime) -> List[Appointment]:
        stmt = (
            select(AppointmentModel)
            .where(AppointmentModel.start_utc < to_db_timestamp(end))
            .where(AppointmentModel.end_utc > to_db_timestamp(start))
            .order_by(AppointmentModel.start_utc)
        )
        return [self._to_domain(row) for row in self.db.scalars(stmt)]

    def get_by_customer(self, customer_id: UUID) -> List[Appointment]:
        stmt = (
            select(AppointmentModel)
            .where(AppointmentModel.customer_id == customer_id)
            .order_by(AppointmentModel.start_utc)
        )
        return [self._to_domain(row) for row in self.db.scalars(stmt)]

    def count_all(self) -> int:
        return self.db.scalar(select(func.count()).select_from(AppointmentModel)) or 0

    def count_today(self, day_utc: datetime) -> int:
        day_start, day_end = utc_day_bounds(day_utc)
        stmt = (
            select(func.count())
            .select_from(AppointmentModel)
            .where(AppointmentModel.start_utc >= day_start)
            .where(AppointmentModel.start_utc < day_end)
        )
        return self.db.scalar(stmt) or 0

    def get_upcoming_today(self, now_utc: datetime, limit: int) -> List[Appointment]:
        if limit <= 0:
            return []
        day_start, day_end = utc_day_bounds(now_utc)
        now_naive = to_db_timestamp(now_utc)
        stmt = (
            select(AppointmentModel)
            .where(AppointmentModel.start_utc >= now_naive)
            .where(AppointmentModel.start_utc >= day_start)
            .where(AppointmentModel.start_utc < day_end)
            .order_by(AppointmentModel.start_utc)
            .limit(limit)
        )
        return [self._to_domain(row) for row in self.db.scalars(stmt)]

    def add(self, appointment: Appointment) -> None:
        db_appointment = AppointmentModel(
            id=appointment.id,
            customer_id=appointment.customer_id,
            start_utc=to_db_timestamp(appointment.time_slot.start),
            end_utc=to_db_timestamp(appointment.time_slot.end),
            status=appointment.status.value,
            notes=appointment.notes,
        )
        self.db.add(db_appointment)
        self._tracked[appointment.id] = db_appointment
        self._loaded[appointment.id] = appointment

    def remove(self, appointment: Appointment) -> None:
        db_appointment = self._tracked.pop(appointment.id, None) or self.db.get(
            AppointmentModel, appointment.id
        )
        self._loaded.pop(appointment.id, None)
        if db_appointment is not None:
            self.db.delete(db_appointment)

    def save(self) -> None:
        """Copy aggregate state onto tracked rows and commit."""
        for appointment_id, appointment in self._loaded.items():
            db_appointment = self._tracked.get(appointment_id)
            if db_appointment is None:
                continue
            db_appointment.status = appointment.status.value
            db_appointment.notes = appointment.notes
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(
                "Failed to save appointments",
                extra={"context": {"tracked": len(self._tracked)}},
                exc_info=True,
            )
            raise

    def _to_domain(self, db_appointment: AppointmentModel) -> Appointment:
        """Convert database model to domain entity and track it for save()."""
        cached = self._loaded.get(db_appointment.id)
        if cached is not None:
            return cached

        appointment = Appointment(
            id=db_appointment.id,
            customer_id=db_appointment.customer_id,
            time_slot=TimeSlot(
                start=from_db_timestamp(db_appointment.start_utc),
                end=from_db_timestamp(db_appointment.end_utc),
            ),
            status=AppointmentStatus(db_appointment.status),
            notes=db_appointment.notes or "",
        )
        self._tracked[appointment.id] = db_appointment
        self._loaded[appointment.id] = appointment
        return appointment

"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces define contracts without implementation details,
enabling dependency injection and easier testing.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Sequence
from uuid import UUID

from .entities import Appointment, Customer
from .events import DomainEvent


class IAppointmentReader(ABC):
    """Interface for appointment read operations."""

    @abstractmethod
    def get_by_id(self, appointment_id: UUID) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    def has_overlapping(self, start: datetime, end: datetime) -> bool:
        """True if a non-canceled appointment intersects ``[start, end)``."""
        pass

    @abstractmethod
    def get_in_range(self, start: datetime, end: datetime) -> List[Appointment]:
        """Get appointments of any status whose slot intersects the range."""
        pass

    @abstractmethod
    def get_by_customer(self, customer_id: UUID) -> List[Appointment]:
        """Get all appointments for a customer ordered by start."""
        pass

    @abstractmethod
    def count_all(self) -> int:
        pass

    @abstractmethod
    def count_today(self, day_utc: datetime) -> int:
        """Count appointments starting within the UTC day of ``day_utc``."""
        pass

    @abstractmethod
    def get_upcoming_today(self, now_utc: datetime, limit: int) -> List[Appointment]:
        """Appointments starting at or after ``now_utc`` on the same UTC day."""
        pass


class IAppointmentWriter(ABC):
    """Interface for appointment write operations."""

    @abstractmethod
    def add(self, appointment: Appointment) -> None:
        pass

    @abstractmethod
    def remove(self, appointment: Appointment) -> None:
        pass

    @abstractmethod
    def save(self) -> None:
        """Persist pending changes (including status changes of loaded aggregates)."""
        pass


class IAppointmentRepository(IAppointmentReader, IAppointmentWriter):
    """Complete appointment repository interface."""

    pass


class ICustomerReader(ABC):
    """Interface for customer read operations - Interface Segregation Principle."""

    @abstractmethod
    def get_by_id(self, customer_id: UUID) -> Optional[Customer]:
        """Get customer by ID."""
        pass

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Get customer by email."""
        pass

    @abstractmethod
    def search(self, term: Optional[str] = None) -> List[Customer]:
        """Case-insensitive name/email search, ordered by name."""
        pass

    @abstractmethod
    def get_by_ids(self, customer_ids: Iterable[UUID]) -> List[Customer]:
        """Batch lookup; unknown ids are skipped."""
        pass


class ICustomerWriter(ABC):
    """Interface for customer write operations - Interface Segregation Principle."""

    @abstractmethod
    def add(self, customer: Customer) -> None:
        pass

    @abstractmethod
    def save(self) -> None:
        pass


class ICustomerRepository(ICustomerReader, ICustomerWriter):
    """Complete customer repository interface combining read/write operations."""

    pass


class IEventSink(ABC):
    """Receives domain events once the state change that raised them is saved."""

    @abstractmethod
    def publish(self, events: Sequence[DomainEvent]) -> None:
        pass

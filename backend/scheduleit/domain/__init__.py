"""
Domain package - Pure business logic layer.

This package contains:
- value_objects.py: TimeSlot
- entities.py: the Appointment aggregate, its status enum and Customer
- events.py: domain events raised by the aggregate
- interfaces.py: Repository and event sink contracts
- exceptions.py: DomainRuleViolation
"""

from .entities import (
    ALLOWED_TRANSITIONS,
    AggregateRoot,
    Appointment,
    AppointmentStatus,
    Customer,
)
from .events import AppointmentBooked, AppointmentCanceled, DomainEvent
from .exceptions import DomainError, DomainRuleViolation
from .interfaces import (
    IAppointmentReader,
    IAppointmentRepository,
    IAppointmentWriter,
    ICustomerReader,
    ICustomerRepository,
    ICustomerWriter,
    IEventSink,
)
from .value_objects import TimeSlot, ensure_utc

__all__ = [
    # Domain entities
    "AggregateRoot",
    "Appointment",
    "AppointmentStatus",
    "ALLOWED_TRANSITIONS",
    "Customer",
    "TimeSlot",
    "ensure_utc",
    # Events
    "DomainEvent",
    "AppointmentBooked",
    "AppointmentCanceled",
    # Errors
    "DomainError",
    "DomainRuleViolation",
    # Repository interfaces
    "IAppointmentRepository",
    "ICustomerRepository",
    "IEventSink",
    # Segregated interfaces
    "IAppointmentReader",
    "IAppointmentWriter",
    "ICustomerReader",
    "ICustomerWriter",
]

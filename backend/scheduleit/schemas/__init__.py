"""
Schemas package - Data Transfer Objects and validation.

This package contains DTOs that define the API contracts
and handle validation following SOLID principles.
"""

from .dtos import (
    AppointmentResponse,
    AppointmentStatusResponse,
    BookAppointmentRequest,
    CreateCustomerRequest,
    CustomerResponse,
    TodayStatsResponse,
    UpcomingAppointmentResponse,
)

__all__ = [
    "AppointmentResponse",
    "AppointmentStatusResponse",
    "BookAppointmentRequest",
    "CreateCustomerRequest",
    "CustomerResponse",
    "TodayStatsResponse",
    "UpcomingAppointmentResponse",
]

"""
Custom exceptions for the application.
Following SOLID principles - centralized error handling.

DomainRuleViolation is re-exported here so callers can import every error
kind from one place; it is defined in the domain package.
"""

from typing import Optional

from scheduleit.domain.exceptions import DomainError, DomainRuleViolation


class ApplicationError(Exception):
    """Base class for errors raised by application workflows."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ApplicationError):
    """A referenced customer or appointment does not exist."""

    pass


class ValidationError(ApplicationError):
    """Caller input is invalid given the current data (overlap, bad status...)."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class OperationCancelledError(ApplicationError):
    """
    The caller signalled cancellation before an I/O boundary was crossed.
    Nothing has been persisted when this is raised.
    """

    pass


__all__ = [
    "ApplicationError",
    "NotFoundError",
    "ValidationError",
    "OperationCancelledError",
    "DomainError",
    "DomainRuleViolation",
]

"""
Domain exceptions.

Kept inside the domain package so entities and value objects never depend
on the application layer.
"""


class DomainError(Exception):
    """Base class for errors raised by domain objects."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DomainRuleViolation(DomainError):
    """
    Raised when an aggregate's invariants forbid the requested change
    given its current state (bad transition, cancel after start, ...).
    """

    pass

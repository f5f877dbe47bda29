"""
In-process domain event dispatcher.

Workflows hand over the events an aggregate recorded once its state has been
saved. Handlers run synchronously in emission order; a handler that raises is
logged and skipped so it can never undo or fail a committed workflow.
"""

import logging
from collections import defaultdict
from typing import Callable, DefaultDict, List, Optional, Sequence, Type

from scheduleit.domain.events import (
    AppointmentBooked,
    AppointmentCanceled,
    DomainEvent,
)
from scheduleit.domain.interfaces import IEventSink

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class DomainEventDispatcher(IEventSink):
    """Event sink that fans events out to registered handlers."""

    def __init__(self) -> None:
        self._handlers: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def register(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def handlers_for(self, event: DomainEvent) -> List[EventHandler]:
        matched: List[EventHandler] = []
        for event_type, handlers in self._handlers.items():
            if isinstance(event, event_type):
                matched.extend(handlers)
        return matched

    def publish(self, events: Sequence[DomainEvent]) -> None:
        for event in events:
            logger.debug(
                f"Publishing {event.name}",
                extra={"context": {"event": event.name}},
            )
            for handler in self.handlers_for(event):
                try:
                    handler(event)
                except Exception:
                    logger.error(
                        f"Event handler failed for {event.name}",
                        extra={
                            "context": {
                                "event": event.name,
                                "handler": getattr(handler, "__name__", repr(handler)),
                            }
                        },
                        exc_info=True,
                    )


def log_appointment_booked(event: AppointmentBooked) -> None:
    logger.info(
        "Appointment booked",
        extra={
            "context": {
                "appointment_id": str(event.appointment_id),
                "customer_id": str(event.customer_id),
                "start_utc": event.time_slot.start.isoformat(),
                "end_utc": event.time_slot.end.isoformat(),
            }
        },
    )


def log_appointment_canceled(event: AppointmentCanceled) -> None:
    logger.info(
        "Appointment canceled",
        extra={"context": {"appointment_id": str(event.appointment_id)}},
    )


def build_default_dispatcher() -> DomainEventDispatcher:
    """Dispatcher with the logging handlers attached."""
    dispatcher = DomainEventDispatcher()
    dispatcher.register(AppointmentBooked, log_appointment_booked)
    dispatcher.register(AppointmentCanceled, log_appointment_canceled)
    return dispatcher


_dispatcher: Optional[DomainEventDispatcher] = None


def get_event_dispatcher() -> DomainEventDispatcher:
    """Process-wide dispatcher, created on first use."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_default_dispatcher()
    return _dispatcher

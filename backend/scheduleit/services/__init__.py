# Services package initialization
# This file makes the services directory a Python package
# and allows importing service modules

from . import appointment_service
from . import customer_service
from . import event_dispatcher

__all__ = [
    "appointment_service",
    "customer_service",
    "event_dispatcher",
]

"""
Customer controller for handling HTTP requests following SOLID principles.
"""

from flask import Blueprint, current_app, request

from ..core.api_utils import api_response
from ..core.validation import parse_uuid
from ..db.session import SessionLocal
from ..repositories.appointment_repo import AppointmentRepository
from ..repositories.customer_repo import CustomerRepository
from ..schemas.dtos import CreateCustomerRequest
from ..services.appointment_service import AppointmentService
from ..services.customer_service import CustomerService
from ..services.event_dispatcher import get_event_dispatcher

customers_bp = Blueprint("customers", __name__, url_prefix="/api/customers")


@customers_bp.route("", methods=["POST"])
def create_customer():
    """Create a customer from ``{name, email}``."""
    payload = CreateCustomerRequest.from_payload(request.get_json(silent=True))
    db = SessionLocal()
    try:
        customer_id = CustomerService(CustomerRepository(db)).create_customer(payload)
        return api_response(True, "Customer created", {"id": str(customer_id)}, 201)
    finally:
        db.close()


@customers_bp.route("", methods=["GET"])
def search_customers():
    db = SessionLocal()
    try:
        customers = CustomerService(CustomerRepository(db)).search_customers(
            request.args.get("search")
        )
        return api_response(
            True,
            f"{len(customers)} customer(s) found",
            [c.to_dict() for c in customers],
        )
    finally:
        db.close()


@customers_bp.route("/<customer_id>", methods=["GET"])
def get_customer(customer_id):
    parsed_id = parse_uuid(customer_id, "customerId")
    db = SessionLocal()
    try:
        customer = CustomerService(CustomerRepository(db)).get_customer(parsed_id)
        return api_response(True, "Customer found", customer.to_dict())
    finally:
        db.close()


@customers_bp.route("/<customer_id>/appointments", methods=["GET"])
def customer_appointments(customer_id):
    """All appointments of one customer, oldest first."""
    parsed_id = parse_uuid(customer_id, "customerId")
    db = SessionLocal()
    try:
        service = AppointmentService(
            AppointmentRepository(db),
            CustomerRepository(db),
            current_app.extensions.get("scheduleit.event_sink") or get_event_dispatcher(),
        )
        appointments = service.get_customer_appointments(parsed_id)
        return api_response(
            True,
            f"{len(appointments)} appointment(s) found",
            [apt.to_dict() for apt in appointments],
        )
    finally:
        db.close()

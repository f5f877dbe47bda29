"""
Customer service for business logic following SOLID principles.

Customers exist so appointments have someone to belong to; the service
keeps email addresses unique and offers lookup and search.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from scheduleit.core.exceptions import NotFoundError, ValidationError
from scheduleit.domain.entities import Customer
from scheduleit.domain.interfaces import ICustomerRepository
from scheduleit.schemas.dtos import CreateCustomerRequest, CustomerResponse

logger = logging.getLogger(__name__)


class CustomerService:
    """Application service for customer-related use-cases."""

    def __init__(self, customer_repo: ICustomerRepository) -> None:
        self.customer_repo = customer_repo

    def create_customer(self, request: CreateCustomerRequest) -> UUID:
        """Create a customer.

        Business Rules:
        - Email must be unique (compared lower-cased)
        """
        request.validate()

        email = request.email.strip().lower()
        if self.customer_repo.get_by_email(email) is not None:
            raise ValidationError(
                f"Customer with email '{email}' already exists.", "email"
            )

        try:
            customer = Customer(name=request.name, email=email)
        except ValueError as e:
            raise ValidationError(str(e))

        self.customer_repo.add(customer)
        try:
            self.customer_repo.save()
        except IntegrityError as integrity_error:
            # Lost a race with a concurrent create for the same email
            logger.info("IntegrityError creating customer: %s", integrity_error)
            raise ValidationError(
                f"Customer with email '{email}' already exists.", "email"
            )
        logger.info(
            "Customer created",
            extra={"context": {"customer_id": str(customer.id)}},
        )
        return customer.id

    def get_customer(self, customer_id: UUID) -> CustomerResponse:
        customer = self.customer_repo.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError(f"Customer with ID '{customer_id}' not found.")
        return CustomerResponse.from_domain(customer)

    def search_customers(self, term: Optional[str] = None) -> List[CustomerResponse]:
        """Case-insensitive search on name or email; blank lists everyone."""
        customers = self.customer_repo.search((term or "").strip() or None)
        return [CustomerResponse.from_domain(c) for c in customers]

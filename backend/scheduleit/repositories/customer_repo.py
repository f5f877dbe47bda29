"""Customer repository implementation following SOLID principles.

Emails are stored lowercased so lookups and the unique constraint are
case-insensitive.
"""

from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError

from scheduleit.core.config import SEARCH_RESULT_LIMIT
from scheduleit.db.base import CustomerModel
from scheduleit.domain.entities import Customer
from scheduleit.domain.interfaces import ICustomerRepository


class CustomerRepository(ICustomerRepository):
    """Repository for Customer persistence operations."""

    def __init__(self, db_session, search_limit: int = SEARCH_RESULT_LIMIT) -> None:
        self.db = db_session
        self.search_limit = search_limit

    def get_by_id(self, customer_id: UUID) -> Optional[Customer]:
        db_customer = self.db.get(CustomerModel, customer_id)
        return self._to_domain(db_customer) if db_customer else None

    def get_by_email(self, email: str) -> Optional[Customer]:
        normalized = (email or "").strip().lower()
        db_customer = self.db.scalar(
            select(CustomerModel).where(CustomerModel.email == normalized)
        )
        return self._to_domain(db_customer) if db_customer else None

    def search(self, term: Optional[str] = None) -> List[Customer]:
        stmt = select(CustomerModel)
        needle = (term or "").strip().lower()
        if needle:
            stmt = stmt.where(
                or_(
                    func.lower(CustomerModel.name).contains(needle, autoescape=True),
                    func.lower(CustomerModel.email).contains(needle, autoescape=True),
                )
            )
        stmt = stmt.order_by(CustomerModel.name).limit(self.search_limit)
        return [self._to_domain(c) for c in self.db.scalars(stmt)]

    def get_by_ids(self, customer_ids: Iterable[UUID]) -> List[Customer]:
        ids = list(dict.fromkeys(customer_ids))
        if not ids:
            return []
        stmt = select(CustomerModel).where(CustomerModel.id.in_(ids))
        return [self._to_domain(c) for c in self.db.scalars(stmt)]

    def add(self, customer: Customer) -> None:
        db_customer = CustomerModel(
            id=customer.id,
            name=customer.name,
            email=customer.email,
        )
        self.db.add(db_customer)

    def save(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _to_domain(self, db_customer: CustomerModel) -> Customer:
        """Convert database model to domain entity."""
        return Customer(
            id=db_customer.id,
            name=db_customer.name,
            email=db_customer.email,
        )

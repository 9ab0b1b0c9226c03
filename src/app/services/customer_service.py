import logging
from typing import Callable, Optional
from uuid import UUID

import bcrypt
from pydantic import BaseModel, EmailStr, Field

from src.app.services.unit_of_work import TenantUnitOfWork
from src.domain.entities import Customer
from src.domain.errors import CustomerNotFound, DuplicateField

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12


class CustomerChanges(BaseModel):
    """Editable profile fields. Unknown keys, password included, are dropped."""

    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=32)


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt; the result is always 60 characters"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


class CustomerService:
    """Shopper registration inside one tenant scope"""

    def __init__(self, uow_factory: Callable[[], TenantUnitOfWork], rounds: int = BCRYPT_ROUNDS):
        self.uow_factory = uow_factory
        self.rounds = rounds

    async def register(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        phone_number: Optional[str] = None,
    ) -> Customer:
        email = email.strip().lower()
        uow = self.uow_factory()
        async with uow:
            if await uow.customers.get_by_email(email):
                raise DuplicateField("email", email)

            customer = await uow.customers.create(
                Customer(
                    email=email,
                    password_hash=hash_password(password, self.rounds),
                    first_name=first_name,
                    last_name=last_name,
                    phone_number=phone_number,
                )
            )
            await uow.commit()

        logger.info(f"Customer {customer.id} registered")
        return customer

    async def get(self, customer_id: UUID) -> Customer:
        uow = self.uow_factory()
        async with uow:
            customer = await uow.customers.get_by_id(customer_id)
            if customer is None:
                raise CustomerNotFound(customer_id)
            return customer

    async def update(self, customer_id: UUID, changes: CustomerChanges) -> Customer:
        """Apply profile changes; the password is never changed here"""
        values = changes.model_dump(exclude_unset=True)
        if values.get("email"):
            values["email"] = values["email"].strip().lower()

        uow = self.uow_factory()
        async with uow:
            customer = await uow.customers.get_by_id(customer_id)
            if customer is None:
                raise CustomerNotFound(customer_id)

            new_email = values.get("email")
            if new_email and new_email != customer.email:
                if await uow.customers.get_by_email(new_email):
                    raise DuplicateField("email", new_email)

            for field, value in values.items():
                if field == "email" and not value:
                    continue
                setattr(customer, field, value)
            customer = await uow.customers.update(customer)
            await uow.commit()

        logger.info(f"Customer {customer_id} profile updated")
        return customer

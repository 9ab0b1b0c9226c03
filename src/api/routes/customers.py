from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.app.services.customer_service import CustomerChanges, CustomerService
from src.app.services.tenant_router import ITenantHandles
from src.depends import get_tenant_handles
from src.domain.entities import Customer

router = APIRouter(prefix="/customers", tags=["Customers"])


class RegisterCustomerRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=32)


class CustomerResponse(BaseModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    order_history: List[str]
    is_active: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, customer: Customer) -> "CustomerResponse":
        return cls(
            id=str(customer.id),
            email=customer.email,
            first_name=customer.first_name,
            last_name=customer.last_name,
            phone_number=customer.phone_number,
            order_history=customer.order_history or [],
            is_active=customer.is_active,
            created_at=customer.created_at,
        )


def get_customer_service(
    handles: ITenantHandles = Depends(get_tenant_handles),
) -> CustomerService:
    return CustomerService(handles.unit_of_work)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CustomerResponse)
async def register_customer(
    request: RegisterCustomerRequest,
    service: CustomerService = Depends(get_customer_service),
):
    """
    Register Customer

    Raises:
        - 409 Conflict: DUPLICATE_FIELD (email already registered in this shop)
    """
    customer = await service.register(
        request.email,
        request.password,
        first_name=request.first_name,
        last_name=request.last_name,
        phone_number=request.phone_number,
    )
    return CustomerResponse.from_entity(customer)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: UUID, service: CustomerService = Depends(get_customer_service)
):
    return CustomerResponse.from_entity(await service.get(customer_id))


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: UUID,
    request: CustomerChanges,
    service: CustomerService = Depends(get_customer_service),
):
    """
    Update Customer Profile

    Email, name and phone only; a password in the body is ignored.

    Raises:
        - 404 Not Found: CUSTOMER_NOT_FOUND
        - 409 Conflict: DUPLICATE_FIELD (email taken in this shop)
    """
    return CustomerResponse.from_entity(await service.update(customer_id, request))

"""
Admin API Routes - Tenant Administration Endpoints

Provisioning and lifecycle of shops. Authentication is via Admin API Key.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.tenant_router import TenantDataRouter
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.tenants import (
    ChangeTenantStatusUseCase,
    DestroyTenantResponse,
    DestroyTenantUseCase,
    GetTenantUseCase,
    ListTenantsUseCase,
    ProvisionTenantCommand,
    ProvisionTenantUseCase,
    TenantResponse,
    UpdateTenantCommand,
    UpdateTenantUseCase,
)
from src.depends import get_tenant_router, get_unit_of_work

router = APIRouter(
    prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_admin_api_key)]
)


class ChangeTenantStatusRequest(BaseModel):
    status: str = Field(..., description="pending, active, suspended or inactive")


@router.post(
    "/tenants", status_code=status.HTTP_201_CREATED, response_model=TenantResponse
)
async def provision_tenant(
    command: ProvisionTenantCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
    tenant_router: TenantDataRouter = Depends(get_tenant_router),
):
    """
    Provision Tenant

    Creates the registry record, the isolated data scope and the owner
    account, then activates the tenant.

    Raises:
        - 400 Bad Request: INVALID_TENANT_IDENTIFIER (name yields no usable slug)
        - 409 Conflict: TENANT_ALREADY_EXISTS
        - 500 Internal Server Error: PROVISIONING_FAILED
    """
    use_case = ProvisionTenantUseCase(
        uow, tenant_router, scope_prefix=ApplicationConfig.TENANT_SCOPE_PREFIX
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/tenants", response_model=List[TenantResponse])
async def list_tenants(uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await ListTenantsUseCase(uow).execute()
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.get("/tenants/{tenant_id}", response_model=TenantResponse)
async def get_tenant(tenant_id: UUID, uow: UnitOfWork = Depends(get_unit_of_work)):
    result = await GetTenantUseCase(uow).execute(tenant_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/tenants/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: UUID,
    command: UpdateTenantCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Tenant

    Changes name, email, plan or settings. The slug and scope_id are
    immutable; they are ignored if present in the body.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: TENANT_ALREADY_EXISTS (name taken)
    """
    result = await UpdateTenantUseCase(uow).execute(tenant_id, command)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.put("/tenants/{tenant_id}/status", response_model=TenantResponse)
async def change_tenant_status(
    tenant_id: UUID,
    request: ChangeTenantStatusRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change Tenant Status

    Only active tenants resolve from the X-Tenant-ID header.

    Raises:
        - 400 Bad Request: INVALID_TENANT_STATUS
        - 404 Not Found: TENANT_NOT_FOUND
    """
    result = await ChangeTenantStatusUseCase(uow).execute(tenant_id, request.status)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


@router.delete("/tenants/{tenant_id}", response_model=DestroyTenantResponse)
async def destroy_tenant(
    tenant_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    tenant_router: TenantDataRouter = Depends(get_tenant_router),
):
    """
    Destroy Tenant

    Drops the tenant's data scope, then removes it from the registry.

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
    """
    result = await DestroyTenantUseCase(uow, tenant_router).execute(tenant_id)
    if result.is_err():
        raise_for_error(result.error)
    return result.value

"""
Tenant Administration Use Cases

Registry records and the data scopes behind them.
"""

from .change_tenant_status_use_case import ChangeTenantStatusUseCase
from .destroy_tenant_use_case import DestroyTenantUseCase
from .dtos import (
    DestroyTenantResponse,
    ProvisionTenantCommand,
    TenantResponse,
    UpdateTenantCommand,
)
from .get_tenants_use_case import GetTenantUseCase, ListTenantsUseCase
from .provision_tenant_use_case import ProvisionTenantUseCase
from .update_tenant_use_case import UpdateTenantUseCase

__all__ = [
    "ProvisionTenantUseCase",
    "DestroyTenantUseCase",
    "ChangeTenantStatusUseCase",
    "UpdateTenantUseCase",
    "ListTenantsUseCase",
    "GetTenantUseCase",
    "ProvisionTenantCommand",
    "UpdateTenantCommand",
    "TenantResponse",
    "DestroyTenantResponse",
]

"""
Tenant Use Case DTOs (Data Transfer Objects)

All Command and Response classes for tenant administration.
Provides type safety and clear contracts between layers.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field

from src.domain.entities import Tenant, TenantPlan


# ============================================================================
# Command DTOs
# ============================================================================


class ProvisionTenantCommand(BaseModel):
    """Tenant data plus the credentials of its first owner"""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    plan: TenantPlan = TenantPlan.free
    settings: Dict[str, Any] = Field(default_factory=dict)

    owner_name: str = Field(..., min_length=1, max_length=255)
    owner_email: EmailStr
    owner_password: str = Field(..., min_length=8)


class UpdateTenantCommand(BaseModel):
    """
    Registry metadata changes. slug and scope_id are fixed at creation and
    are not accepted here; status has its own use case.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    plan: Optional[TenantPlan] = None
    settings: Optional[Dict[str, Any]] = None


# ============================================================================
# Response DTOs
# ============================================================================


class TenantResponse(BaseModel):
    id: str
    name: str
    slug: str
    scope_id: str
    email: str
    status: str
    plan: str
    settings: Dict[str, Any]
    created_at: str
    updated_at: Optional[str] = None

    @classmethod
    def from_entity(cls, tenant: Tenant) -> "TenantResponse":
        return cls(
            id=str(tenant.id),
            name=tenant.name,
            slug=tenant.slug,
            scope_id=tenant.scope_id,
            email=tenant.email,
            status=tenant.status.value,
            plan=tenant.plan.value,
            settings=tenant.settings or {},
            created_at=tenant.created_at.isoformat(),
            updated_at=tenant.updated_at.isoformat() if tenant.updated_at else None,
        )


class DestroyTenantResponse(BaseModel):
    status: str
    tenant_id: str
    scope_id: str

"""
Tenant Entity

Platform registry record for a shop. Lives in the platform database,
never inside a tenant scope.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow
from .enums import TenantPlan, TenantStatus


class Tenant(SQLModel, table=True):
    """
    Tenant entity - a shop with its own isolated data scope.

    Business Rules:
    - name and slug are globally unique
    - scope_id is generated once at creation and never changes;
      it is the physical isolation key of the tenant's data
    - Only active tenants are routable
    - The record is deleted only together with its data scope
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(unique=True, max_length=255)
    slug: str = Field(unique=True, index=True, max_length=63)
    scope_id: str = Field(unique=True, index=True, max_length=63)
    email: str = Field(max_length=255)

    status: TenantStatus = Field(default=TenantStatus.pending)
    plan: TenantPlan = Field(default=TenantPlan.free)
    settings: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (Index("idx_tenant_status", "status"),)

"""
User Entity

Staff member of a shop. Stored inside the tenant scope; the first user is
seeded as owner when the scope is provisioned.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow
from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity - staff account within one tenant scope.

    Business Rules:
    - Email must be unique within the scope
    - Password stored as bcrypt hash
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars
    name: str = Field(max_length=255)

    role: UserRole = Field(default=UserRole.employee)
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

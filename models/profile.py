"""
User profiles.
"""

import uuid
from enum import Enum
from typing import Optional
from pydantic import Field, field_validator

from .base import BaseEntity, lower_enum_value


class Role(str, Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


HOME_ROUTES = {
    Role.ADMIN: "/admin",
    Role.EMPLOYEE: "/employee",
}

LOGIN_ROUTE = "/login"


class Profile(BaseEntity):
    """A dashboard user."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    full_name: str = Field(alias="fullName")
    email: str
    role: Role = Role.EMPLOYEE
    avatar_url: Optional[str] = Field(default=None, alias="avatarUrl")

    @field_validator("role", mode="before")
    @classmethod
    def _lowercase_role(cls, value):
        return lower_enum_value(value)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.lower()

    @property
    def home(self) -> str:
        return HOME_ROUTES[self.role]

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

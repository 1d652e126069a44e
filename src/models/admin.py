from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Literal
from src.auth.permissions import Role, normalize_role


class OrganizationSummary(BaseModel):
    id: str
    name: str
    subscription_status: str | None = None
    created_at: datetime | None = None
    member_count: int


class OrgMemberResponse(BaseModel):
    id: str
    full_name: str | None = None
    role: Role
    is_superadmin: bool = False
    created_at: datetime | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: str | None) -> Role:
        return normalize_role(value) or Role.ADMIN

    @field_validator("is_superadmin", mode="before")
    @classmethod
    def _strict_superadmin(cls, value) -> bool:
        return value is True


class RoleChangeRequest(BaseModel):
    role: Literal["superadmin", "admin", "user"]

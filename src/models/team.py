from pydantic import BaseModel, EmailStr, field_validator
from datetime import datetime
from src.auth.permissions import Role, UserPermissions


class InvitationCreate(BaseModel):
    email: EmailStr
    permissions: UserPermissions = UserPermissions()

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower() if isinstance(value, str) else value


class InvitationResponse(BaseModel):
    id: str
    email: str
    permissions: UserPermissions
    status: str
    created_at: datetime | None = None
    expires_at: datetime | None = None


class InvitationCreateResponse(BaseModel):
    invitation: InvitationResponse
    invite_url: str


class TeamMemberResponse(BaseModel):
    id: str
    email: str = ""
    full_name: str | None = None
    role: Role
    is_superadmin: bool = False
    permissions: UserPermissions
    created_at: datetime | None = None


class PermissionsUpdate(BaseModel):
    permissions: UserPermissions

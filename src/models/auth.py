from pydantic import BaseModel
from src.auth.context import AuthContext
from src.auth.permissions import Role, UserPermissions


class MeResponse(BaseModel):
    user_id: str
    org_id: str
    role: Role
    is_superadmin: bool
    permissions: UserPermissions
    capabilities: dict[str, bool]

    @classmethod
    def from_context(cls, auth: AuthContext) -> "MeResponse":
        return cls(
            user_id=auth.user_id,
            org_id=auth.org_id,
            role=auth.role,
            is_superadmin=auth.is_superadmin,
            permissions=auth.permissions,
            capabilities=auth.capabilities,
        )

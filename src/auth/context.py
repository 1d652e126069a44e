from dataclasses import dataclass

from src.auth.permissions import Role, UserPermissions, capabilities


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as asserted by a verified Supabase access token."""
    user_id: str
    email: str | None = None


@dataclass(frozen=True)
class AuthContext:
    """Authorization context for one request. Resolved fresh, never cached."""
    org_id: str
    user_id: str
    role: Role
    is_superadmin: bool
    permissions: UserPermissions

    def __post_init__(self) -> None:
        if not self.org_id:
            raise ValueError("AuthContext requires an org_id")

    @property
    def capabilities(self) -> dict[str, bool]:
        return capabilities(self.role, self.permissions)

from src.auth.context import AuthContext, Identity
from src.auth.dependencies import (
    get_current_auth,
    get_current_identity,
    require_org_admin,
    require_settings_auth,
    require_superadmin_auth,
    require_write,
    resolve_auth_context,
)
from src.auth.guards import (
    require_admin_role,
    require_delete_access,
    require_mutation_access,
    require_settings_access,
    require_superadmin,
)
from src.auth.subscription import can_write, require_write_access

__all__ = [
    "AuthContext",
    "Identity",
    "get_current_auth",
    "get_current_identity",
    "require_org_admin",
    "require_settings_auth",
    "require_superadmin_auth",
    "require_write",
    "resolve_auth_context",
    "require_admin_role",
    "require_delete_access",
    "require_mutation_access",
    "require_settings_access",
    "require_superadmin",
    "can_write",
    "require_write_access",
]

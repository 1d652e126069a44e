import logging
from collections.abc import Callable
from fastapi import Depends, Header, HTTPException, status
from src.auth.context import AuthContext, Identity
from src.auth.guards import (
    require_admin_role,
    require_mutation_access,
    require_settings_access,
    require_superadmin,
)
from src.auth.jwt import decode_access_token
from src.auth.permissions import USER_DEFAULT_PERMISSIONS, Role, RoleData, extract_role_data
from src.auth.profiles import fetch_organization_id, fetch_role_fields
from src.auth.subscription import require_write_access
from src.config import settings
from src.domain.access_errors import OnboardingIncomplete
from src.observability import incr_metric, log_event


def _extract_bearer_token(authorization: str | None) -> str | None:
    """Extract token from 'Bearer <token>' header."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]


def _degraded_role_data(identity: Identity, org_id: str, reason: str) -> RoleData:
    """Role data to use when the role columns could not be read at all."""
    mode = settings.role_lookup_failure_mode
    incr_metric("auth.role_lookup.degraded", mode=mode)
    log_event(
        "profile_role_lookup_degraded",
        level=logging.WARNING,
        user_id=identity.user_id,
        org_id=org_id,
        mode=mode,
        reason=reason,
    )
    if mode == "strict":
        return RoleData(role=Role.USER, is_superadmin=False, permissions=USER_DEFAULT_PERMISSIONS)
    return extract_role_data(None)


def resolve_auth_context(identity: Identity) -> AuthContext:
    """
    Resolve organization, role and effective permissions for a caller.

    Raises OnboardingIncomplete when the caller has no organization yet.
    A failed role lookup never propagates; defaults are substituted.
    """
    org_id = fetch_organization_id(identity.user_id)
    if not org_id:
        incr_metric("auth.onboarding_incomplete")
        raise OnboardingIncomplete(identity.user_id)

    lookup = fetch_role_fields(identity.user_id)
    if lookup.status == "failed":
        role_data = _degraded_role_data(identity, org_id, lookup.error.reason)
    else:
        # "absent" and "present" share one path: absent fields are None.
        role_data = extract_role_data(lookup.fields)

    return AuthContext(
        org_id=org_id,
        user_id=identity.user_id,
        role=role_data.role,
        is_superadmin=role_data.is_superadmin,
        permissions=role_data.permissions,
    )


async def get_current_identity(authorization: str | None = Header(None)) -> Identity:
    """Verify the Supabase access token. Does not require an organization."""
    token = _extract_bearer_token(authorization)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization header",
        )

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
        )

    return Identity(user_id=payload["sub"], email=payload.get("email"))


async def get_current_auth(identity: Identity = Depends(get_current_identity)) -> AuthContext:
    return resolve_auth_context(identity)


async def require_org_admin(auth: AuthContext = Depends(get_current_auth)) -> AuthContext:
    """Read access to admin-only surfaces (team listing)."""
    return require_admin_role(auth)


async def require_settings_auth(auth: AuthContext = Depends(get_current_auth)) -> AuthContext:
    return require_settings_access(auth)


async def require_superadmin_auth(auth: AuthContext = Depends(get_current_auth)) -> AuthContext:
    return require_superadmin(auth)


def require_write(guard: Callable[[AuthContext], AuthContext] = require_mutation_access):
    """
    Dependency for mutating endpoints: subscription gate first, then the
    permission guard. Both run before the handler touches storage.
    """
    async def _require(auth: AuthContext = Depends(get_current_auth)) -> AuthContext:
        require_write_access(auth)
        return guard(auth)

    return _require

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Final, NamedTuple

from pydantic import BaseModel, ConfigDict, ValidationError

from src.observability import log_event


class Role(StrEnum):
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    USER = "user"


ADMIN_ROLES: Final[frozenset[Role]] = frozenset({Role.SUPERADMIN, Role.ADMIN})


class UserPermissions(BaseModel):
    """Fine-grained flags. Only consulted for the ``user`` role."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    can_delete: bool = False
    can_access_settings: bool = False
    can_see_pricing: bool = False
    read_only: bool = False


ADMIN_DEFAULT_PERMISSIONS: Final[UserPermissions] = UserPermissions(
    can_delete=True,
    can_access_settings=True,
    can_see_pricing=True,
    read_only=False,
)

USER_DEFAULT_PERMISSIONS: Final[UserPermissions] = UserPermissions(
    can_delete=False,
    can_access_settings=False,
    can_see_pricing=False,
    read_only=False,
)


class RoleData(NamedTuple):
    role: Role
    is_superadmin: bool
    permissions: UserPermissions


def normalize_role(role: Any) -> Role | None:
    """Map a raw role value to a Role. Returns None for empty values.

    Unrecognized role strings resolve to ``user``, the least privileged role.
    """
    if isinstance(role, Role):
        return role
    if not role:
        return None
    raw = str(role).strip().lower()
    if not raw:
        return None
    try:
        return Role(raw)
    except ValueError:
        log_event("profile_role_unrecognized", level=logging.WARNING, role=raw)
        return Role.USER


def parse_permissions(value: Any) -> UserPermissions | None:
    """Parse stored permissions (dict, JSON text or model). None if unusable."""
    if isinstance(value, UserPermissions):
        return value
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if not isinstance(value, Mapping):
        return None
    try:
        return UserPermissions.model_validate(dict(value))
    except ValidationError:
        return None


def is_admin_role(role: Role | str) -> bool:
    return role in ADMIN_ROLES


def get_effective_permissions(
    role: Role | str,
    stored_permissions: UserPermissions | Mapping[str, Any] | None,
) -> UserPermissions:
    """Admins cannot be permission-limited; users get exactly what is stored."""
    if is_admin_role(role):
        return ADMIN_DEFAULT_PERMISSIONS
    if stored_permissions is None:
        return USER_DEFAULT_PERMISSIONS
    return parse_permissions(stored_permissions) or USER_DEFAULT_PERMISSIONS


def extract_role_data(profile: Mapping[str, Any] | None) -> RoleData:
    """Normalize a profile row that may predate the role columns.

    A missing role means the tenant has not been migrated: the caller is
    treated as the single admin of their gallery, with full access. Missing
    permissions fall back to the admin bundle, which only matters for admins.
    Never raises.
    """
    if not isinstance(profile, Mapping):
        profile = {}

    role = normalize_role(profile.get("role")) or Role.ADMIN
    is_superadmin = profile.get("is_superadmin") is True

    raw_permissions = profile.get("permissions")
    if raw_permissions is None or raw_permissions == "":
        stored = ADMIN_DEFAULT_PERMISSIONS
    else:
        stored = parse_permissions(raw_permissions)
        if stored is None:
            log_event(
                "profile_permissions_unparsable",
                level=logging.WARNING,
                role=role.value,
            )
            stored = USER_DEFAULT_PERMISSIONS

    return RoleData(
        role=role,
        is_superadmin=is_superadmin,
        permissions=get_effective_permissions(role, stored),
    )


# Predicates. Callers pass already-resolved (effective) permissions; plain
# mappings are accepted so rendering code can pass stored rows directly.

def _flags(permissions: UserPermissions | Mapping[str, Any] | None) -> UserPermissions:
    return parse_permissions(permissions) or USER_DEFAULT_PERMISSIONS


def can_mutate(role: Role | str, permissions: UserPermissions | Mapping[str, Any]) -> bool:
    if is_admin_role(role):
        return True
    permissions = _flags(permissions)
    return not permissions.read_only


def can_delete(role: Role | str, permissions: UserPermissions | Mapping[str, Any]) -> bool:
    if is_admin_role(role):
        return True
    permissions = _flags(permissions)
    # read_only overrides every mutating flag, delete included.
    return permissions.can_delete and not permissions.read_only


def can_see_pricing(role: Role | str, permissions: UserPermissions | Mapping[str, Any]) -> bool:
    if is_admin_role(role):
        return True
    permissions = _flags(permissions)
    return permissions.can_see_pricing


def can_access_settings(role: Role | str, permissions: UserPermissions | Mapping[str, Any]) -> bool:
    if is_admin_role(role):
        return True
    permissions = _flags(permissions)
    return permissions.can_access_settings


def capabilities(role: Role | str, permissions: UserPermissions | Mapping[str, Any]) -> dict[str, bool]:
    return {
        "mutate": can_mutate(role, permissions),
        "delete": can_delete(role, permissions),
        "see_pricing": can_see_pricing(role, permissions),
        "access_settings": can_access_settings(role, permissions),
    }

"""Guards convert a denied predicate into AuthorizationDenied.

Each takes an explicit AuthContext and returns it unchanged when allowed, so
they compose at call sites after the subscription gate.
"""
from __future__ import annotations

import logging

from src.auth.context import AuthContext
from src.auth.permissions import Role, can_access_settings, can_delete, can_mutate
from src.domain.access_errors import AuthorizationDenied
from src.observability import incr_metric, log_event


def _deny(auth: AuthContext, capability: str, message: str) -> AuthorizationDenied:
    incr_metric("auth.denied", capability=capability)
    log_event(
        "authorization_denied",
        level=logging.INFO,
        capability=capability,
        org_id=auth.org_id,
        user_id=auth.user_id,
        role=auth.role,
    )
    return AuthorizationDenied(capability, message)


def require_mutation_access(auth: AuthContext) -> AuthContext:
    if not can_mutate(auth.role, auth.permissions):
        raise _deny(auth, "mutate", "You don't have permission to make changes.")
    return auth


def require_delete_access(auth: AuthContext) -> AuthContext:
    if not can_delete(auth.role, auth.permissions):
        raise _deny(auth, "delete", "You don't have permission to delete.")
    return auth


def require_settings_access(auth: AuthContext) -> AuthContext:
    if not can_access_settings(auth.role, auth.permissions):
        raise _deny(auth, "access_settings", "You don't have permission to access settings.")
    return auth


def require_admin_role(auth: AuthContext) -> AuthContext:
    if auth.role == Role.USER:
        raise _deny(auth, "admin", "Admin access required.")
    return auth


def require_superadmin(auth: AuthContext) -> AuthContext:
    # Keyed on the flag alone: being admin, or even holding the superadmin
    # role value, does not grant cross-tenant access.
    if auth.is_superadmin is not True:
        raise _deny(auth, "superadmin", "Superadmin access required.")
    return auth

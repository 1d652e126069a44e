from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from src.db import supabase
from src.domain.access_errors import ProfileLookupDegraded

RoleLookupStatus = Literal["present", "absent", "failed"]


@dataclass(frozen=True)
class RoleLookup:
    """Outcome of reading the role columns of a profile.

    ``absent`` covers a missing row and unset columns; ``failed`` covers a
    query error, typically the columns not existing on an unmigrated tenant.
    """
    status: RoleLookupStatus
    fields: dict[str, Any] | None = None
    error: ProfileLookupDegraded | None = None

    @classmethod
    def present(cls, fields: dict[str, Any]) -> RoleLookup:
        return cls(status="present", fields=fields)

    @classmethod
    def absent(cls) -> RoleLookup:
        return cls(status="absent")

    @classmethod
    def failed(cls, error: ProfileLookupDegraded) -> RoleLookup:
        return cls(status="failed", error=error)


def fetch_organization_id(user_id: str) -> str | None:
    result = supabase.table("profiles").select("organization_id").eq("id", user_id).execute()
    if not result.data:
        return None
    return result.data[0].get("organization_id") or None


def fetch_role_fields(user_id: str) -> RoleLookup:
    """Read role, is_superadmin and permissions in a query of their own.

    Kept apart from the core profile query so that tenants whose schema
    predates the role columns still resolve.
    """
    try:
        result = supabase.table("profiles").select(
            "role, is_superadmin, permissions"
        ).eq("id", user_id).execute()
    except Exception as exc:
        return RoleLookup.failed(ProfileLookupDegraded(user_id, f"{type(exc).__name__}: {exc}"))

    if not result.data:
        return RoleLookup.absent()
    row = result.data[0]
    if all(row.get(key) is None for key in ("role", "is_superadmin", "permissions")):
        return RoleLookup.absent()
    return RoleLookup.present(row)

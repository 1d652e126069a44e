from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


class SubscriptionStatus(StrEnum):
    TRIALING = "trialing"
    ACTIVE = "active"
    CANCELED = "canceled"
    EXPIRED = "expired"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a timestamptz value as returned by PostgREST. Naive values are UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def write_allowed(organization: Mapping[str, Any] | None, now: datetime | None = None) -> bool:
    """Decide whether an organization's billing state permits writes.

    ``active`` always writes. ``trialing`` writes strictly before
    ``trial_ends_at``. Every other status, and a missing organization, does not.
    """
    if not organization:
        return False
    status = organization.get("subscription_status")
    if status == SubscriptionStatus.ACTIVE:
        return True
    if status == SubscriptionStatus.TRIALING:
        trial_ends_at = parse_timestamp(organization.get("trial_ends_at"))
        if trial_ends_at is None:
            return False
        current = now or datetime.now(timezone.utc)
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        return current < trial_ends_at
    return False

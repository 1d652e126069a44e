from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from src.auth.context import AuthContext
from src.db import supabase
from src.domain.access_errors import SubscriptionExpired
from src.domain.subscription import write_allowed
from src.observability import incr_metric, log_event


def fetch_billing_state(org_id: str) -> dict[str, Any] | None:
    result = supabase.table("organizations").select(
        "id, subscription_status, trial_ends_at"
    ).eq("id", org_id).execute()
    if not result.data:
        return None
    return result.data[0]


def can_write(org_id: str | None, *, now: datetime | None = None) -> bool:
    """True if the organization's subscription currently allows writes. Fails closed."""
    if not org_id:
        return False
    return write_allowed(fetch_billing_state(org_id), now)


def require_write_access(auth: AuthContext | None, *, now: datetime | None = None) -> AuthContext:
    """Subscription gate for mutating endpoints. Independent of role and permissions."""
    org_id = auth.org_id if auth else None
    if can_write(org_id, now=now):
        return auth
    incr_metric("subscription.write_blocked")
    log_event(
        "subscription_write_blocked",
        level=logging.INFO,
        org_id=org_id,
        user_id=auth.user_id if auth else None,
    )
    raise SubscriptionExpired(org_id)

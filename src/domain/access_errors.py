from __future__ import annotations

from typing import Any


class AccessError(Exception):
    """Base for errors raised by authorization and subscription guards."""

    error_type = "access_error"
    status_code = 403
    redirect_to: str | None = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class OnboardingIncomplete(AccessError):
    """The caller is authenticated but has not joined an organization yet."""

    error_type = "onboarding_incomplete"
    status_code = 409
    redirect_to = "/onboarding"

    def __init__(self, user_id: str) -> None:
        super().__init__("Finish setting up your gallery to continue.")
        self.user_id = user_id


class AuthorizationDenied(AccessError):
    error_type = "authorization_denied"
    status_code = 403

    def __init__(self, capability: str, message: str) -> None:
        super().__init__(message)
        self.capability = capability


class SubscriptionExpired(AccessError):
    error_type = "subscription_expired"
    status_code = 402
    redirect_to = "/settings"

    def __init__(self, org_id: str | None) -> None:
        super().__init__("Your trial has expired. Please upgrade to continue making changes.")
        self.org_id = org_id


class ProfileLookupDegraded(Exception):
    """Role columns could not be read; defaults are substituted.

    Internal only: logged for migration tracking, never returned to a client.
    """

    def __init__(self, user_id: str, reason: str) -> None:
        super().__init__(f"Role lookup failed for user {user_id}: {reason}")
        self.user_id = user_id
        self.reason = reason


def access_error_http_status(exc: AccessError) -> int:
    return exc.status_code


def access_error_detail(exc: AccessError) -> dict[str, Any]:
    detail: dict[str, Any] = {
        "type": exc.error_type,
        "message": exc.message,
    }
    if isinstance(exc, AuthorizationDenied):
        detail["capability"] = exc.capability
    if exc.redirect_to:
        detail["redirect_to"] = exc.redirect_to
    return detail

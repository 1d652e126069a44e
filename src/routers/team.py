import secrets
from datetime import datetime, timedelta, timezone
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from src.auth import (
    AuthContext,
    Identity,
    get_current_identity,
    require_admin_role,
    require_org_admin,
    require_write,
    resolve_auth_context,
)
from src.auth.permissions import USER_DEFAULT_PERMISSIONS, Role, extract_role_data
from src.config import settings
from src.db import supabase
from src.domain.subscription import parse_timestamp
from src.models.auth import MeResponse
from src.models.team import (
    InvitationCreate,
    InvitationCreateResponse,
    InvitationResponse,
    PermissionsUpdate,
    TeamMemberResponse,
)
from src.observability import log_event

router = APIRouter(prefix="/api/team", tags=["team"])

INVITATION_FIELDS = "id, email, permissions, status, created_at, expires_at"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _member_email(user_id: str) -> str:
    response = supabase.auth.admin.get_user_by_id(user_id)
    user = getattr(response, "user", None)
    return getattr(user, "email", None) or ""


def _get_team_user(auth: AuthContext, user_id: str) -> dict[str, Any]:
    """Load a member of the caller's organization who holds the plain user role."""
    result = supabase.table("profiles").select(
        "id, organization_id, role"
    ).eq("id", user_id).execute()
    if not result.data or result.data[0].get("organization_id") != auth.org_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found in your organization.")
    target = result.data[0]
    if extract_role_data(target).role != Role.USER:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only members with the user role can be changed.",
        )
    return target


@router.get("/members", response_model=list[TeamMemberResponse])
async def list_members(auth: AuthContext = Depends(require_org_admin)):
    result = supabase.table("profiles").select(
        "id, full_name, role, is_superadmin, permissions, created_at"
    ).eq("organization_id", auth.org_id).order("created_at").execute()

    members = []
    for profile in result.data:
        role_data = extract_role_data(profile)
        members.append(TeamMemberResponse(
            id=profile["id"],
            email=_member_email(profile["id"]),
            full_name=profile.get("full_name"),
            role=role_data.role,
            is_superadmin=role_data.is_superadmin,
            permissions=role_data.permissions,
            created_at=profile.get("created_at"),
        ))
    return members


@router.post("/invitations", response_model=InvitationCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    data: InvitationCreate,
    auth: AuthContext = Depends(require_write(require_admin_role)),
):
    """Invite someone to join the gallery as a user with the given permissions."""
    token = secrets.token_urlsafe(32)
    insert_data = {
        "organization_id": auth.org_id,
        "email": data.email,
        "permissions": data.permissions.model_dump(),
        "invited_by": auth.user_id,
        "token": token,
        "status": "pending",
        "expires_at": (_now() + timedelta(days=settings.invitation_expiry_days)).isoformat(),
    }
    result = supabase.table("invitations").insert(insert_data).execute()
    invitation = result.data[0]

    invite_url = f"{settings.app_url.rstrip('/')}/invite/{token}"
    log_event("invitation_created", org_id=auth.org_id, invited_by=auth.user_id, invitation_id=invitation["id"])
    return InvitationCreateResponse(invitation=invitation, invite_url=invite_url)


@router.get("/invitations", response_model=list[InvitationResponse])
async def list_pending_invitations(auth: AuthContext = Depends(require_org_admin)):
    result = supabase.table("invitations").select(INVITATION_FIELDS).eq(
        "organization_id", auth.org_id
    ).eq("status", "pending").order("created_at", desc=True).execute()
    return result.data


@router.delete("/invitations/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_invitation(
    invitation_id: str,
    auth: AuthContext = Depends(require_write(require_admin_role)),
):
    result = supabase.table("invitations").update({"status": "expired"}).eq(
        "id", invitation_id
    ).eq("organization_id", auth.org_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invitation not found")

    return None


@router.post("/invitations/{token}/accept", response_model=MeResponse)
async def accept_invitation(token: str, identity: Identity = Depends(get_current_identity)):
    """Join the inviting organization. Runs during onboarding, before the caller has an org."""
    result = supabase.table("invitations").select("*").eq(
        "token", token
    ).eq("status", "pending").execute()
    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid or expired invitation.")
    invitation = result.data[0]

    expires_at = parse_timestamp(invitation.get("expires_at"))
    if expires_at is None or expires_at < _now():
        supabase.table("invitations").update({"status": "expired"}).eq("id", invitation["id"]).execute()
        raise HTTPException(status_code=status.HTTP_410_GONE, detail="This invitation has expired.")

    joined = supabase.table("profiles").update({
        "organization_id": invitation["organization_id"],
        "role": Role.USER.value,
        "permissions": invitation.get("permissions") or USER_DEFAULT_PERMISSIONS.model_dump(),
        "invited_by": invitation.get("invited_by"),
    }).eq("id", identity.user_id).execute()

    # The invitation stays pending so the token can be used once the profile exists.
    if not joined.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    supabase.table("invitations").update({"status": "accepted"}).eq("id", invitation["id"]).execute()
    log_event(
        "invitation_accepted",
        org_id=invitation["organization_id"],
        user_id=identity.user_id,
        invitation_id=invitation["id"],
    )

    auth = resolve_auth_context(identity)
    return MeResponse.from_context(auth)


@router.put("/members/{user_id}/permissions", response_model=TeamMemberResponse)
async def update_member_permissions(
    user_id: str,
    data: PermissionsUpdate,
    auth: AuthContext = Depends(require_write(require_admin_role)),
):
    _get_team_user(auth, user_id)

    result = supabase.table("profiles").update({
        "permissions": data.permissions.model_dump(),
    }).eq("id", user_id).eq("organization_id", auth.org_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found in your organization.")

    profile = result.data[0]
    role_data = extract_role_data(profile)
    return TeamMemberResponse(
        id=profile["id"],
        email=_member_email(profile["id"]),
        full_name=profile.get("full_name"),
        role=role_data.role,
        is_superadmin=role_data.is_superadmin,
        permissions=role_data.permissions,
        created_at=profile.get("created_at"),
    )


@router.delete("/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    user_id: str,
    auth: AuthContext = Depends(require_write(require_admin_role)),
):
    """Detach a user from the organization. They return to onboarding as a future admin."""
    _get_team_user(auth, user_id)

    supabase.table("profiles").update({
        "organization_id": None,
        "role": Role.ADMIN.value,
        "permissions": USER_DEFAULT_PERMISSIONS.model_dump(),
    }).eq("id", user_id).eq("organization_id", auth.org_id).execute()

    log_event("team_member_removed", org_id=auth.org_id, user_id=user_id, removed_by=auth.user_id)
    return None

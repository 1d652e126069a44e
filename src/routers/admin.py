from fastapi import APIRouter, Depends, HTTPException, status
from src.auth import AuthContext, require_superadmin_auth
from src.auth.permissions import Role
from src.db import supabase
from src.models.admin import OrganizationSummary, OrgMemberResponse, RoleChangeRequest
from src.observability import log_event, metrics_snapshot

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/organizations", response_model=list[OrganizationSummary])
async def list_organizations(auth: AuthContext = Depends(require_superadmin_auth)):
    """List every organization with its member count. Cross-tenant."""
    orgs = supabase.table("organizations").select(
        "id, name, subscription_status, created_at"
    ).order("created_at", desc=True).execute()

    summaries = []
    for org in orgs.data:
        members = supabase.table("profiles").select("id", count="exact").eq(
            "organization_id", org["id"]
        ).execute()
        member_count = members.count if members.count is not None else len(members.data)
        summaries.append(OrganizationSummary(**org, member_count=member_count))
    return summaries


@router.get("/organizations/{org_id}/members", response_model=list[OrgMemberResponse])
async def list_organization_members(org_id: str, auth: AuthContext = Depends(require_superadmin_auth)):
    result = supabase.table("profiles").select(
        "id, full_name, role, is_superadmin, created_at"
    ).eq("organization_id", org_id).order("created_at").execute()
    return result.data


@router.put("/users/{user_id}/role", response_model=OrgMemberResponse)
async def change_user_role(
    user_id: str,
    data: RoleChangeRequest,
    auth: AuthContext = Depends(require_superadmin_auth),
):
    """Set any user's role to admin or user. Superadmin is never granted here."""
    if data.role == Role.SUPERADMIN:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot promote to superadmin.")

    result = supabase.table("profiles").update({"role": data.role}).eq("id", user_id).execute()
    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    log_event("user_role_changed", user_id=user_id, role=data.role, changed_by=auth.user_id)
    return result.data[0]


@router.get("/metrics")
async def get_metrics(auth: AuthContext = Depends(require_superadmin_auth)):
    """In-process counters (degraded role lookups, denials, blocked writes)."""
    return {"counters": metrics_snapshot()}

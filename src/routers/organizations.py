from fastapi import APIRouter, Depends, HTTPException, status
from src.auth import Identity, get_current_identity, resolve_auth_context
from src.auth.permissions import Role
from src.db import supabase
from src.models.auth import MeResponse
from src.models.organizations import OrganizationCreate
from src.observability import log_event

router = APIRouter(prefix="/api/organizations", tags=["organizations"])


@router.post("/", response_model=MeResponse, status_code=status.HTTP_201_CREATED)
async def create_organization(data: OrganizationCreate, identity: Identity = Depends(get_current_identity)):
    """
    Onboarding: create the caller's gallery and attach their profile as its admin.

    Billing columns are left to their database defaults, which start a trial.
    """
    profile = supabase.table("profiles").select("id, organization_id").eq("id", identity.user_id).execute()
    if not profile.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    if profile.data[0].get("organization_id"):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You already belong to a gallery.")

    insert_data = {"name": data.name}
    if data.currency:
        insert_data["currency"] = data.currency
    org = supabase.table("organizations").insert(insert_data).execute().data[0]

    attached = supabase.table("profiles").update({
        "organization_id": org["id"],
        "role": Role.ADMIN.value,
    }).eq("id", identity.user_id).is_("organization_id", "null").execute()

    if not attached.data:
        # Joined another gallery concurrently; drop the organization just created.
        supabase.table("organizations").delete().eq("id", org["id"]).execute()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You already belong to a gallery.")

    log_event("organization_created", org_id=org["id"], user_id=identity.user_id)

    auth = resolve_auth_context(identity)
    return MeResponse.from_context(auth)

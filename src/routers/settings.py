from fastapi import APIRouter, Depends, HTTPException, status
from postgrest.exceptions import APIError
from src.auth import (
    AuthContext,
    can_write,
    get_current_auth,
    require_admin_role,
    require_settings_auth,
    require_write,
)
from src.db import supabase
from src.domain.pricing import DEFAULT_CURRENCY
from src.models.settings import (
    ClientImportResponse,
    ClientImportRow,
    DataExportResponse,
    OrganizationResponse,
    OrganizationUpdate,
    ProfileResponse,
    ProfileUpdate,
    SubscriptionStateResponse,
)

router = APIRouter(prefix="/api/settings", tags=["settings"])

DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_REMINDER_TIME = "09:00"


def get_org_currency(org_id: str) -> str:
    result = supabase.table("organizations").select("currency").eq("id", org_id).execute()
    if not result.data:
        return DEFAULT_CURRENCY
    return result.data[0].get("currency") or DEFAULT_CURRENCY


@router.get("/subscription", response_model=SubscriptionStateResponse)
async def get_subscription_state(auth: AuthContext = Depends(get_current_auth)):
    """Billing state for the read-only banner and the upgrade prompt."""
    result = supabase.table("organizations").select(
        "subscription_status, trial_ends_at"
    ).eq("id", auth.org_id).execute()
    org = result.data[0] if result.data else {}
    return SubscriptionStateResponse(
        subscription_status=org.get("subscription_status"),
        trial_ends_at=org.get("trial_ends_at"),
        can_write=can_write(auth.org_id),
    )


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(data: ProfileUpdate, auth: AuthContext = Depends(require_write())):
    update_data = {
        "full_name": data.full_name or None,
        "timezone": data.timezone or DEFAULT_TIMEZONE,
        "reminder_time": data.reminder_time or DEFAULT_REMINDER_TIME,
    }
    result = supabase.table("profiles").update(update_data).eq("id", auth.user_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")

    return result.data[0]


@router.put("/organization", response_model=OrganizationResponse)
async def update_organization(
    data: OrganizationUpdate,
    auth: AuthContext = Depends(require_write(require_admin_role)),
):
    update_data = data.model_dump(exclude_unset=True)
    if "name" in update_data:
        name = (update_data["name"] or "").strip()
        if not name:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Gallery name is required")
        update_data["name"] = name
    if "currency" in update_data:
        update_data["currency"] = (update_data["currency"] or DEFAULT_CURRENCY).upper()
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    result = supabase.table("organizations").update(update_data).eq("id", auth.org_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Organization not found")

    return result.data[0]


@router.get("/export", response_model=DataExportResponse)
async def export_data(auth: AuthContext = Depends(require_settings_auth)):
    """Export the gallery's clients, notes and sales."""
    clients = supabase.table("clients").select("*").eq(
        "organization_id", auth.org_id
    ).eq("is_deleted", False).order("name").execute()
    notes = supabase.table("notes").select("*, clients!inner(name)").eq(
        "organization_id", auth.org_id
    ).order("created_at", desc=True).execute()
    sales = supabase.table("sales").select("*, clients!inner(name)").eq(
        "organization_id", auth.org_id
    ).order("sale_date", desc=True).execute()

    return DataExportResponse(
        clients=clients.data or [],
        notes=notes.data or [],
        sales=sales.data or [],
    )


@router.post("/import", response_model=ClientImportResponse)
async def import_clients(rows: list[ClientImportRow], auth: AuthContext = Depends(require_write())):
    """Import client rows already parsed by the caller. Rows without a name are skipped."""
    imported = 0
    errors: list[str] = []

    for row in rows:
        name = (row.name or "").strip()
        if not name:
            errors.append("Skipped row with no name")
            continue

        tags = [tag.strip() for tag in (row.tags or "").split(",") if tag.strip()]
        try:
            supabase.table("clients").insert({
                "organization_id": auth.org_id,
                "name": name,
                "phone": (row.phone or "").strip() or None,
                "email": (row.email or "").strip() or None,
                "location": (row.location or "").strip() or None,
                "country": (row.country or "").strip() or None,
                "tags": tags,
            }).execute()
        except APIError as exc:
            errors.append(f"Failed to import \"{name}\": {exc.message}")
            continue
        imported += 1

    return ClientImportResponse(imported=imported, errors=errors)

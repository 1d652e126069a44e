from datetime import datetime, timezone
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, Query, status
from src.auth import AuthContext, get_current_auth, require_delete_access, require_write
from src.db import supabase
from src.models.clients import ClientCreate, ClientResponse, ClientUpdate

router = APIRouter(prefix="/api/clients", tags=["clients"])

CLIENT_FIELDS = "id, name, phone, email, location, country, age_range, tags, created_at, updated_at"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_client_for_auth(auth: AuthContext, client_id: str) -> dict[str, Any]:
    result = supabase.table("clients").select(CLIENT_FIELDS).eq(
        "id", client_id
    ).eq("organization_id", auth.org_id).eq("is_deleted", False).execute()
    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return result.data[0]


def touch_client(auth: AuthContext, client_id: str) -> None:
    """Bump updated_at so recently active clients sort first."""
    supabase.table("clients").update({"updated_at": _now_iso()}).eq(
        "id", client_id
    ).eq("organization_id", auth.org_id).execute()


@router.get("/", response_model=list[ClientResponse])
async def list_clients(
    tag: str | None = Query(None),
    auth: AuthContext = Depends(get_current_auth),
):
    """List the gallery's clients, most recently active first."""
    query = supabase.table("clients").select(CLIENT_FIELDS).eq(
        "organization_id", auth.org_id
    ).eq("is_deleted", False)
    if tag:
        query = query.contains("tags", [tag])
    result = query.order("updated_at", desc=True).execute()
    return result.data


@router.get("/tags", response_model=list[str])
async def list_client_tags(auth: AuthContext = Depends(get_current_auth)):
    """Distinct tags used across the gallery's clients."""
    result = supabase.table("clients").select("tags").eq(
        "organization_id", auth.org_id
    ).eq("is_deleted", False).execute()
    tags = {tag for row in result.data for tag in (row.get("tags") or [])}
    return sorted(tags)


@router.post("/", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(data: ClientCreate, auth: AuthContext = Depends(require_write())):
    insert_data = data.model_dump()
    insert_data["organization_id"] = auth.org_id
    result = supabase.table("clients").insert(insert_data).execute()
    return result.data[0]


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client_id: str, auth: AuthContext = Depends(get_current_auth)):
    return get_client_for_auth(auth, client_id)


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    auth: AuthContext = Depends(require_write()),
):
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    update_data["updated_at"] = _now_iso()

    result = supabase.table("clients").update(update_data).eq(
        "id", client_id
    ).eq("organization_id", auth.org_id).eq("is_deleted", False).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")

    return result.data[0]


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: str, auth: AuthContext = Depends(require_write(require_delete_access))):
    """Soft delete a client."""
    result = supabase.table("clients").update({
        "is_deleted": True,
        "updated_at": _now_iso(),
    }).eq("id", client_id).eq("organization_id", auth.org_id).eq("is_deleted", False).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")

    return None

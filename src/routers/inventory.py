import math
from datetime import datetime, timezone
from typing import Any, get_args
from fastapi import APIRouter, Depends, HTTPException, Query, status
from postgrest.exceptions import APIError
from src.auth import AuthContext, get_current_auth, require_delete_access, require_write
from src.auth.permissions import can_see_pricing
from src.db import supabase
from src.domain.pricing import present_priced_row
from src.models.inventory import (
    PRICE_FIELDS,
    InventoryCreate,
    InventoryImportResponse,
    InventoryImportRow,
    InventoryResponse,
    InventorySource,
    InventoryStatus,
    InventoryUpdate,
)
from src.routers.settings import get_org_currency

router = APIRouter(prefix="/api/inventory", tags=["inventory"])

SEARCH_COLUMNS = ("title", "artist", "medium", "notes")
MIN_SEARCH_LENGTH = 2


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def search_filter(term: str) -> str:
    """PostgREST ``or`` filter matching ``term`` in any search column.

    Patterns are double-quoted so commas and parentheses in the term stay literal.
    """
    escaped = term.replace("\\", "\\\\").replace('"', '\\"')
    return ",".join(f'{column}.ilike."%{escaped}%"' for column in SEARCH_COLUMNS)


def _parse_number(value: str | None, cast):
    """Parse an imported cell; blank, zero or unparsable values become None."""
    text = (value or "").strip()
    if not text:
        return None
    try:
        number = cast(text)
    except ValueError:
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return number


def _present(auth: AuthContext, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    visible = can_see_pricing(auth.role, auth.permissions)
    currency = get_org_currency(auth.org_id) if visible else None
    return [
        present_priced_row(
            row,
            PRICE_FIELDS,
            can_see_pricing=visible,
            currency=currency,
            display_fields={"asking_price": "asking_price_display"},
        )
        for row in rows
    ]


def _writable_fields(auth: AuthContext, data: dict[str, Any]) -> dict[str, Any]:
    """Drop monetary fields from writes by callers who cannot see pricing."""
    if can_see_pricing(auth.role, auth.permissions):
        return data
    return {key: value for key, value in data.items() if key not in PRICE_FIELDS}


@router.get("/", response_model=list[InventoryResponse])
async def list_inventory(
    q: str | None = Query(None),
    item_status: InventoryStatus | None = Query(None, alias="status"),
    auth: AuthContext = Depends(get_current_auth),
):
    """List inventory, newest first. ``q`` matches title, artist, medium and notes."""
    query = supabase.table("inventory").select("*").eq(
        "organization_id", auth.org_id
    ).eq("is_deleted", False)

    if q and len(q.strip()) >= MIN_SEARCH_LENGTH:
        query = query.or_(search_filter(q.strip()))
    if item_status:
        query = query.eq("status", item_status)

    result = query.order("created_at", desc=True).execute()
    return _present(auth, result.data)


@router.post("/", response_model=InventoryResponse, status_code=status.HTTP_201_CREATED)
async def create_inventory_item(data: InventoryCreate, auth: AuthContext = Depends(require_write())):
    insert_data = _writable_fields(auth, data.model_dump())
    insert_data["organization_id"] = auth.org_id
    result = supabase.table("inventory").insert(insert_data).execute()
    return _present(auth, result.data)[0]


@router.post("/import", response_model=InventoryImportResponse)
async def import_inventory(rows: list[InventoryImportRow], auth: AuthContext = Depends(require_write())):
    """Import spreadsheet rows. Rows without a title are skipped; unknown status or source fall back to defaults."""
    imported = 0
    errors: list[str] = []

    for row in rows:
        title = (row.title or "").strip()
        if not title:
            errors.append("Skipped row with no title")
            continue

        item_status = (row.status or "").strip().lower()
        source = (row.source or "").strip().lower()
        insert_data = _writable_fields(auth, {
            "organization_id": auth.org_id,
            "title": title,
            "artist": (row.artist or "").strip() or None,
            "medium": (row.medium or "").strip() or None,
            "dimensions": (row.dimensions or "").strip() or None,
            "year": _parse_number(row.year, int),
            "asking_price": _parse_number(row.asking_price, float),
            "reserve_price": _parse_number(row.reserve_price, float),
            "status": item_status if item_status in get_args(InventoryStatus) else "available",
            "source": source if source in get_args(InventorySource) else "owned",
            "consignor": (row.consignor or "").strip() or None,
            "notes": (row.notes or "").strip() or None,
        })
        try:
            supabase.table("inventory").insert(insert_data).execute()
        except APIError as exc:
            errors.append(f"Failed to import \"{title}\": {exc.message}")
            continue
        imported += 1

    return InventoryImportResponse(imported=imported, errors=errors)


@router.get("/{item_id}", response_model=InventoryResponse)
async def get_inventory_item(item_id: str, auth: AuthContext = Depends(get_current_auth)):
    result = supabase.table("inventory").select("*").eq(
        "id", item_id
    ).eq("organization_id", auth.org_id).eq("is_deleted", False).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")

    return _present(auth, result.data)[0]


@router.put("/{item_id}", response_model=InventoryResponse)
async def update_inventory_item(
    item_id: str,
    data: InventoryUpdate,
    auth: AuthContext = Depends(require_write()),
):
    update_data = _writable_fields(auth, data.model_dump(exclude_unset=True))
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    update_data["updated_at"] = _now_iso()

    result = supabase.table("inventory").update(update_data).eq(
        "id", item_id
    ).eq("organization_id", auth.org_id).eq("is_deleted", False).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")

    return _present(auth, result.data)[0]


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory_item(item_id: str, auth: AuthContext = Depends(require_write(require_delete_access))):
    """Soft delete an inventory item."""
    result = supabase.table("inventory").update({
        "is_deleted": True,
        "updated_at": _now_iso(),
    }).eq("id", item_id).eq("organization_id", auth.org_id).eq("is_deleted", False).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory item not found")

    return None

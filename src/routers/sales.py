from datetime import date
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, Query, status
from src.auth import AuthContext, get_current_auth, require_delete_access, require_write
from src.auth.permissions import can_see_pricing
from src.db import supabase
from src.domain.pricing import present_priced_row
from src.models.sales import SaleCreate, SaleResponse, SaleUpdate
from src.routers.clients import get_client_for_auth, touch_client
from src.routers.settings import get_org_currency

router = APIRouter(prefix="/api/sales", tags=["sales"])


def _present(auth: AuthContext, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    visible = can_see_pricing(auth.role, auth.permissions)
    currency = get_org_currency(auth.org_id) if visible else None
    return [
        present_priced_row(
            row,
            ("amount",),
            can_see_pricing=visible,
            currency=currency,
            display_fields={"amount": "amount_display"},
        )
        for row in rows
    ]


@router.get("/", response_model=list[SaleResponse])
async def list_sales(
    client_id: str = Query(...),
    auth: AuthContext = Depends(get_current_auth),
):
    """List a client's sales, most recent first."""
    get_client_for_auth(auth, client_id)
    result = supabase.table("sales").select("*").eq(
        "organization_id", auth.org_id
    ).eq("client_id", client_id).order("sale_date", desc=True).execute()
    return _present(auth, result.data)


@router.post("/", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(data: SaleCreate, auth: AuthContext = Depends(require_write())):
    get_client_for_auth(auth, data.client_id)
    insert_data = {
        "organization_id": auth.org_id,
        "client_id": data.client_id,
        "artwork_name": data.artwork_name,
        "amount": data.amount,
        "sale_date": (data.sale_date or date.today()).isoformat(),
        "notes": data.notes,
    }
    result = supabase.table("sales").insert(insert_data).execute()
    touch_client(auth, data.client_id)
    return _present(auth, result.data)[0]


@router.put("/{sale_id}", response_model=SaleResponse)
async def update_sale(sale_id: str, data: SaleUpdate, auth: AuthContext = Depends(require_write())):
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")
    if "sale_date" in update_data:
        update_data["sale_date"] = (update_data["sale_date"] or date.today()).isoformat()

    result = supabase.table("sales").update(update_data).eq(
        "id", sale_id
    ).eq("organization_id", auth.org_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")

    return _present(auth, result.data)[0]


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sale(sale_id: str, auth: AuthContext = Depends(require_write(require_delete_access))):
    result = supabase.table("sales").delete().eq(
        "id", sale_id
    ).eq("organization_id", auth.org_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")

    return None

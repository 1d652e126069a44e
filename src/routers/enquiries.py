from fastapi import APIRouter, Depends, HTTPException, Query, status
from src.auth import AuthContext, get_current_auth, require_delete_access, require_write
from src.db import supabase
from src.models.enquiries import EnquiryCreate, EnquiryResponse, EnquiryUpdate
from src.routers.clients import get_client_for_auth, touch_client

router = APIRouter(prefix="/api/enquiries", tags=["enquiries"])


@router.get("/", response_model=list[EnquiryResponse])
async def list_enquiries(
    client_id: str | None = Query(None),
    auth: AuthContext = Depends(get_current_auth),
):
    """List enquiries in the gallery. Optionally filter by client_id."""
    query = supabase.table("enquiries").select("*").eq("organization_id", auth.org_id)
    if client_id:
        query = query.eq("client_id", client_id)
    result = query.order("created_at", desc=True).execute()
    return result.data


@router.post("/", response_model=EnquiryResponse, status_code=status.HTTP_201_CREATED)
async def create_enquiry(data: EnquiryCreate, auth: AuthContext = Depends(require_write())):
    get_client_for_auth(auth, data.client_id)
    insert_data = data.model_dump()
    insert_data["organization_id"] = auth.org_id
    result = supabase.table("enquiries").insert(insert_data).execute()
    touch_client(auth, data.client_id)
    return result.data[0]


@router.put("/{enquiry_id}", response_model=EnquiryResponse)
async def update_enquiry(
    enquiry_id: str,
    data: EnquiryUpdate,
    auth: AuthContext = Depends(require_write()),
):
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    result = supabase.table("enquiries").update(update_data).eq(
        "id", enquiry_id
    ).eq("organization_id", auth.org_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enquiry not found")

    return result.data[0]


@router.delete("/{enquiry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_enquiry(enquiry_id: str, auth: AuthContext = Depends(require_write(require_delete_access))):
    result = supabase.table("enquiries").delete().eq(
        "id", enquiry_id
    ).eq("organization_id", auth.org_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enquiry not found")

    return None

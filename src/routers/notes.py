from datetime import date
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, Query, status
from src.auth import AuthContext, get_current_auth, require_delete_access, require_write
from src.db import supabase
from src.models.notes import FollowUpReschedule, NoteCreate, NoteResponse, NoteUpdate
from src.routers.clients import get_client_for_auth, touch_client

router = APIRouter(prefix="/api/notes", tags=["notes"])

NOTE_FIELDS = "id, client_id, content, follow_up_date, follow_up_status, created_at"


def _update_note(auth: AuthContext, note_id: str, update_data: dict[str, Any]) -> dict[str, Any]:
    result = supabase.table("notes").update(update_data).eq(
        "id", note_id
    ).eq("organization_id", auth.org_id).execute()
    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return result.data[0]


@router.get("/", response_model=list[NoteResponse])
async def list_notes(
    client_id: str = Query(...),
    auth: AuthContext = Depends(get_current_auth),
):
    """List a client's notes, newest first."""
    get_client_for_auth(auth, client_id)
    result = supabase.table("notes").select(NOTE_FIELDS).eq(
        "organization_id", auth.org_id
    ).eq("client_id", client_id).order("created_at", desc=True).execute()
    return result.data


@router.get("/follow-ups", response_model=list[NoteResponse])
async def list_follow_ups(
    due_on_or_before: date | None = Query(None),
    auth: AuthContext = Depends(get_current_auth),
):
    """Pending follow-ups due on or before a date (default: today)."""
    cutoff = due_on_or_before or date.today()
    result = supabase.table("notes").select(NOTE_FIELDS).eq(
        "organization_id", auth.org_id
    ).eq("follow_up_status", "pending").lte(
        "follow_up_date", cutoff.isoformat()
    ).order("follow_up_date").execute()
    return result.data


@router.post("/", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(data: NoteCreate, auth: AuthContext = Depends(require_write())):
    get_client_for_auth(auth, data.client_id)
    insert_data = {
        "organization_id": auth.org_id,
        "client_id": data.client_id,
        "content": data.content,
        "follow_up_date": data.follow_up_date.isoformat() if data.follow_up_date else None,
        "follow_up_status": "pending" if data.follow_up_date else None,
    }
    result = supabase.table("notes").insert(insert_data).execute()
    touch_client(auth, data.client_id)
    return result.data[0]


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(note_id: str, data: NoteUpdate, auth: AuthContext = Depends(require_write())):
    return _update_note(auth, note_id, {"content": data.content})


@router.post("/{note_id}/follow-up/done", response_model=NoteResponse)
async def mark_follow_up_done(note_id: str, auth: AuthContext = Depends(require_write())):
    return _update_note(auth, note_id, {"follow_up_status": "done"})


@router.post("/{note_id}/follow-up/reschedule", response_model=NoteResponse)
async def reschedule_follow_up(
    note_id: str,
    data: FollowUpReschedule,
    auth: AuthContext = Depends(require_write()),
):
    return _update_note(auth, note_id, {
        "follow_up_date": data.follow_up_date.isoformat(),
        "follow_up_status": "pending",
    })


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(note_id: str, auth: AuthContext = Depends(require_write(require_delete_access))):
    result = supabase.table("notes").delete().eq(
        "id", note_id
    ).eq("organization_id", auth.org_id).execute()

    if not result.data:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")

    return None

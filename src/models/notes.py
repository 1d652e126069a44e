from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Literal


class NoteCreate(BaseModel):
    client_id: str
    content: str = Field(min_length=1)
    follow_up_date: date | None = None


class NoteUpdate(BaseModel):
    content: str = Field(min_length=1)


class FollowUpReschedule(BaseModel):
    follow_up_date: date


class NoteResponse(BaseModel):
    id: str
    client_id: str
    content: str
    follow_up_date: date | None = None
    follow_up_status: Literal["pending", "done"] | None = None
    created_at: datetime | None = None

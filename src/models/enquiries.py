from pydantic import BaseModel
from datetime import datetime


class EnquiryCreate(BaseModel):
    client_id: str
    size: str | None = None
    budget: str | None = None
    artist: str | None = None
    timeline: str | None = None
    work_type: str | None = None
    notes: str | None = None


class EnquiryUpdate(BaseModel):
    size: str | None = None
    budget: str | None = None
    artist: str | None = None
    timeline: str | None = None
    work_type: str | None = None
    notes: str | None = None


class EnquiryResponse(BaseModel):
    id: str
    client_id: str
    size: str | None = None
    budget: str | None = None
    artist: str | None = None
    timeline: str | None = None
    work_type: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

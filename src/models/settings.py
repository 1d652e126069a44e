from pydantic import BaseModel
from datetime import datetime


class ProfileUpdate(BaseModel):
    full_name: str | None = None
    timezone: str | None = None
    reminder_time: str | None = None


class ProfileResponse(BaseModel):
    id: str
    full_name: str | None = None
    timezone: str
    reminder_time: str


class OrganizationUpdate(BaseModel):
    name: str | None = None
    currency: str | None = None


class OrganizationResponse(BaseModel):
    id: str
    name: str
    currency: str | None = None
    subscription_status: str | None = None
    trial_ends_at: datetime | None = None


class SubscriptionStateResponse(BaseModel):
    subscription_status: str | None
    trial_ends_at: datetime | None
    can_write: bool


class ClientImportRow(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    location: str | None = None
    country: str | None = None
    tags: str | None = None  # comma separated


class ClientImportResponse(BaseModel):
    imported: int
    errors: list[str]


class DataExportResponse(BaseModel):
    clients: list[dict]
    notes: list[dict]
    sales: list[dict]

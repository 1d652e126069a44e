from pydantic import BaseModel, Field, field_validator
from datetime import datetime


class ClientCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str | None = None
    email: str | None = None
    location: str | None = None
    country: str | None = None
    age_range: str | None = None
    tags: list[str] = []

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value


class ClientUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None
    location: str | None = None
    country: str | None = None
    age_range: str | None = None
    tags: list[str] | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str:
        # Runs only when name is sent.
        value = (value or "").strip()
        if not value:
            raise ValueError("name is required")
        return value


class ClientResponse(BaseModel):
    id: str
    name: str
    phone: str | None = None
    email: str | None = None
    location: str | None = None
    country: str | None = None
    age_range: str | None = None
    tags: list[str] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal

InventoryStatus = Literal["available", "reserved", "sold", "not_for_sale"]
InventorySource = Literal["owned", "consignment"]

# Monetary columns; hidden from and not writable by callers without pricing access.
PRICE_FIELDS = ("asking_price", "reserve_price")


class InventoryCreate(BaseModel):
    title: str = Field(min_length=1)
    artist: str | None = None
    medium: str | None = None
    dimensions: str | None = None
    year: int | None = None
    image_path: str | None = None
    asking_price: float | None = None
    reserve_price: float | None = None
    status: InventoryStatus = "available"
    source: InventorySource = "owned"
    consignor: str | None = None
    notes: str | None = None


class InventoryUpdate(BaseModel):
    title: str | None = None
    artist: str | None = None
    medium: str | None = None
    dimensions: str | None = None
    year: int | None = None
    image_path: str | None = None
    asking_price: float | None = None
    reserve_price: float | None = None
    status: InventoryStatus | None = None
    source: InventorySource | None = None
    consignor: str | None = None
    notes: str | None = None


class InventoryResponse(BaseModel):
    id: str
    title: str
    artist: str | None = None
    medium: str | None = None
    dimensions: str | None = None
    year: int | None = None
    image_path: str | None = None
    asking_price: float | None = None
    asking_price_display: str | None = None
    reserve_price: float | None = None
    status: str
    source: str
    consignor: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class InventoryImportRow(BaseModel):
    """One spreadsheet row; every cell arrives as text."""
    title: str | None = None
    artist: str | None = None
    medium: str | None = None
    dimensions: str | None = None
    year: str | None = None
    asking_price: str | None = None
    reserve_price: str | None = None
    status: str | None = None
    source: str | None = None
    consignor: str | None = None
    notes: str | None = None


class InventoryImportResponse(BaseModel):
    imported: int
    errors: list[str]

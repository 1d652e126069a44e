from pydantic import BaseModel
from datetime import date, datetime


class SaleCreate(BaseModel):
    client_id: str
    artwork_name: str | None = None
    amount: float | None = None
    sale_date: date | None = None
    notes: str | None = None


class SaleUpdate(BaseModel):
    artwork_name: str | None = None
    amount: float | None = None
    sale_date: date | None = None
    notes: str | None = None


class SaleResponse(BaseModel):
    id: str
    client_id: str
    artwork_name: str | None = None
    amount: float | None = None
    amount_display: str | None = None
    sale_date: date | None = None
    notes: str | None = None
    created_at: datetime | None = None

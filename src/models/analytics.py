from pydantic import BaseModel
from datetime import date


class TopClientItem(BaseModel):
    client_id: str
    name: str
    total: float
    total_display: str


class AnalyticsSummaryResponse(BaseModel):
    month_start: date
    total_clients: int
    total_enquiries: int
    total_sales: int
    month_new_clients: int
    month_new_enquiries: int
    pricing_visible: bool
    # Monetary figures are None, and top_clients empty, without pricing access.
    total_sale_amount: float | None = None
    total_sale_amount_display: str | None = None
    average_sale_value: float | None = None
    average_sale_value_display: str | None = None
    month_sale_amount: float | None = None
    month_sale_amount_display: str | None = None
    top_clients: list[TopClientItem] = []

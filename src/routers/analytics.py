from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends

from src.auth import AuthContext, get_current_auth
from src.auth.permissions import can_see_pricing
from src.db import supabase
from src.domain.currency import format_currency_compact
from src.models.analytics import AnalyticsSummaryResponse, TopClientItem
from src.routers.settings import get_org_currency


router = APIRouter(prefix="/api/analytics", tags=["analytics"])

TOP_CLIENT_LIMIT = 5


def _amount(row: dict[str, Any]) -> float:
    try:
        return float(row.get("amount") or 0)
    except (TypeError, ValueError):
        return 0.0


def _count(table: str, auth: AuthContext, since: str | None = None, *, live_only: bool = False) -> int:
    query = supabase.table(table).select("id", count="exact", head=True).eq("organization_id", auth.org_id)
    if live_only:
        query = query.eq("is_deleted", False)
    if since:
        query = query.gte("created_at", since)
    result = query.execute()
    return result.count or 0


def _top_clients(sales: list[dict[str, Any]], currency: str) -> list[TopClientItem]:
    totals: dict[str, dict[str, Any]] = {}
    for sale in sales:
        client_id = sale.get("client_id")
        if not client_id:
            continue
        entry = totals.setdefault(client_id, {
            "client_id": client_id,
            "name": (sale.get("clients") or {}).get("name") or "Unknown",
            "total": 0.0,
        })
        entry["total"] += _amount(sale)

    ranked = sorted(totals.values(), key=lambda entry: entry["total"], reverse=True)[:TOP_CLIENT_LIMIT]
    return [
        TopClientItem(**entry, total_display=format_currency_compact(entry["total"], currency))
        for entry in ranked
    ]


@router.get("/summary", response_model=AnalyticsSummaryResponse)
async def get_analytics_summary(auth: AuthContext = Depends(get_current_auth)):
    """Gallery totals, this month's activity and top clients by sale amount."""
    month_start = date.today().replace(day=1).isoformat()

    sales = supabase.table("sales").select(
        "amount, client_id, sale_date, clients!inner(name)"
    ).eq("organization_id", auth.org_id).execute().data or []

    summary: dict[str, Any] = {
        "month_start": month_start,
        "total_clients": _count("clients", auth, live_only=True),
        "total_enquiries": _count("enquiries", auth),
        "total_sales": len(sales),
        "month_new_clients": _count("clients", auth, month_start, live_only=True),
        "month_new_enquiries": _count("enquiries", auth, month_start),
        "pricing_visible": can_see_pricing(auth.role, auth.permissions),
    }
    if not summary["pricing_visible"]:
        return AnalyticsSummaryResponse(**summary)

    currency = get_org_currency(auth.org_id)
    total = sum(_amount(sale) for sale in sales)
    average = total / len(sales) if sales else 0.0
    month_total = sum(_amount(sale) for sale in sales if (sale.get("sale_date") or "") >= month_start)

    return AnalyticsSummaryResponse(
        **summary,
        total_sale_amount=total,
        total_sale_amount_display=format_currency_compact(total, currency),
        average_sale_value=average,
        average_sale_value_display=format_currency_compact(average, currency),
        month_sale_amount=month_total,
        month_sale_amount_display=format_currency_compact(month_total, currency),
        top_clients=_top_clients(sales, currency),
    )

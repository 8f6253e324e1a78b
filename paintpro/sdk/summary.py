import asyncio
from datetime import date
from typing import Any, Dict, List, Optional

from ..services.financial import (
    build_category_breakdown,
    build_recipient_breakdown,
    build_time_series,
    totals,
)
from .cache import QueryCache


class FinancialSummary:
    """
    Chart data derived from the payments and invoices summaries.

    The views are only rebuilt once both summaries are available; while
    either is still loading the previously derived views stay in place.
    """

    def __init__(self, locale: Optional[str] = None):
        self.locale = locale
        self.time_series: List[Dict[str, Any]] = []
        self.category_breakdown: List[Dict[str, Any]] = []
        self.recipient_breakdown: List[Dict[str, Any]] = []
        self.totals: Dict[str, Any] = totals([])

    def update(self, payments: Optional[dict], invoices: Optional[dict]) -> bool:
        if payments is None or invoices is None:
            return False
        self.time_series = build_time_series(payments.get("timeSeriesData"), invoices.get("timeSeriesData"))
        self.category_breakdown = build_category_breakdown(payments.get("categorySummary"))
        self.recipient_breakdown = build_recipient_breakdown(payments.get("recipientSummary"), self.locale)
        self.totals = totals(self.time_series)
        return True

    async def load(self, cache: QueryCache, start: Optional[date] = None, end: Optional[date] = None) -> bool:
        params = {
            "startDate": start.isoformat() if start else None,
            "endDate": end.isoformat() if end else None,
        }
        payments, invoices = await asyncio.gather(
            cache.fetch("/api/payments/summary", params),
            cache.fetch("/api/invoices/summary", params),
        )
        return self.update(payments, invoices)

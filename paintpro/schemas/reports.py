from decimal import Decimal
from typing import List, Optional

from .common import WireModel
from .invoices import InvoiceSummary
from .payments import PaymentSummary
from .projects import ProjectFinancialRow


class TimeSeriesRow(WireModel):
    date: str
    income: Decimal
    expense: Decimal
    profit: Decimal


class BreakdownItem(WireModel):
    name: str
    value: Decimal
    type: Optional[str] = None


class ReportTotals(WireModel):
    income: Decimal
    expense: Decimal
    profit: Decimal


class FinancialReport(WireModel):
    start_date: str
    end_date: str
    totals: ReportTotals
    time_series: List[TimeSeriesRow]
    category_breakdown: List[BreakdownItem]
    recipient_breakdown: List[BreakdownItem]
    payments: PaymentSummary
    invoices: InvoiceSummary


class ProfitMarginReport(WireModel):
    projects: List[ProjectFinancialRow]
    average_margin: Optional[float] = None

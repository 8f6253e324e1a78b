"""
Database-backed summaries behind the financial endpoints.

Cancelled invoices and payments are left out of every figure. Ranges are
inclusive calendar days in UTC; with no dates given the range is the last
30 days ending today.
"""
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..models.models import Invoice, Payment, Project, Staff, Subcontractor, Supplier
from .financial import (
    build_time_series,
    build_category_breakdown,
    build_recipient_breakdown,
    profit_margin,
    totals,
)


DEFAULT_RANGE_DAYS = 30
UNCATEGORIZED = "uncategorized"


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)


def resolve_range(start: Optional[date] = None, end: Optional[date] = None) -> Tuple[date, date]:
    end = end or datetime.now(timezone.utc).date()
    start = start or end - timedelta(days=DEFAULT_RANGE_DAYS)
    if start > end:
        start, end = end, start
    return start, end


def _bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    lower = datetime.combine(start, time.min, tzinfo=timezone.utc)
    upper = datetime.combine(end + timedelta(days=1), time.min, tzinfo=timezone.utc)
    return lower, upper


def _daily(rows: List[Tuple[datetime, Decimal]]) -> List[dict]:
    by_day: Dict[str, Decimal] = {}
    for when, amount in rows:
        key = _as_utc(when).date().isoformat()
        by_day[key] = by_day.get(key, Decimal("0")) + (amount or Decimal("0"))
    return [{"date": key, "amount": by_day[key]} for key in sorted(by_day)]


def _recipient_names(db: Session, pairs) -> Dict[Tuple[str, int], str]:
    models = {"staff": Staff, "subcontractor": Subcontractor, "supplier": Supplier}
    names = {}
    for rtype, rid in pairs:
        model = models.get(rtype)
        obj = db.get(model, rid) if model is not None else None
        names[(rtype, rid)] = obj.name if obj is not None else f"#{rid}"
    return names


def payments_summary(db: Session, start: Optional[date] = None, end: Optional[date] = None) -> dict:
    start, end = resolve_range(start, end)
    lower, upper = _bounds(start, end)
    payments = (
        db.query(Payment)
        .filter(Payment.status != "cancelled", Payment.date >= lower, Payment.date < upper)
        .order_by(Payment.date)
        .all()
    )

    total = Decimal("0")
    categories: Dict[str, Decimal] = {}
    recipients: Dict[Tuple[str, int], Decimal] = {}
    for p in payments:
        amount = p.amount or Decimal("0")
        total += amount
        category = p.category or UNCATEGORIZED
        categories[category] = categories.get(category, Decimal("0")) + amount
        key = (p.recipient_type, p.recipient_id)
        recipients[key] = recipients.get(key, Decimal("0")) + amount

    names = _recipient_names(db, recipients.keys())
    return {
        "totalExpenses": total,
        "paymentCount": len(payments),
        "timeSeriesData": _daily([(p.date, p.amount) for p in payments]),
        "categorySummary": [{"name": name, "total": value} for name, value in categories.items()],
        "recipientSummary": [
            {"type": rtype, "id": rid, "name": names[(rtype, rid)], "total": value}
            for (rtype, rid), value in recipients.items()
        ],
    }


def invoices_summary(db: Session, start: Optional[date] = None, end: Optional[date] = None) -> dict:
    start, end = resolve_range(start, end)
    lower, upper = _bounds(start, end)
    invoices = (
        db.query(Invoice)
        .filter(
            Invoice.status != "cancelled",
            Invoice.issue_date.isnot(None),
            Invoice.issue_date >= lower,
            Invoice.issue_date < upper,
        )
        .order_by(Invoice.issue_date)
        .all()
    )
    return {
        "totalRevenue": sum((i.total_amount or Decimal("0") for i in invoices), Decimal("0")),
        "invoiceCount": len(invoices),
        "timeSeriesData": _daily([(i.issue_date, i.total_amount) for i in invoices]),
    }


def project_financials(db: Session) -> List[dict]:
    """Revenue (invoices) against expenses (payments) for every project."""
    revenue: Dict[int, Decimal] = {}
    for project_id, amount in (
        db.query(Invoice.project_id, Invoice.total_amount).filter(Invoice.status != "cancelled").all()
    ):
        revenue[project_id] = revenue.get(project_id, Decimal("0")) + (amount or Decimal("0"))

    expenses: Dict[int, Decimal] = {}
    for project_id, amount in (
        db.query(Payment.project_id, Payment.amount)
        .filter(Payment.status != "cancelled", Payment.project_id.isnot(None))
        .all()
    ):
        expenses[project_id] = expenses.get(project_id, Decimal("0")) + (amount or Decimal("0"))

    rows = []
    for project in db.query(Project).order_by(Project.id).all():
        rev = revenue.get(project.id, Decimal("0"))
        exp = expenses.get(project.id, Decimal("0"))
        rows.append({
            "projectId": project.id,
            "title": project.title,
            "clientId": project.client_id,
            "status": project.status,
            "revenue": rev,
            "expenses": exp,
            "profit": rev - exp,
            "margin": profit_margin(rev, exp),
        })
    return rows


def profit_margins(db: Session) -> dict:
    rows = project_financials(db)
    margins = [row["margin"] for row in rows if row["margin"] is not None]
    average = round(sum(margins) / len(margins), 2) if margins else None
    return {"projects": rows, "averageMargin": average}


def financial_report(
    db: Session,
    start: Optional[date] = None,
    end: Optional[date] = None,
    locale: Optional[str] = None,
) -> dict:
    """Everything the financial report page and the PDF export show."""
    start, end = resolve_range(start, end)
    payments = payments_summary(db, start, end)
    invoices = invoices_summary(db, start, end)
    series = build_time_series(payments["timeSeriesData"], invoices["timeSeriesData"])
    return {
        "startDate": start.isoformat(),
        "endDate": end.isoformat(),
        "totals": totals(series),
        "timeSeries": series,
        "categoryBreakdown": build_category_breakdown(payments["categorySummary"]),
        "recipientBreakdown": build_recipient_breakdown(payments["recipientSummary"], locale),
        "payments": payments,
        "invoices": invoices,
    }

"""
Derived financial views.

Pure functions over the payments/invoices summary payloads. They accept the
wire shapes (camelCase dicts, amounts as numbers or decimal strings), never
mutate their inputs and always return fresh lists with Decimal amounts.
"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

from ..i18n import translate


_RECIPIENT_ALIASES = {
    "subcontractor": "subcontractor",
    "staff": "employee",
    "employee": "employee",
    "supplier": "supplier",
}


def to_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        return Decimal("0")


def _date_key(value: Any):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return date.max


def _date_label(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)


def _amounts_by_date(series: Optional[Iterable[Dict[str, Any]]]) -> Dict[str, Decimal]:
    out: Dict[str, Decimal] = {}
    for item in series or []:
        label = _date_label(item.get("date"))
        out[label] = out.get(label, Decimal("0")) + to_decimal(item.get("amount"))
    return out


def build_time_series(
    payments_ts: Optional[Iterable[Dict[str, Any]]],
    invoices_ts: Optional[Iterable[Dict[str, Any]]],
) -> List[Dict[str, Any]]:
    """
    Merge daily expense and income series into one row per date.

    Every date present on either side appears once; the missing side counts
    as zero and ``profit`` is ``income - expense``. Rows are sorted by date
    ascending.
    """
    expenses = _amounts_by_date(payments_ts)
    income = _amounts_by_date(invoices_ts)
    rows = []
    for label in set(expenses) | set(income):
        inc = income.get(label, Decimal("0"))
        exp = expenses.get(label, Decimal("0"))
        rows.append({"date": label, "income": inc, "expense": exp, "profit": inc - exp})
    rows.sort(key=lambda row: (_date_key(row["date"]), row["date"]))
    return rows


def build_category_breakdown(category_summary: Optional[Iterable[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return [{"name": item.get("name"), "value": to_decimal(item.get("total"))} for item in category_summary or []]


def normalize_recipient_type(value: Any) -> str:
    key = str(value or "").strip().lower()
    return _RECIPIENT_ALIASES.get(key, "other")


def build_recipient_breakdown(
    recipient_summary: Optional[Iterable[Dict[str, Any]]],
    locale: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Totals per recipient group, labelled from the message catalog."""
    grouped: Dict[str, Decimal] = {}
    for item in recipient_summary or []:
        group = normalize_recipient_type(item.get("type"))
        grouped[group] = grouped.get(group, Decimal("0")) + to_decimal(item.get("total"))
    return [
        {"type": group, "name": translate(f"recipient.{group}", locale), "value": total}
        for group, total in grouped.items()
    ]


def profit_margin(revenue: Decimal, expenses: Decimal) -> Optional[float]:
    """Margin as a percentage of revenue, None when there is no revenue."""
    if not revenue:
        return None
    return round(float((revenue - expenses) / revenue * 100), 2)


def totals(time_series: Iterable[Dict[str, Any]]) -> Dict[str, Decimal]:
    income = sum((row["income"] for row in time_series), Decimal("0"))
    expense = sum((row["expense"] for row in time_series), Decimal("0"))
    return {"income": income, "expense": expense, "profit": income - expense}

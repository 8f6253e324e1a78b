"""
Status and priority badges.

Each known value maps to a fixed color; the label comes from the message
catalog. Unknown values fall back to a gray badge showing the raw value.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..i18n import translate


@dataclass(frozen=True)
class Badge:
    label: str
    color: str


DEFAULT_COLOR = "gray"

STATUS_COLORS = {
    "project": {
        "pending": "gray",
        "quoted": "blue",
        "approved": "indigo",
        "preparing": "purple",
        "in_progress": "yellow",
        "reviewing": "orange",
        "completed": "green",
        "archived": "gray",
    },
    "quote": {"draft": "gray", "sent": "blue", "approved": "green", "rejected": "red"},
    "service_order": {"pending": "gray", "in_progress": "yellow", "completed": "green"},
    "invoice": {"draft": "gray", "sent": "blue", "paid": "green", "overdue": "red", "cancelled": "gray"},
    "payment": {"pending": "yellow", "completed": "green", "cancelled": "red"},
    "purchase_order": {"draft": "gray", "sent": "blue", "received": "green", "cancelled": "red"},
    "staff": {"available": "green", "assigned": "blue", "on_leave": "yellow"},
    "subcontractor": {"active": "green", "inactive": "gray", "blacklisted": "red"},
    "supplier": {"active": "green", "inactive": "gray"},
}

PRIORITY_COLORS = {"high": "red", "medium": "yellow", "low": "green"}


def status_badge(entity: str, status: Optional[str], locale: Optional[str] = None) -> Badge:
    colors = STATUS_COLORS.get(entity, {})
    if status in colors:
        return Badge(translate(f"status.{entity}.{status}", locale), colors[status])
    return Badge(str(status or ""), DEFAULT_COLOR)


def priority_badge(priority: Optional[str], locale: Optional[str] = None) -> Badge:
    if priority in PRIORITY_COLORS:
        return Badge(translate(f"priority.{priority}", locale), PRIORITY_COLORS[priority])
    return Badge(translate("priority.unknown", locale), DEFAULT_COLOR)


def format_currency(value) -> str:
    """US dollar display, e.g. ``$1,234.50``; unparseable input shows as $0.00."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value if value is not None else 0))
        except InvalidOperation:
            amount = Decimal("0")
    if not amount.is_finite():
        amount = Decimal("0")
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"

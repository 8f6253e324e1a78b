import secrets
import string
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..models.models import Invoice, PurchaseOrder
from ..logging import structlog


_ALPHABET = string.ascii_uppercase + string.digits
MAX_ATTEMPTS = 5


def _stamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).strftime("%Y%m%d")


def _random_suffix(length: int) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def invoice_number(now: Optional[datetime] = None) -> str:
    """INV-YYYYMMDD-XXXXXX"""
    return f"INV-{_stamp(now)}-{_random_suffix(6)}"


def order_number(now: Optional[datetime] = None) -> str:
    """PO-YYYYMMDD-XXXX"""
    return f"PO-{_stamp(now)}-{_random_suffix(4)}"


def _unused(db: Session, column, generate: Callable[[], str], kind: str) -> Optional[str]:
    for attempt in range(MAX_ATTEMPTS):
        candidate = generate()
        if db.query(column).filter(column == candidate).first() is None:
            return candidate
        structlog.get_logger().warning("document_number_conflict", kind=kind, attempt=attempt + 1, number=candidate)
    return None


def next_invoice_number(db: Session) -> Optional[str]:
    """A free invoice number, or None once every attempt collided."""
    return _unused(db, Invoice.invoice_number, invoice_number, "invoice")


def next_order_number(db: Session) -> Optional[str]:
    return _unused(db, PurchaseOrder.order_number, order_number, "purchase_order")

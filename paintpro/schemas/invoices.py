import enum
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .common import WireModel, ReadModel, FlexibleDate, Money, OptionalText, not_null


class InvoiceStatus(str, enum.Enum):
    draft = "draft"
    sent = "sent"
    paid = "paid"
    overdue = "overdue"
    cancelled = "cancelled"


class InvoiceCreate(WireModel):
    """invoiceNumber is assigned by the server and ignored on input."""

    project_id: int
    client_id: int
    amount: Optional[Money] = None
    tax: Optional[Money] = None
    total_amount: Money
    status: InvoiceStatus = InvoiceStatus.draft
    issue_date: FlexibleDate = None
    due_date: FlexibleDate = None
    paid_date: FlexibleDate = None
    payment_method: OptionalText = None
    items: Optional[List[Dict[str, Any]]] = None
    notes: OptionalText = None


class InvoiceUpdate(WireModel):
    project_id: Optional[int] = None
    client_id: Optional[int] = None
    amount: Optional[Money] = None
    tax: Optional[Money] = None
    total_amount: Optional[Money] = None
    status: Optional[InvoiceStatus] = None
    issue_date: FlexibleDate = None
    due_date: FlexibleDate = None
    paid_date: FlexibleDate = None
    payment_method: OptionalText = None
    items: Optional[List[Dict[str, Any]]] = None
    notes: OptionalText = None

    _required = not_null("project_id", "client_id", "amount", "total_amount", "status")


class InvoiceResponse(ReadModel):
    id: int
    project_id: int
    client_id: int
    invoice_number: str
    amount: Decimal
    tax: Optional[Decimal] = None
    total_amount: Decimal
    status: str
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    payment_method: Optional[str] = None
    items: Optional[List[Dict[str, Any]]] = None
    notes: Optional[str] = None
    created_at: datetime


class DailyAmount(WireModel):
    date: str
    amount: Decimal


class InvoiceSummary(WireModel):
    total_revenue: Decimal
    invoice_count: int
    time_series_data: List[DailyAmount]

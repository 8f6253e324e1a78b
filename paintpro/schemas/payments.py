import enum
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from .common import WireModel, ReadModel, FlexibleDate, Money, OptionalText, not_null
from .invoices import DailyAmount


class RecipientType(str, enum.Enum):
    subcontractor = "subcontractor"
    staff = "staff"
    supplier = "supplier"


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    cancelled = "cancelled"


class PaymentCreate(WireModel):
    """createdBy is taken from the authenticated user."""

    amount: Money
    date: FlexibleDate = None
    recipient_type: RecipientType
    recipient_id: int
    payment_type: OptionalText = None
    category: OptionalText = None
    payment_method: OptionalText = None
    reference: OptionalText = None
    description: OptionalText = None
    status: PaymentStatus = PaymentStatus.pending
    project_id: Optional[int] = None
    service_order_id: Optional[int] = None
    invoice_id: Optional[int] = None
    purchase_order_id: Optional[int] = None


class PaymentUpdate(WireModel):
    amount: Optional[Money] = None
    date: FlexibleDate = None
    recipient_type: Optional[RecipientType] = None
    recipient_id: Optional[int] = None
    payment_type: OptionalText = None
    category: OptionalText = None
    payment_method: OptionalText = None
    reference: OptionalText = None
    description: OptionalText = None
    status: Optional[PaymentStatus] = None
    project_id: Optional[int] = None
    service_order_id: Optional[int] = None
    invoice_id: Optional[int] = None
    purchase_order_id: Optional[int] = None

    _required = not_null("amount", "date", "recipient_type", "recipient_id", "status")


class PaymentResponse(ReadModel):
    id: int
    amount: Decimal
    date: datetime
    recipient_type: str
    recipient_id: int
    payment_type: Optional[str] = None
    category: Optional[str] = None
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    description: Optional[str] = None
    status: str
    project_id: Optional[int] = None
    service_order_id: Optional[int] = None
    invoice_id: Optional[int] = None
    purchase_order_id: Optional[int] = None
    created_by: Optional[int] = None
    created_at: datetime


class CategoryTotal(WireModel):
    name: str
    total: Decimal


class RecipientTotal(WireModel):
    type: str
    id: int
    name: str
    total: Decimal


class PaymentSummary(WireModel):
    total_expenses: Decimal
    payment_count: int
    time_series_data: List[DailyAmount]
    category_summary: List[CategoryTotal]
    recipient_summary: List[RecipientTotal]

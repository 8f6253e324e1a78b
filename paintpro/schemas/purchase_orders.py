"""
Purchase order schemas.

Line quantities and unit prices are lenient: a string that does not parse is
read as 0. ``totalPrice`` keeps the caller's digits as a decimal string and
is not checked against ``quantity * unitPrice``.
"""
import enum
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from .common import (
    WireModel,
    ReadModel,
    RequiredText,
    OptionalText,
    FlexibleDate,
    LenientNumber,
    DecimalString,
    not_null,
)


class PurchaseOrderStatus(str, enum.Enum):
    draft = "draft"
    sent = "sent"
    received = "received"
    cancelled = "cancelled"


class PurchaseOrderItemCreate(WireModel):
    description: RequiredText
    unit: OptionalText = None
    quantity: LenientNumber = Decimal("0")
    unit_price: LenientNumber = Decimal("0")
    total_price: DecimalString


class PurchaseOrderCreate(WireModel):
    supplier_id: int
    order_number: OptionalText = None
    project_id: Optional[int] = None
    quote_id: Optional[int] = None
    delivery_address: OptionalText = None
    status: PurchaseOrderStatus = PurchaseOrderStatus.draft
    issue_date: FlexibleDate = None
    expected_delivery_date: FlexibleDate = None
    total_amount: Optional[DecimalString] = None
    notes: OptionalText = None
    items: List[PurchaseOrderItemCreate] = []


class PurchaseOrderUpdate(WireModel):
    """Sending ``items`` replaces the whole line set."""

    supplier_id: Optional[int] = None
    order_number: OptionalText = None
    project_id: Optional[int] = None
    quote_id: Optional[int] = None
    delivery_address: OptionalText = None
    status: Optional[PurchaseOrderStatus] = None
    issue_date: FlexibleDate = None
    expected_delivery_date: FlexibleDate = None
    total_amount: Optional[DecimalString] = None
    notes: OptionalText = None
    items: Optional[List[PurchaseOrderItemCreate]] = None

    _required = not_null("supplier_id", "order_number", "status", "total_amount", "items")


class PurchaseOrderItemResponse(ReadModel):
    id: int
    purchase_order_id: int
    description: str
    unit: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal


class PurchaseOrderResponse(ReadModel):
    id: int
    supplier_id: int
    order_number: str
    project_id: Optional[int] = None
    quote_id: Optional[int] = None
    delivery_address: Optional[str] = None
    status: str
    issue_date: Optional[datetime] = None
    expected_delivery_date: Optional[datetime] = None
    total_amount: Decimal
    notes: Optional[str] = None
    created_at: datetime
    items: List[PurchaseOrderItemResponse] = []

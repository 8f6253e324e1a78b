import enum
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .common import WireModel, ReadModel, FlexibleDate, Money, OptionalText, not_null


class QuoteStatus(str, enum.Enum):
    draft = "draft"
    sent = "sent"
    approved = "approved"
    rejected = "rejected"


class QuoteCreate(WireModel):
    project_id: int
    materials_estimate: Optional[List[Dict[str, Any]]] = None
    labor_estimate: Optional[List[Dict[str, Any]]] = None
    total_estimate: Money
    status: QuoteStatus = QuoteStatus.draft
    sent_date: FlexibleDate = None
    valid_until: FlexibleDate = None
    approved_date: FlexibleDate = None
    rejected_date: FlexibleDate = None
    notes: OptionalText = None


class QuoteUpdate(WireModel):
    project_id: Optional[int] = None
    materials_estimate: Optional[List[Dict[str, Any]]] = None
    labor_estimate: Optional[List[Dict[str, Any]]] = None
    total_estimate: Optional[Money] = None
    status: Optional[QuoteStatus] = None
    sent_date: FlexibleDate = None
    valid_until: FlexibleDate = None
    approved_date: FlexibleDate = None
    rejected_date: FlexibleDate = None
    notes: OptionalText = None

    _required = not_null("project_id", "total_estimate", "status")


class QuoteResponse(ReadModel):
    id: int
    project_id: int
    materials_estimate: Optional[List[Dict[str, Any]]] = None
    labor_estimate: Optional[List[Dict[str, Any]]] = None
    total_estimate: Decimal
    status: str
    sent_date: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    approved_date: Optional[datetime] = None
    rejected_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime

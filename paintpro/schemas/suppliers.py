import enum
from datetime import datetime
from typing import Optional

from .common import WireModel, ReadModel, RequiredText, OptionalText, not_null


class SupplierStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"


class SupplierCreate(WireModel):
    name: RequiredText
    company: RequiredText
    email: OptionalText = None
    phone: OptionalText = None
    address: OptionalText = None
    category: RequiredText
    contact_name: OptionalText = None
    payment_terms: OptionalText = None
    notes: OptionalText = None
    status: SupplierStatus = SupplierStatus.active


class SupplierUpdate(WireModel):
    name: Optional[RequiredText] = None
    company: Optional[RequiredText] = None
    email: OptionalText = None
    phone: OptionalText = None
    address: OptionalText = None
    category: Optional[RequiredText] = None
    contact_name: OptionalText = None
    payment_terms: OptionalText = None
    notes: OptionalText = None
    status: Optional[SupplierStatus] = None

    _required = not_null("name", "company", "category", "status")


class SupplierResponse(ReadModel):
    id: int
    name: str
    company: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    category: str
    contact_name: Optional[str] = None
    payment_terms: Optional[str] = None
    notes: Optional[str] = None
    status: str
    created_at: datetime

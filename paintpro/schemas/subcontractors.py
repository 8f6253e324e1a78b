import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from .common import WireModel, ReadModel, RequiredText, OptionalText, Money, not_null


class SubcontractorStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"
    blacklisted = "blacklisted"


class RateType(str, enum.Enum):
    hourly = "hourly"
    daily = "daily"
    fixed = "fixed"


class SubcontractorCreate(WireModel):
    name: RequiredText
    company: OptionalText = None
    specialty: RequiredText
    email: OptionalText = None
    phone: RequiredText
    address: OptionalText = None
    tax_id: OptionalText = None
    insurance_info: OptionalText = None
    rate: Optional[Money] = None
    rate_type: RateType = RateType.hourly
    notes: OptionalText = None
    status: SubcontractorStatus = SubcontractorStatus.active


class SubcontractorUpdate(WireModel):
    name: Optional[RequiredText] = None
    company: OptionalText = None
    specialty: Optional[RequiredText] = None
    email: OptionalText = None
    phone: Optional[RequiredText] = None
    address: OptionalText = None
    tax_id: OptionalText = None
    insurance_info: OptionalText = None
    rate: Optional[Money] = None
    rate_type: Optional[RateType] = None
    notes: OptionalText = None
    status: Optional[SubcontractorStatus] = None

    _required = not_null("name", "specialty", "phone", "status")


class SubcontractorResponse(ReadModel):
    id: int
    name: str
    company: Optional[str] = None
    specialty: str
    email: Optional[str] = None
    phone: str
    address: Optional[str] = None
    tax_id: Optional[str] = None
    insurance_info: Optional[str] = None
    rate: Optional[Decimal] = None
    rate_type: Optional[str] = None
    notes: Optional[str] = None
    status: str
    created_at: datetime

import enum
from datetime import datetime
from typing import List, Optional

from .common import WireModel, ReadModel, RequiredText, OptionalText, not_null


class Availability(str, enum.Enum):
    available = "available"
    assigned = "assigned"
    on_leave = "on_leave"


class StaffCreate(WireModel):
    name: RequiredText
    role: RequiredText
    email: OptionalText = None
    phone: RequiredText
    availability: Availability = Availability.available
    skills: Optional[List[str]] = None
    avatar: OptionalText = None


class StaffUpdate(WireModel):
    name: Optional[RequiredText] = None
    role: Optional[RequiredText] = None
    email: OptionalText = None
    phone: Optional[RequiredText] = None
    availability: Optional[Availability] = None
    skills: Optional[List[str]] = None
    avatar: OptionalText = None

    _required = not_null("name", "role", "phone", "availability")


class StaffResponse(ReadModel):
    id: int
    name: str
    role: str
    email: Optional[str] = None
    phone: str
    availability: str
    skills: Optional[List[str]] = None
    avatar: Optional[str] = None
    created_at: datetime

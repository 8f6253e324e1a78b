import enum
from datetime import datetime
from typing import List, Optional

from .common import WireModel, ReadModel, RequiredText, OptionalText, FlexibleDate, not_null


class ServiceOrderStatus(str, enum.Enum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"


class OrderLanguage(str, enum.Enum):
    english = "english"
    spanish = "spanish"


class ServiceOrderCreate(WireModel):
    project_id: int
    details: RequiredText
    assigned_staff: Optional[List[int]] = None
    assigned_subcontractors: Optional[List[int]] = None
    supervisor_id: Optional[int] = None
    start_date: FlexibleDate = None
    end_date: FlexibleDate = None
    due_date: FlexibleDate = None
    status: ServiceOrderStatus = ServiceOrderStatus.pending
    before_images: Optional[List[str]] = None
    after_images: Optional[List[str]] = None
    client_signature: OptionalText = None
    signed_date: FlexibleDate = None
    materials_required: OptionalText = None
    special_instructions: OptionalText = None
    safety_requirements: OptionalText = None
    language: OrderLanguage = OrderLanguage.english


class ServiceOrderUpdate(WireModel):
    project_id: Optional[int] = None
    details: Optional[RequiredText] = None
    assigned_staff: Optional[List[int]] = None
    assigned_subcontractors: Optional[List[int]] = None
    supervisor_id: Optional[int] = None
    start_date: FlexibleDate = None
    end_date: FlexibleDate = None
    due_date: FlexibleDate = None
    status: Optional[ServiceOrderStatus] = None
    before_images: Optional[List[str]] = None
    after_images: Optional[List[str]] = None
    client_signature: OptionalText = None
    signed_date: FlexibleDate = None
    materials_required: OptionalText = None
    special_instructions: OptionalText = None
    safety_requirements: OptionalText = None
    language: Optional[OrderLanguage] = None

    _required = not_null("project_id", "details", "status", "language")


class ServiceOrderResponse(ReadModel):
    id: int
    project_id: int
    details: str
    assigned_staff: Optional[List[int]] = None
    assigned_subcontractors: Optional[List[int]] = None
    supervisor_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    status: str
    before_images: Optional[List[str]] = None
    after_images: Optional[List[str]] = None
    client_signature: Optional[str] = None
    signed_date: Optional[datetime] = None
    materials_required: Optional[str] = None
    special_instructions: Optional[str] = None
    safety_requirements: Optional[str] = None
    language: str
    created_at: datetime

import enum
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from .common import (
    WireModel,
    ReadModel,
    RequiredText,
    FlexibleDate,
    Money,
    Percent,
    not_null,
)
from .clients import ClientResponse
from .quotes import QuoteResponse
from .service_orders import ServiceOrderResponse
from .invoices import InvoiceResponse


class ProjectStatus(str, enum.Enum):
    pending = "pending"
    quoted = "quoted"
    approved = "approved"
    preparing = "preparing"
    in_progress = "in_progress"
    reviewing = "reviewing"
    completed = "completed"
    archived = "archived"


class ProjectPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class ProjectCreate(WireModel):
    client_id: int
    title: RequiredText
    description: RequiredText
    address: RequiredText
    service_type: RequiredText
    status: ProjectStatus = ProjectStatus.pending
    priority: ProjectPriority = ProjectPriority.medium
    progress: Percent = 0
    start_date: FlexibleDate = None
    due_date: FlexibleDate = None
    completed_date: FlexibleDate = None
    total_cost: Optional[Money] = None
    assigned_staff: Optional[List[int]] = None
    images: Optional[List[str]] = None
    documents: Optional[List[Any]] = None


class ProjectUpdate(WireModel):
    client_id: Optional[int] = None
    title: Optional[RequiredText] = None
    description: Optional[RequiredText] = None
    address: Optional[RequiredText] = None
    service_type: Optional[RequiredText] = None
    status: Optional[ProjectStatus] = None
    priority: Optional[ProjectPriority] = None
    progress: Optional[Percent] = None
    start_date: FlexibleDate = None
    due_date: FlexibleDate = None
    completed_date: FlexibleDate = None
    total_cost: Optional[Money] = None
    assigned_staff: Optional[List[int]] = None
    images: Optional[List[str]] = None
    documents: Optional[List[Any]] = None

    _required = not_null("client_id", "title", "description", "address", "service_type", "status", "priority")


class ProjectResponse(ReadModel):
    id: int
    client_id: int
    title: str
    description: str
    address: str
    service_type: str
    status: str
    priority: str
    progress: Optional[int] = 0
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    total_cost: Optional[Decimal] = None
    assigned_staff: Optional[List[int]] = None
    images: Optional[List[str]] = None
    documents: Optional[List[Any]] = None
    created_at: datetime


class ProjectFinancialRow(WireModel):
    project_id: int
    title: str
    client_id: int
    status: str
    revenue: Decimal
    expenses: Decimal
    profit: Decimal
    margin: Optional[float] = None


class ProjectDetailResponse(ProjectResponse):
    client: Optional[ClientResponse] = None
    quotes: List[QuoteResponse] = []
    service_orders: List[ServiceOrderResponse] = []
    invoices: List[InvoiceResponse] = []

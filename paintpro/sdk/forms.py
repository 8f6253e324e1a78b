"""
Edit buffers for create/edit dialogs.

The buffer holds wire-shaped (camelCase) values. ``submit`` validates with
the same schemas the server uses before any request goes out, and on any
failure keeps the buffer so the user can correct it and retry.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel

from ..logging import structlog
from ..schemas.decoding import PayloadValidationError, decode
from ..schemas.clients import ClientCreate, ClientUpdate
from ..schemas.projects import ProjectCreate, ProjectUpdate
from ..schemas.quotes import QuoteCreate, QuoteUpdate
from ..schemas.service_orders import ServiceOrderCreate, ServiceOrderUpdate
from ..schemas.staff import StaffCreate, StaffUpdate
from ..schemas.subcontractors import SubcontractorCreate, SubcontractorUpdate
from ..schemas.suppliers import SupplierCreate, SupplierUpdate
from ..schemas.invoices import InvoiceCreate, InvoiceUpdate
from ..schemas.payments import PaymentCreate, PaymentUpdate
from ..schemas.purchase_orders import PurchaseOrderCreate, PurchaseOrderUpdate
from .api import ApiError, ValidationFailed
from .cache import QueryCache


SERVER_FIELDS = ("id", "createdAt")


@dataclass(frozen=True)
class Resource:
    path: str
    entity: str
    create: Type[BaseModel]
    update: Type[BaseModel]
    # collections whose cached views depend on writes to this one
    invalidates: Tuple[str, ...] = ()


RESOURCES: Dict[str, Resource] = {
    "clients": Resource("/api/clients", "client", ClientCreate, ClientUpdate),
    "projects": Resource("/api/projects", "project", ProjectCreate, ProjectUpdate),
    "quotes": Resource("/api/quotes", "quote", QuoteCreate, QuoteUpdate, ("/api/projects",)),
    "service_orders": Resource(
        "/api/service-orders", "service_order", ServiceOrderCreate, ServiceOrderUpdate, ("/api/staff", "/api/projects")
    ),
    "staff": Resource("/api/staff", "staff", StaffCreate, StaffUpdate),
    "subcontractors": Resource("/api/subcontractors", "subcontractor", SubcontractorCreate, SubcontractorUpdate),
    "suppliers": Resource("/api/suppliers", "supplier", SupplierCreate, SupplierUpdate),
    "invoices": Resource(
        "/api/invoices", "invoice", InvoiceCreate, InvoiceUpdate, ("/api/projects", "/api/financial", "/api/reports")
    ),
    "payments": Resource(
        "/api/payments", "payment", PaymentCreate, PaymentUpdate, ("/api/projects", "/api/financial", "/api/reports")
    ),
    "purchase_orders": Resource(
        "/api/purchase-orders", "purchase_order", PurchaseOrderCreate, PurchaseOrderUpdate, ("/api/suppliers",)
    ),
}


def _editable(record: Optional[dict]) -> Dict[str, Any]:
    return {k: v for k, v in (record or {}).items() if k not in SERVER_FIELDS}


class EntityForm:
    def __init__(self, cache: QueryCache, resource: str, record: Optional[dict] = None, locale: Optional[str] = None):
        self.cache = cache
        self.resource = RESOURCES[resource]
        self.locale = locale
        self.record_id: Optional[int] = (record or {}).get("id")
        self._initial = _editable(record)
        self._buffer = dict(self._initial)
        self.error: Optional[ApiError] = None
        self.submitting = False
        self.log = structlog.get_logger().bind(component="entity_form", entity=self.resource.entity)

    def set(self, field: str, value: Any) -> "EntityForm":
        self._buffer[field] = value
        return self

    @property
    def values(self) -> Dict[str, Any]:
        return dict(self._buffer)

    @property
    def dirty(self) -> bool:
        return self._buffer != self._initial

    def reset(self) -> None:
        self._buffer = dict(self._initial)
        self.error = None

    def _changes(self) -> Dict[str, Any]:
        if self.record_id is None:
            return dict(self._buffer)
        return {k: v for k, v in self._buffer.items() if k not in self._initial or self._initial[k] != v}

    def validate(self) -> Dict[str, Any]:
        """Decode the pending values and return the request body, or raise ValidationFailed."""
        schema = self.resource.create if self.record_id is None else self.resource.update
        try:
            data = decode(schema, self._changes(), self.resource.entity, self.locale)
        except PayloadValidationError as exc:
            raise ValidationFailed(400, exc.message, exc.errors) from exc
        return data.model_dump(mode="json", by_alias=True, exclude_unset=True)

    async def submit(self) -> dict:
        self.error = None
        self.submitting = True
        try:
            body = self.validate()
            if self.record_id is None:
                saved = await self.cache.api.post(self.resource.path, json=body)
            else:
                saved = await self.cache.api.put(f"{self.resource.path}/{self.record_id}", json=body)
        except ApiError as exc:
            self.error = exc
            self.log.info("form_submit_failed", status=exc.status, errors=exc.errors)
            raise
        finally:
            self.submitting = False

        self.record_id = saved["id"]
        self._initial = _editable(saved)
        self._buffer = dict(self._initial)
        await self.cache.invalidate(self.resource.path, "/api/activities", *self.resource.invalidates)
        return saved

    async def delete(self) -> None:
        if self.record_id is None:
            return
        try:
            await self.cache.api.delete(f"{self.resource.path}/{self.record_id}")
        except ApiError as exc:
            self.error = exc
            raise
        self.record_id = None
        await self.cache.invalidate(self.resource.path, "/api/activities", *self.resource.invalidates)

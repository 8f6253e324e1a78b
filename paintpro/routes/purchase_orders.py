from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session, selectinload

from ..db import get_db
from ..models.models import Project, PurchaseOrder, PurchaseOrderItem, Quote, Supplier, User
from ..schemas.purchase_orders import PurchaseOrderCreate, PurchaseOrderUpdate, PurchaseOrderResponse
from ..schemas.decoding import decode
from ..auth.security import get_current_user
from ..services.activity import record_activity
from ..services.numbering import next_order_number
from .common import get_locale, get_or_404, apply_changes, conflict, conflict_guard, not_found


router = APIRouter(prefix="/api/purchase-orders", tags=["purchase-orders"])


def _check_references(db: Session, values: dict, locale: str) -> None:
    if values.get("supplier_id") is not None:
        get_or_404(db, Supplier, values["supplier_id"], "supplier", locale)
    if values.get("project_id") is not None:
        get_or_404(db, Project, values["project_id"], "project", locale)
    if values.get("quote_id") is not None:
        get_or_404(db, Quote, values["quote_id"], "quote", locale)


def _build_items(items: List[dict]) -> List[PurchaseOrderItem]:
    return [
        PurchaseOrderItem(
            description=item["description"],
            unit=item.get("unit"),
            quantity=item["quantity"],
            unit_price=item["unit_price"],
            total_price=Decimal(item["total_price"]),
        )
        for item in items
    ]


def _items_total(items: List[dict]) -> Decimal:
    return sum((Decimal(item["total_price"]) for item in items), Decimal("0"))


def _load(db: Session, order_id: int, locale: str) -> PurchaseOrder:
    po = (
        db.query(PurchaseOrder)
        .options(selectinload(PurchaseOrder.items))
        .filter(PurchaseOrder.id == order_id)
        .first()
    )
    if po is None:
        raise not_found("purchase_order", locale)
    return po


@router.get("", response_model=List[PurchaseOrderResponse])
def list_purchase_orders(
    supplier_id: Optional[int] = Query(default=None, alias="supplierId"),
    status: Optional[str] = Query(default=None),
    project_id: Optional[int] = Query(default=None, alias="projectId"),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(PurchaseOrder).options(selectinload(PurchaseOrder.items))
    if supplier_id is not None:
        q = q.filter(PurchaseOrder.supplier_id == supplier_id)
    if status:
        q = q.filter(PurchaseOrder.status == status)
    if project_id is not None:
        q = q.filter(PurchaseOrder.project_id == project_id)
    return q.order_by(PurchaseOrder.id.desc()).all()


@router.get("/{order_id}", response_model=PurchaseOrderResponse)
def get_purchase_order(order_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return _load(db, order_id, locale)


@router.post("", response_model=PurchaseOrderResponse, status_code=201)
def create_purchase_order(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    data = decode(PurchaseOrderCreate, payload, "purchase_order", locale)
    values = data.model_dump()
    _check_references(db, values, locale)
    items = values.pop("items") or []

    if not values.get("order_number"):
        values["order_number"] = next_order_number(db)
        if values["order_number"] is None:
            raise conflict("purchase_order", locale)
    values["total_amount"] = Decimal(values["total_amount"]) if values.get("total_amount") is not None else _items_total(items)
    if values.get("issue_date") is None:
        values["issue_date"] = datetime.now(timezone.utc)

    po = PurchaseOrder(**values)
    po.items = _build_items(items)
    with conflict_guard(db, "purchase_order", locale):
        db.add(po)
        db.flush()
        record_activity(
            db,
            "purchase_order_created",
            f"Purchase order {po.order_number} created with {len(items)} items",
            user=user,
            project_id=po.project_id,
        )
        db.commit()
    return _load(db, po.id, locale)


@router.put("/{order_id}", response_model=PurchaseOrderResponse)
def update_purchase_order(
    order_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    po = _load(db, order_id, locale)
    data = decode(PurchaseOrderUpdate, payload, "purchase_order", locale)
    changes = data.model_dump(exclude_unset=True)
    _check_references(db, changes, locale)
    items = changes.pop("items", None)
    if "total_amount" in changes:
        changes["total_amount"] = Decimal(changes["total_amount"])
    elif items is not None:
        changes["total_amount"] = _items_total(items)
    with conflict_guard(db, "purchase_order", locale):
        apply_changes(po, changes)
        if items is not None:
            # delete-orphan removes the previous lines
            po.items = _build_items(items)
        record_activity(
            db,
            "purchase_order_updated",
            f"Purchase order {po.order_number} updated",
            user=user,
            project_id=po.project_id,
        )
        db.commit()
    return _load(db, order_id, locale)


@router.delete("/{order_id}", status_code=204)
def delete_purchase_order(
    order_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    po = _load(db, order_id, locale)
    with conflict_guard(db, "purchase_order", locale, deleting=True):
        record_activity(
            db,
            "purchase_order_deleted",
            f"Purchase order {po.order_number} deleted",
            user=user,
            project_id=po.project_id,
        )
        db.delete(po)
        db.commit()
    return Response(status_code=204)

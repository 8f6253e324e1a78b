from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Supplier, User
from ..schemas.suppliers import SupplierCreate, SupplierUpdate, SupplierResponse
from ..schemas.decoding import decode
from ..auth.security import get_current_user, require_admin
from ..services.activity import record_activity
from .common import get_locale, get_or_404, apply_changes, conflict_guard


router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.get("", response_model=List[SupplierResponse])
def list_suppliers(
    category: Optional[str] = Query(default=None),
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(Supplier)
    if category:
        q = q.filter(Supplier.category == category)
    if status:
        q = q.filter(Supplier.status == status)
    return q.order_by(Supplier.name, Supplier.id).all()


@router.get("/{supplier_id}", response_model=SupplierResponse)
def get_supplier(supplier_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return get_or_404(db, Supplier, supplier_id, "supplier", locale)


@router.post("", response_model=SupplierResponse, status_code=201)
def create_supplier(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(require_admin),
):
    data = decode(SupplierCreate, payload, "supplier", locale)
    s = Supplier(**data.model_dump())
    with conflict_guard(db, "supplier", locale):
        db.add(s)
        db.flush()
        record_activity(db, "supplier_created", f"New supplier {s.company} added", user=user)
        db.commit()
    db.refresh(s)
    return s


@router.put("/{supplier_id}", response_model=SupplierResponse)
def update_supplier(
    supplier_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(require_admin),
):
    s = get_or_404(db, Supplier, supplier_id, "supplier", locale)
    data = decode(SupplierUpdate, payload, "supplier", locale)
    with conflict_guard(db, "supplier", locale):
        apply_changes(s, data.model_dump(exclude_unset=True))
        record_activity(db, "supplier_updated", f"Supplier {s.company} updated", user=user)
        db.commit()
    db.refresh(s)
    return s


@router.delete("/{supplier_id}", status_code=204)
def delete_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(require_admin),
):
    s = get_or_404(db, Supplier, supplier_id, "supplier", locale)
    with conflict_guard(db, "supplier", locale, deleting=True):
        record_activity(db, "supplier_deleted", f"Supplier {s.company} deleted", user=user)
        db.delete(s)
        db.commit()
    return Response(status_code=204)

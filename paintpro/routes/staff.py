from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Staff, User
from ..schemas.staff import StaffCreate, StaffUpdate, StaffResponse
from ..schemas.decoding import decode
from ..auth.security import get_current_user, require_admin
from ..services.activity import record_activity
from .common import get_locale, get_or_404, apply_changes, conflict_guard


router = APIRouter(prefix="/api/staff", tags=["staff"])


@router.get("", response_model=List[StaffResponse])
def list_staff(
    availability: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(Staff)
    if availability:
        q = q.filter(Staff.availability == availability)
    return q.order_by(Staff.id).all()


@router.get("/{staff_id}", response_model=StaffResponse)
def get_staff(staff_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return get_or_404(db, Staff, staff_id, "staff", locale)


@router.post("", response_model=StaffResponse, status_code=201)
def create_staff(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(require_admin),
):
    data = decode(StaffCreate, payload, "staff", locale)
    s = Staff(**data.model_dump())
    with conflict_guard(db, "staff", locale):
        db.add(s)
        db.flush()
        record_activity(db, "staff_created", f"New staff member {s.name} added", user=user)
        db.commit()
    db.refresh(s)
    return s


@router.put("/{staff_id}", response_model=StaffResponse)
def update_staff(
    staff_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(require_admin),
):
    s = get_or_404(db, Staff, staff_id, "staff", locale)
    data = decode(StaffUpdate, payload, "staff", locale)
    with conflict_guard(db, "staff", locale):
        apply_changes(s, data.model_dump(exclude_unset=True))
        record_activity(db, "staff_updated", f"Staff member {s.name} updated", user=user)
        db.commit()
    db.refresh(s)
    return s


@router.delete("/{staff_id}", status_code=204)
def delete_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(require_admin),
):
    s = get_or_404(db, Staff, staff_id, "staff", locale)
    with conflict_guard(db, "staff", locale, deleting=True):
        record_activity(db, "staff_deleted", f"Staff member {s.name} deleted", user=user)
        db.delete(s)
        db.commit()
    return Response(status_code=204)

from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Subcontractor, User
from ..schemas.subcontractors import SubcontractorCreate, SubcontractorUpdate, SubcontractorResponse
from ..schemas.decoding import decode
from ..auth.security import get_current_user, require_admin
from ..services.activity import record_activity
from .common import get_locale, get_or_404, apply_changes, conflict_guard


router = APIRouter(prefix="/api/subcontractors", tags=["subcontractors"])


@router.get("", response_model=List[SubcontractorResponse])
def list_subcontractors(
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(Subcontractor)
    if status:
        q = q.filter(Subcontractor.status == status)
    return q.order_by(Subcontractor.id).all()


@router.get("/{subcontractor_id}", response_model=SubcontractorResponse)
def get_subcontractor(
    subcontractor_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    _=Depends(get_current_user),
):
    return get_or_404(db, Subcontractor, subcontractor_id, "subcontractor", locale)


@router.post("", response_model=SubcontractorResponse, status_code=201)
def create_subcontractor(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(require_admin),
):
    data = decode(SubcontractorCreate, payload, "subcontractor", locale)
    s = Subcontractor(**data.model_dump())
    with conflict_guard(db, "subcontractor", locale):
        db.add(s)
        db.flush()
        record_activity(db, "subcontractor_created", f"New subcontractor {s.name} added", user=user)
        db.commit()
    db.refresh(s)
    return s


@router.put("/{subcontractor_id}", response_model=SubcontractorResponse)
def update_subcontractor(
    subcontractor_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(require_admin),
):
    s = get_or_404(db, Subcontractor, subcontractor_id, "subcontractor", locale)
    data = decode(SubcontractorUpdate, payload, "subcontractor", locale)
    with conflict_guard(db, "subcontractor", locale):
        apply_changes(s, data.model_dump(exclude_unset=True))
        record_activity(db, "subcontractor_updated", f"Subcontractor {s.name} updated", user=user)
        db.commit()
    db.refresh(s)
    return s


@router.delete("/{subcontractor_id}", status_code=204)
def delete_subcontractor(
    subcontractor_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(require_admin),
):
    s = get_or_404(db, Subcontractor, subcontractor_id, "subcontractor", locale)
    with conflict_guard(db, "subcontractor", locale, deleting=True):
        record_activity(db, "subcontractor_deleted", f"Subcontractor {s.name} deleted", user=user)
        db.delete(s)
        db.commit()
    return Response(status_code=204)

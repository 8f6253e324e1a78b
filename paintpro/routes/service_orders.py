from datetime import datetime, timezone
from typing import Iterable, List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Project, ServiceOrder, Staff, User
from ..schemas.service_orders import ServiceOrderCreate, ServiceOrderUpdate, ServiceOrderResponse
from ..schemas.decoding import decode
from ..auth.security import get_current_user
from ..services.activity import record_activity
from .common import get_locale, get_or_404, apply_changes, conflict_guard


router = APIRouter(prefix="/api/service-orders", tags=["service-orders"])


def _set_availability(db: Session, staff_ids: Optional[Iterable[int]], availability: str) -> None:
    ids = [sid for sid in (staff_ids or []) if isinstance(sid, int)]
    if not ids:
        return
    for member in db.query(Staff).filter(Staff.id.in_(ids)).all():
        # Staff on leave keep that state
        if member.availability != "on_leave":
            member.availability = availability


def _apply_signature(changes: dict) -> None:
    """A client signature stamps the signing date and completes the order."""
    if changes.get("client_signature"):
        if not changes.get("signed_date"):
            changes["signed_date"] = datetime.now(timezone.utc)
        changes["status"] = "completed"


def _busy_elsewhere(db: Session, order_id: Optional[int]) -> set:
    """Staff ids still assigned to some other open order."""
    busy = set()
    others = db.query(ServiceOrder).filter(ServiceOrder.status != "completed")
    if order_id is not None:
        others = others.filter(ServiceOrder.id != order_id)
    for other in others.all():
        busy.update(other.assigned_staff or [])
    return busy


def _release_staff(db: Session, so: ServiceOrder, staff_ids: Iterable[int]) -> None:
    _set_availability(db, set(staff_ids) - _busy_elsewhere(db, so.id), "available")


def _sync_staff(db: Session, so: ServiceOrder, previous_staff: Optional[List[int]] = None) -> None:
    if so.status == "completed":
        _release_staff(db, so, set(previous_staff or []) | set(so.assigned_staff or []))
        return
    _release_staff(db, so, set(previous_staff or []) - set(so.assigned_staff or []))
    _set_availability(db, so.assigned_staff, "assigned")


@router.get("", response_model=List[ServiceOrderResponse])
def list_service_orders(
    project_id: Optional[int] = Query(default=None, alias="projectId"),
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(ServiceOrder)
    if project_id is not None:
        q = q.filter(ServiceOrder.project_id == project_id)
    if status:
        q = q.filter(ServiceOrder.status == status)
    return q.order_by(ServiceOrder.id).all()


@router.get("/{order_id}", response_model=ServiceOrderResponse)
def get_service_order(order_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return get_or_404(db, ServiceOrder, order_id, "service_order", locale)


@router.post("", response_model=ServiceOrderResponse, status_code=201)
def create_service_order(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    data = decode(ServiceOrderCreate, payload, "service_order", locale)
    project = get_or_404(db, Project, data.project_id, "project", locale)
    if data.supervisor_id is not None:
        get_or_404(db, Staff, data.supervisor_id, "staff", locale)
    values = data.model_dump()
    _apply_signature(values)
    so = ServiceOrder(**values)
    with conflict_guard(db, "service_order", locale):
        db.add(so)
        db.flush()
        _sync_staff(db, so)
        record_activity(
            db,
            "service_order_created",
            f'New service order created for project "{project.title}"',
            user=user,
            project_id=project.id,
            client_id=project.client_id,
        )
        db.commit()
    db.refresh(so)
    return so


@router.put("/{order_id}", response_model=ServiceOrderResponse)
def update_service_order(
    order_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    so = get_or_404(db, ServiceOrder, order_id, "service_order", locale)
    data = decode(ServiceOrderUpdate, payload, "service_order", locale)
    changes = data.model_dump(exclude_unset=True)
    project = get_or_404(db, Project, changes.get("project_id", so.project_id), "project", locale)
    if changes.get("supervisor_id") is not None:
        get_or_404(db, Staff, changes["supervisor_id"], "staff", locale)
    _apply_signature(changes)
    previous_staff = list(so.assigned_staff or [])
    with conflict_guard(db, "service_order", locale):
        apply_changes(so, changes)
        _sync_staff(db, so, previous_staff)
        signed = bool(changes.get("client_signature"))
        record_activity(
            db,
            "service_order_signed" if signed else "service_order_updated",
            f'Service order {"signed" if signed else "updated"} for project "{project.title}"',
            user=user,
            project_id=project.id,
            client_id=project.client_id,
        )
        db.commit()
    db.refresh(so)
    return so


@router.delete("/{order_id}", status_code=204)
def delete_service_order(
    order_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    so = get_or_404(db, ServiceOrder, order_id, "service_order", locale)
    project = db.get(Project, so.project_id)
    with conflict_guard(db, "service_order", locale, deleting=True):
        if so.status != "completed":
            _release_staff(db, so, so.assigned_staff or [])
        record_activity(
            db,
            "service_order_deleted",
            f"Service order #{so.id} deleted",
            user=user,
            project_id=so.project_id,
            client_id=project.client_id if project else None,
        )
        db.delete(so)
        db.commit()
    return Response(status_code=204)

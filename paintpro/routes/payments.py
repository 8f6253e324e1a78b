from datetime import date, datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Invoice, Payment, Project, PurchaseOrder, ServiceOrder, User
from ..schemas.payments import PaymentCreate, PaymentUpdate, PaymentResponse, PaymentSummary
from ..schemas.decoding import decode
from ..auth.security import get_current_user
from ..services.activity import record_activity
from ..services.summaries import payments_summary
from .common import get_locale, get_or_404, apply_changes, conflict_guard


router = APIRouter(prefix="/api/payments", tags=["payments"])

_REFERENCES = (
    ("project_id", Project, "project"),
    ("service_order_id", ServiceOrder, "service_order"),
    ("invoice_id", Invoice, "invoice"),
    ("purchase_order_id", PurchaseOrder, "purchase_order"),
)


def _check_references(db: Session, values: dict, locale: str) -> None:
    for field, model, entity in _REFERENCES:
        if values.get(field) is not None:
            get_or_404(db, model, values[field], entity, locale)


@router.get("", response_model=List[PaymentResponse])
def list_payments(
    recipient_type: Optional[str] = Query(default=None, alias="recipientType"),
    project_id: Optional[int] = Query(default=None, alias="projectId"),
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(Payment)
    if recipient_type:
        q = q.filter(Payment.recipient_type == recipient_type)
    if project_id is not None:
        q = q.filter(Payment.project_id == project_id)
    if status:
        q = q.filter(Payment.status == status)
    return q.order_by(Payment.date.desc(), Payment.id.desc()).all()


@router.get("/summary", response_model=PaymentSummary)
def get_payments_summary(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    return payments_summary(db, start_date, end_date)


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(payment_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return get_or_404(db, Payment, payment_id, "payment", locale)


@router.post("", response_model=PaymentResponse, status_code=201)
def create_payment(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    data = decode(PaymentCreate, payload, "payment", locale)
    values = data.model_dump()
    _check_references(db, values, locale)
    if values.get("date") is None:
        values["date"] = datetime.now(timezone.utc)
    p = Payment(created_by=user.id, **values)
    with conflict_guard(db, "payment", locale):
        db.add(p)
        db.flush()
        record_activity(
            db,
            "payment_created",
            f"New payment of {p.amount} registered for {p.recipient_type} #{p.recipient_id}",
            user=user,
            project_id=p.project_id,
        )
        db.commit()
    db.refresh(p)
    return p


@router.put("/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    p = get_or_404(db, Payment, payment_id, "payment", locale)
    data = decode(PaymentUpdate, payload, "payment", locale)
    changes = data.model_dump(exclude_unset=True)
    _check_references(db, changes, locale)
    with conflict_guard(db, "payment", locale):
        apply_changes(p, changes)
        record_activity(db, "payment_updated", f"Payment #{p.id} updated", user=user, project_id=p.project_id)
        db.commit()
    db.refresh(p)
    return p


@router.delete("/{payment_id}", status_code=204)
def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    p = get_or_404(db, Payment, payment_id, "payment", locale)
    with conflict_guard(db, "payment", locale, deleting=True):
        record_activity(db, "payment_deleted", f"Payment #{p.id} deleted", user=user, project_id=p.project_id)
        db.delete(p)
        db.commit()
    return Response(status_code=204)

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Client, Invoice, Project, User
from ..schemas.invoices import InvoiceCreate, InvoiceUpdate, InvoiceResponse, InvoiceSummary
from ..schemas.decoding import PayloadValidationError, decode
from ..i18n import translate
from ..auth.security import get_current_user
from ..services.activity import record_activity
from ..services.numbering import next_invoice_number
from ..services.summaries import invoices_summary
from .common import get_locale, get_or_404, apply_changes, conflict, conflict_guard


router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _stamp_paid(changes: dict, current: Optional[datetime] = None) -> None:
    if changes.get("status") == "paid" and not changes.get("paid_date") and current is None:
        changes["paid_date"] = datetime.now(timezone.utc)


@router.get("", response_model=List[InvoiceResponse])
def list_invoices(
    status: Optional[str] = Query(default=None),
    client_id: Optional[int] = Query(default=None, alias="clientId"),
    project_id: Optional[int] = Query(default=None, alias="projectId"),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(Invoice)
    if status:
        q = q.filter(Invoice.status == status)
    if client_id is not None:
        q = q.filter(Invoice.client_id == client_id)
    if project_id is not None:
        q = q.filter(Invoice.project_id == project_id)
    return q.order_by(Invoice.id).all()


@router.get("/summary", response_model=InvoiceSummary)
def get_invoices_summary(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    return invoices_summary(db, start_date, end_date)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(invoice_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return get_or_404(db, Invoice, invoice_id, "invoice", locale)


@router.post("", response_model=InvoiceResponse, status_code=201)
def create_invoice(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    data = decode(InvoiceCreate, payload, "invoice", locale)
    if data.amount is None and data.tax is not None and data.tax > data.total_amount:
        # amount is derived as totalAmount - tax below
        message = translate("error.too_large", locale, field="tax", limit=data.total_amount)
        raise PayloadValidationError("invoice", {"tax": [message]}, locale)
    project = get_or_404(db, Project, data.project_id, "project", locale)
    get_or_404(db, Client, data.client_id, "client", locale)

    number = next_invoice_number(db)
    if number is None:
        raise conflict("invoice", locale)

    values = data.model_dump()
    values["tax"] = values.get("tax") if values.get("tax") is not None else Decimal("0")
    if values.get("amount") is None:
        values["amount"] = values["total_amount"] - values["tax"]
    if values.get("issue_date") is None:
        values["issue_date"] = datetime.now(timezone.utc)
    _stamp_paid(values)

    inv = Invoice(invoice_number=number, **values)
    with conflict_guard(db, "invoice", locale):
        db.add(inv)
        db.flush()
        record_activity(
            db,
            "invoice_created",
            f'New invoice {inv.invoice_number} created for project "{project.title}"',
            user=user,
            project_id=inv.project_id,
            client_id=inv.client_id,
        )
        db.commit()
    db.refresh(inv)
    return inv


@router.put("/{invoice_id}", response_model=InvoiceResponse)
def update_invoice(
    invoice_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    inv = get_or_404(db, Invoice, invoice_id, "invoice", locale)
    data = decode(InvoiceUpdate, payload, "invoice", locale)
    changes = data.model_dump(exclude_unset=True)
    if "project_id" in changes:
        get_or_404(db, Project, changes["project_id"], "project", locale)
    if "client_id" in changes:
        get_or_404(db, Client, changes["client_id"], "client", locale)
    _stamp_paid(changes, inv.paid_date)
    paid = changes.get("status") == "paid" and inv.status != "paid"
    with conflict_guard(db, "invoice", locale):
        apply_changes(inv, changes)
        record_activity(
            db,
            "invoice_paid" if paid else "invoice_updated",
            f"Invoice {inv.invoice_number} {'marked as paid' if paid else 'updated'}",
            user=user,
            project_id=inv.project_id,
            client_id=inv.client_id,
        )
        db.commit()
    db.refresh(inv)
    return inv


@router.delete("/{invoice_id}", status_code=204)
def delete_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    inv = get_or_404(db, Invoice, invoice_id, "invoice", locale)
    with conflict_guard(db, "invoice", locale, deleting=True):
        record_activity(
            db,
            "invoice_deleted",
            f"Invoice {inv.invoice_number} deleted",
            user=user,
            project_id=inv.project_id,
            client_id=inv.client_id,
        )
        db.delete(inv)
        db.commit()
    return Response(status_code=204)

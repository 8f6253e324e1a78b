from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Project, Quote, User
from ..schemas.quotes import QuoteCreate, QuoteUpdate, QuoteResponse
from ..schemas.decoding import decode
from ..auth.security import get_current_user
from ..services.activity import record_activity
from .common import get_locale, get_or_404, apply_changes, conflict_guard


router = APIRouter(prefix="/api/quotes", tags=["quotes"])

# quote status -> (date column stamped, project status it moves the project to)
STATUS_EFFECTS = {
    "sent": ("sent_date", "quoted"),
    "approved": ("approved_date", "approved"),
    "rejected": ("rejected_date", None),
}


def _apply_status_effects(db: Session, quote: Quote, project: Project, status: Optional[str], changes: dict, user: User) -> bool:
    """Stamp the status date and move the project along. Returns True when a status event was logged."""
    status = getattr(status, "value", status)
    if status not in STATUS_EFFECTS:
        return False
    date_field, project_status = STATUS_EFFECTS[status]
    if not changes.get(date_field):
        setattr(quote, date_field, datetime.now(timezone.utc))
    if project_status:
        project.status = project_status
    descriptions = {
        "sent": f'Quote for project "{project.title}" has been sent to client',
        "approved": f'Quote for project "{project.title}" has been approved',
        "rejected": f'Quote for project "{project.title}" has been rejected',
    }
    record_activity(
        db, f"quote_{status}", descriptions[status], user=user, project_id=project.id, client_id=project.client_id
    )
    return True


@router.get("", response_model=List[QuoteResponse])
def list_quotes(
    project_id: Optional[int] = Query(default=None, alias="projectId"),
    status: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(Quote)
    if project_id is not None:
        q = q.filter(Quote.project_id == project_id)
    if status:
        q = q.filter(Quote.status == status)
    return q.order_by(Quote.id).all()


@router.get("/{quote_id}", response_model=QuoteResponse)
def get_quote(quote_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return get_or_404(db, Quote, quote_id, "quote", locale)


@router.post("", response_model=QuoteResponse, status_code=201)
def create_quote(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    data = decode(QuoteCreate, payload, "quote", locale)
    project = get_or_404(db, Project, data.project_id, "project", locale)
    values = data.model_dump()
    q = Quote(**values)
    with conflict_guard(db, "quote", locale):
        db.add(q)
        db.flush()
        record_activity(
            db,
            "quote_created",
            f'New quote created for project "{project.title}"',
            user=user,
            project_id=project.id,
            client_id=project.client_id,
        )
        _apply_status_effects(db, q, project, values.get("status"), values, user)
        db.commit()
    db.refresh(q)
    return q


@router.put("/{quote_id}", response_model=QuoteResponse)
def update_quote(
    quote_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    q = get_or_404(db, Quote, quote_id, "quote", locale)
    data = decode(QuoteUpdate, payload, "quote", locale)
    changes = data.model_dump(exclude_unset=True)
    project = get_or_404(db, Project, changes.get("project_id", q.project_id), "project", locale)
    with conflict_guard(db, "quote", locale):
        apply_changes(q, changes)
        if not _apply_status_effects(db, q, project, changes.get("status"), changes, user):
            record_activity(
                db,
                "quote_updated",
                f'Quote updated for project "{project.title}"',
                user=user,
                project_id=project.id,
                client_id=project.client_id,
            )
        db.commit()
    db.refresh(q)
    return q


@router.delete("/{quote_id}", status_code=204)
def delete_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    q = get_or_404(db, Quote, quote_id, "quote", locale)
    project = db.get(Project, q.project_id)
    with conflict_guard(db, "quote", locale, deleting=True):
        record_activity(
            db,
            "quote_deleted",
            f'Quote for project "{project.title if project else q.project_id}" deleted',
            user=user,
            project_id=q.project_id,
            client_id=project.client_id if project else None,
        )
        db.delete(q)
        db.commit()
    return Response(status_code=204)

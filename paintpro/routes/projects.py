from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session, selectinload

from ..db import get_db
from ..models.models import Client, Project, Quote, User
from ..schemas.projects import (
    ProjectCreate,
    ProjectUpdate,
    ProjectResponse,
    ProjectDetailResponse,
    ProjectFinancialRow,
)
from ..schemas.quotes import QuoteResponse
from ..schemas.decoding import decode
from ..auth.security import get_current_user
from ..services.activity import record_activity
from ..services.summaries import project_financials
from .common import get_locale, get_or_404, apply_changes, conflict_guard, not_found


router = APIRouter(prefix="/api/projects", tags=["projects"])


@router.get("", response_model=List[ProjectResponse])
def list_projects(
    status: Optional[str] = Query(default=None),
    client_id: Optional[int] = Query(default=None, alias="clientId"),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(Project)
    if status:
        q = q.filter(Project.status == status)
    if client_id is not None:
        q = q.filter(Project.client_id == client_id)
    return q.order_by(Project.id).all()


@router.get("/financial", response_model=List[ProjectFinancialRow])
def projects_financial(db: Session = Depends(get_db), _=Depends(get_current_user)):
    return project_financials(db)


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(project_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return get_or_404(db, Project, project_id, "project", locale)


@router.get("/{project_id}/details", response_model=ProjectDetailResponse)
def get_project_details(
    project_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    _=Depends(get_current_user),
):
    p = (
        db.query(Project)
        .options(
            selectinload(Project.client),
            selectinload(Project.quotes),
            selectinload(Project.service_orders),
            selectinload(Project.invoices),
        )
        .filter(Project.id == project_id)
        .first()
    )
    if p is None:
        raise not_found("project", locale)
    return p


@router.get("/{project_id}/quote", response_model=QuoteResponse)
def get_project_quote(
    project_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    _=Depends(get_current_user),
):
    get_or_404(db, Project, project_id, "project", locale)
    quote = db.query(Quote).filter(Quote.project_id == project_id).order_by(Quote.id.desc()).first()
    if quote is None:
        raise not_found("quote", locale)
    return quote


def _stamp_completion(changes: dict, current: Optional[datetime] = None) -> None:
    if changes.get("status") == "completed" and not changes.get("completed_date") and current is None:
        changes["completed_date"] = datetime.now(timezone.utc)


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    data = decode(ProjectCreate, payload, "project", locale)
    get_or_404(db, Client, data.client_id, "client", locale)
    values = data.model_dump()
    _stamp_completion(values)
    p = Project(**values)
    with conflict_guard(db, "project", locale):
        db.add(p)
        db.flush()
        record_activity(
            db, "project_created", f'New project "{p.title}" created', user=user, project_id=p.id, client_id=p.client_id
        )
        db.commit()
    db.refresh(p)
    return p


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    p = get_or_404(db, Project, project_id, "project", locale)
    data = decode(ProjectUpdate, payload, "project", locale)
    changes = data.model_dump(exclude_unset=True)
    if "client_id" in changes:
        get_or_404(db, Client, changes["client_id"], "client", locale)
    _stamp_completion(changes, p.completed_date)
    with conflict_guard(db, "project", locale):
        apply_changes(p, changes)
        record_activity(
            db, "project_updated", f'Project "{p.title}" updated', user=user, project_id=p.id, client_id=p.client_id
        )
        db.commit()
    db.refresh(p)
    return p


@router.delete("/{project_id}", status_code=204)
def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    p = get_or_404(db, Project, project_id, "project", locale)
    with conflict_guard(db, "project", locale, deleting=True):
        record_activity(
            db, "project_deleted", f'Project "{p.title}" deleted', user=user, project_id=project_id, client_id=p.client_id
        )
        db.delete(p)
        db.commit()
    return Response(status_code=204)

"""
Activity logging service.
Append-only feed of what happened to clients, projects and their documents.
"""
from typing import Optional

from sqlalchemy.orm import Session

from ..models.models import Activity, User
from ..logging import structlog


log = structlog.get_logger()


def record_activity(
    db: Session,
    type: str,
    description: str,
    user: Optional[User] = None,
    project_id: Optional[int] = None,
    client_id: Optional[int] = None,
) -> Activity:
    """
    Add an activity entry to the current unit of work.

    The caller commits, so the entry is stored together with the change it
    describes or not at all.

    Args:
        db: Database session
        type: Event type (client_created, quote_sent, invoice_deleted, ...)
        description: Human readable summary
        user: Acting user, if any
        project_id: Related project
        client_id: Related client

    Returns:
        The pending Activity object
    """
    activity = Activity(
        type=type,
        description=description,
        user_id=user.id if user is not None else None,
        project_id=project_id,
        client_id=client_id,
    )
    db.add(activity)
    log.info(
        "activity_recorded",
        activity_type=type,
        user_id=activity.user_id,
        project_id=project_id,
        client_id=client_id,
    )
    return activity


def list_activities(
    db: Session,
    project_id: Optional[int] = None,
    client_id: Optional[int] = None,
    user_id: Optional[int] = None,
    limit: int = 100,
    offset: int = 0,
) -> list:
    """Newest first, optionally narrowed to one project, client or user."""
    query = db.query(Activity)

    if project_id is not None:
        query = query.filter(Activity.project_id == project_id)

    if client_id is not None:
        query = query.filter(Activity.client_id == client_id)

    if user_id is not None:
        query = query.filter(Activity.user_id == user_id)

    query = query.order_by(Activity.created_at.desc(), Activity.id.desc())
    query = query.limit(limit).offset(offset)

    return query.all()

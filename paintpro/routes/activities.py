from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Activity, User
from ..schemas.activities import ActivityCreate, ActivityResponse
from ..schemas.decoding import decode
from ..auth.security import get_current_user
from ..services.activity import record_activity, list_activities
from .common import get_locale, get_or_404


router = APIRouter(prefix="/api/activities", tags=["activities"])


@router.get("", response_model=List[ActivityResponse])
def get_activities(
    project_id: Optional[int] = Query(default=None, alias="projectId"),
    client_id: Optional[int] = Query(default=None, alias="clientId"),
    user_id: Optional[int] = Query(default=None, alias="userId"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    return list_activities(db, project_id=project_id, client_id=client_id, user_id=user_id, limit=limit, offset=offset)


@router.get("/{activity_id}", response_model=ActivityResponse)
def get_activity(activity_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return get_or_404(db, Activity, activity_id, "activity", locale)


@router.post("", response_model=ActivityResponse, status_code=201)
def create_activity(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    data = decode(ActivityCreate, payload, "activity", locale)
    activity = record_activity(
        db,
        data.type,
        data.description,
        project_id=data.project_id,
        client_id=data.client_id,
    )
    # Entries posted by hand are attributed to the caller unless another user is named
    activity.user_id = data.user_id if data.user_id is not None else user.id
    db.commit()
    db.refresh(activity)
    return activity

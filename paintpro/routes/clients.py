from typing import List, Optional

from fastapi import APIRouter, Depends, Body, Query, Response
from sqlalchemy.orm import Session

from ..db import get_db
from ..models.models import Client, User
from ..schemas.clients import ClientCreate, ClientUpdate, ClientResponse
from ..schemas.decoding import decode
from ..auth.security import get_current_user
from ..services.activity import record_activity
from .common import get_locale, get_or_404, apply_changes, conflict_guard


router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.get("", response_model=List[ClientResponse])
def list_clients(
    type: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    _=Depends(get_current_user),
):
    q = db.query(Client)
    if type:
        q = q.filter(Client.type == type)
    return q.order_by(Client.id).all()


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: int, db: Session = Depends(get_db), locale: str = Depends(get_locale), _=Depends(get_current_user)):
    return get_or_404(db, Client, client_id, "client", locale)


@router.post("", response_model=ClientResponse, status_code=201)
def create_client(
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    data = decode(ClientCreate, payload, "client", locale)
    c = Client(**data.model_dump())
    with conflict_guard(db, "client", locale):
        db.add(c)
        db.flush()
        record_activity(db, "client_created", f"New client {c.name} added", user=user, client_id=c.id)
        db.commit()
    db.refresh(c)
    return c


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    payload: dict = Body(...),
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    c = get_or_404(db, Client, client_id, "client", locale)
    data = decode(ClientUpdate, payload, "client", locale)
    with conflict_guard(db, "client", locale):
        apply_changes(c, data.model_dump(exclude_unset=True))
        record_activity(db, "client_updated", f"Client {c.name} updated", user=user, client_id=c.id)
        db.commit()
    db.refresh(c)
    return c


@router.delete("/{client_id}", status_code=204)
def delete_client(
    client_id: int,
    db: Session = Depends(get_db),
    locale: str = Depends(get_locale),
    user: User = Depends(get_current_user),
):
    c = get_or_404(db, Client, client_id, "client", locale)
    with conflict_guard(db, "client", locale, deleting=True):
        record_activity(db, "client_deleted", f"Client {c.name} deleted", user=user, client_id=client_id)
        db.delete(c)
        db.commit()
    return Response(status_code=204)

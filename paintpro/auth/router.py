from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..models.models import User, SessionRecord
from ..schemas.auth import RegisterRequest, LoginRequest, TokenResponse, UserResponse
from .security import (
    get_password_hash,
    verify_password,
    create_session,
    get_current_user,
    get_optional_user,
    get_session_record,
    is_admin,
)
from ..logging import structlog


router = APIRouter(prefix="/api", tags=["auth"])
log = structlog.get_logger()


def _token_response(db: Session, user: User) -> TokenResponse:
    token, _ = create_session(db, user)
    return TokenResponse(
        access_token=token,
        expires_in=settings.session_ttl_seconds,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(
    req: RegisterRequest,
    db: Session = Depends(get_db),
    caller: Optional[User] = Depends(get_optional_user),
):
    if db.query(User).filter(User.username == req.username).first():
        raise HTTPException(status_code=409, detail="Username already exists")
    role = req.role if (req.role and is_admin(caller)) else "user"
    user = User(
        username=req.username,
        password=get_password_hash(req.password),
        name=req.name,
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Username already exists")
    db.refresh(user)
    log.info("user_registered", user_id=user.id, role=role)
    return _token_response(db, user)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == req.username).first()
    if not user or not verify_password(req.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    log.info("user_login", user_id=user.id)
    return _token_response(db, user)


@router.post("/logout", status_code=204)
def logout(record: SessionRecord = Depends(get_session_record), db: Session = Depends(get_db)):
    db.delete(record)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/user", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return user

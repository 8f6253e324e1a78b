import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..models.models import User, SessionRecord


pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
http_bearer = HTTPBearer(auto_error=False)

ADMIN_ROLES = ("admin", "superadmin")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        # Unknown hash format
        return False


def _as_aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def create_session(db: Session, user: User) -> Tuple[str, SessionRecord]:
    """Store a session row and return a JWT whose jti points at it."""
    now = datetime.now(tz=timezone.utc)
    expires = now + timedelta(seconds=settings.session_ttl_seconds)
    sid = str(uuid.uuid4())
    record = SessionRecord(
        sid=sid,
        sess={"user_id": user.id, "role": user.role, "created": now.isoformat()},
        expire=expires,
    )
    db.add(record)
    db.commit()
    payload = {
        "sub": str(user.id),
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
        "jti": sid,
        "role": user.role,
    }
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return token, record


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def get_session_record(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
    db: Session = Depends(get_db),
) -> SessionRecord:
    if creds is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    payload = decode_token(creds.credentials)
    sid = payload.get("jti")
    record = db.get(SessionRecord, sid) if sid else None
    if record is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session not found")
    if _as_aware(record.expire) <= datetime.now(tz=timezone.utc):
        db.delete(record)
        db.commit()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired")
    return record


def get_current_user(
    record: SessionRecord = Depends(get_session_record),
    db: Session = Depends(get_db),
) -> User:
    user_id = (record.sess or {}).get("user_id")
    user = db.get(User, user_id) if user_id is not None else None
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def get_optional_user(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
    db: Session = Depends(get_db),
) -> Optional[User]:
    if creds is None:
        return None
    try:
        record = get_session_record(creds, db)
        return get_current_user(record, db)
    except HTTPException:
        return None


def is_admin(user: Optional[User]) -> bool:
    return user is not None and user.role in ADMIN_ROLES


def require_roles(*required_roles: str):
    """Allow the request when the user holds any of ``required_roles``."""

    def _dep(user: User = Depends(get_current_user)):
        if user.role not in required_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return user

    return _dep


require_admin = require_roles(*ADMIN_ROLES)

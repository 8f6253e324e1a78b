from contextlib import contextmanager
from typing import Optional, Type

from fastapi import Header, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..i18n import resolve_locale, translate
from ..logging import structlog


def get_locale(accept_language: Optional[str] = Header(default=None)) -> str:
    return resolve_locale(accept_language)


def _entity_label(entity: str, locale: Optional[str]) -> str:
    label = translate(f"entity.{entity}", locale)
    return label[:1].upper() + label[1:]


def not_found(entity: str, locale: Optional[str] = None) -> HTTPException:
    return HTTPException(status_code=404, detail=translate("error.not_found", locale, entity=_entity_label(entity, locale)))


def conflict(entity: str, locale: Optional[str] = None, deleting: bool = False) -> HTTPException:
    key = "error.in_use" if deleting else "error.conflict"
    return HTTPException(status_code=409, detail=translate(key, locale, entity=_entity_label(entity, locale)))


def get_or_404(db: Session, model: Type, obj_id: Optional[int], entity: str, locale: Optional[str] = None):
    obj = db.get(model, obj_id) if obj_id is not None else None
    if obj is None:
        raise not_found(entity, locale)
    return obj


def apply_changes(obj, changes: dict) -> None:
    for key, value in changes.items():
        setattr(obj, key, value)


@contextmanager
def conflict_guard(db: Session, entity: str, locale: Optional[str] = None, deleting: bool = False):
    """Roll back and answer 409 when a flush or commit inside the block hits an integrity error."""
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        structlog.get_logger().warning("integrity_conflict", entity=entity, deleting=deleting, error=str(exc.orig))
        raise conflict(entity, locale, deleting)

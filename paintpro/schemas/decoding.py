"""
Single entry point for turning an untyped payload into a validated schema.

Routes and SDK forms both call ``decode`` so an un-validated dict never
reaches storage, and validation failures always come back as the same
field-keyed, localized message map.
"""
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..i18n import translate
from .common import camelize


SchemaT = TypeVar("SchemaT", bound=BaseModel)


class PayloadValidationError(Exception):
    def __init__(self, entity: str, errors: Dict[str, List[str]], locale: Optional[str] = None):
        self.entity = entity
        self.errors = errors
        self.locale = locale
        self.message = translate(
            "error.invalid_payload",
            locale,
            entity=translate(f"entity.{entity}", locale),
        )
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


def _field_path(loc: Iterable[Any]) -> str:
    parts = []
    for part in loc:
        parts.append(camelize(part) if isinstance(part, str) else str(part))
    return ".".join(parts) or "_"


def _message_for(error: dict, field: str, locale: Optional[str]) -> str:
    kind = error.get("type", "")
    ctx = error.get("ctx") or {}
    if kind == "missing":
        return translate("error.missing", locale, field=field)
    if kind in ("string_too_short", "null_not_allowed"):
        return translate("error.missing", locale, field=field)
    if kind == "invalid_date":
        return translate("error.invalid_date", locale, field=field)
    if kind in ("invalid_decimal", "decimal_parsing", "decimal_type", "int_parsing", "int_type", "float_parsing"):
        return translate("error.invalid_decimal", locale, field=field)
    if kind == "too_precise":
        return translate("error.too_precise", locale, field=field, places=ctx.get("places"))
    if kind in ("enum", "literal_error"):
        return translate("error.invalid_choice", locale, field=field, choices=ctx.get("expected", ""))
    if kind in ("greater_than_equal", "greater_than"):
        return translate("error.too_small", locale, field=field, limit=ctx.get("ge", ctx.get("gt")))
    if kind in ("less_than_equal", "less_than"):
        return translate("error.too_large", locale, field=field, limit=ctx.get("le", ctx.get("lt")))
    return translate("error.invalid_type", locale, field=field)


def format_errors(errors: Iterable[dict], locale: Optional[str] = None, skip_prefix: int = 0) -> Dict[str, List[str]]:
    out: Dict[str, List[str]] = {}
    for error in errors:
        loc = tuple(error.get("loc", ()))[skip_prefix:]
        field = _field_path(loc)
        out.setdefault(field, []).append(_message_for(error, field, locale))
    return out


def decode(schema: Type[SchemaT], payload: Any, entity: str, locale: Optional[str] = None) -> SchemaT:
    """Validate ``payload`` against ``schema`` or raise PayloadValidationError.

    Unknown keys are ignored by the schemas, so server-assigned fields such as
    ``id`` or ``createdAt`` in the payload never make it through.
    """
    if not isinstance(payload, dict):
        raise PayloadValidationError(entity, {"_": [translate("error.invalid_type", locale, field="body")]}, locale)
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise PayloadValidationError(entity, format_errors(exc.errors(), locale), locale) from exc

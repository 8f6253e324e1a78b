"""
Shared field types for the insert/read schemas.

All entities reuse the same coercion rules, so every date field, money field
and purchase order line behaves identically and reports identical errors.
"""
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError


def camelize(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class WireModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=camelize, populate_by_name=True, use_enum_values=True)


class ReadModel(WireModel):
    model_config = ConfigDict(from_attributes=True)


def _field_label(info: Optional[ValidationInfo]) -> str:
    name = getattr(info, "field_name", None) if info is not None else None
    return camelize(name) if name else "value"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_flexible_date(value: Any, info: ValidationInfo) -> Optional[datetime]:
    """Accept a date/datetime, an ISO-8601 string, or None.

    Valid input is normalized to a timezone-aware UTC datetime. Anything else,
    including an empty or unparseable string, is a validation error.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        if text:
            try:
                return _as_utc(datetime.fromisoformat(text))
            except ValueError:
                pass
    raise PydanticCustomError("invalid_date", "Invalid date for {field}", {"field": _field_label(info)})


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        # repr gives the shortest string that round-trips, 10.1 -> "10.1"
        result = Decimal(repr(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    return result if result.is_finite() else None


MONEY_PLACES = 2


def _check_scale(result: Decimal, info: Optional[ValidationInfo]) -> Decimal:
    """Money columns hold two decimal places; anything finer would be rounded on save."""
    if result.normalize().as_tuple().exponent < -MONEY_PLACES:
        raise PydanticCustomError(
            "too_precise",
            "{field} must have at most {places} decimal places",
            {"field": _field_label(info), "places": MONEY_PLACES},
        )
    return result


def parse_money(value: Any, info: ValidationInfo) -> Decimal:
    result = _to_decimal(value)
    if result is None:
        raise PydanticCustomError("invalid_decimal", "{field} must be a number", {"field": _field_label(info)})
    return _check_scale(result, info)


def parse_lenient_number(value: Any, info: ValidationInfo) -> Decimal:
    """Numbers pass through, strings are parsed and fall back to 0."""
    if isinstance(value, str):
        return _to_decimal(value) or Decimal("0")
    if value is None:
        return Decimal("0")
    result = _to_decimal(value)
    if result is None:
        raise PydanticCustomError("invalid_decimal", "{field} must be a number", {"field": _field_label(info)})
    return result


def normalize_decimal_string(value: Any, info: ValidationInfo) -> str:
    """Number or numeric string in, decimal string out, digits preserved."""
    result = _to_decimal(value)
    if result is None:
        raise PydanticCustomError("invalid_decimal", "{field} must be a number", {"field": _field_label(info)})
    if result < 0:
        raise PydanticCustomError(
            "greater_than_equal",
            "{field} must be at least {ge}",
            {"field": _field_label(info), "ge": 0},
        )
    _check_scale(result, info)
    if isinstance(value, str) and "e" not in value.lower():
        return value.strip()
    return format(result, "f")


def empty_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


FlexibleDate = Annotated[Optional[datetime], BeforeValidator(parse_flexible_date)]
Money = Annotated[Decimal, BeforeValidator(parse_money), Field(ge=0)]
LenientNumber = Annotated[Decimal, BeforeValidator(parse_lenient_number), Field(ge=0)]
DecimalString = Annotated[str, BeforeValidator(normalize_decimal_string)]
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
OptionalText = Annotated[Optional[str], BeforeValidator(empty_to_none)]
Percent = Annotated[int, Field(ge=0, le=100)]


def not_null(*fields: str):
    """Field validator for partial updates: a field may be omitted, never nulled.

    Runs after the field type, so blank text that the type turns into None is
    rejected the same way as an explicit null.
    """

    def _check(cls, value, info: ValidationInfo):
        if value is None:
            raise PydanticCustomError("null_not_allowed", "{field} is required", {"field": _field_label(info)})
        return value

    return field_validator(*fields, mode="after")(_check)

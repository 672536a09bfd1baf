"""Shared helpers for wire (v1) and form schemas.

Wire schemas are lenient: the API has served several shapes over time, so
malformed dates, numbers or enum values degrade to defaults instead of failing a whole
list load. Form schemas are strict and report one message per field.
"""

import logging
import re
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, NoReturn, TypeVar

from pydantic import AliasChoices, BeforeValidator, ConfigDict, Field, PlainSerializer, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

logger = logging.getLogger(__name__)

EnumT = TypeVar("EnumT", bound=Enum)

# The guest form has always accepted anything shaped like a@b.c. Validating
# with EmailStr would reject addresses already stored, so keep the plain regex.
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[+]?[\d\s\-()]{10,}$")

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _coerce_id(value: Any) -> Any:
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _lenient_date(value: Any) -> date | None:
    """Parse ISO dates, ISO datetimes and epoch milliseconds; None if unusable."""
    value = _blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            logger.warning("Ignoring out-of-range timestamp %r", value)
            return None
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.split("T", 1)[0].strip())
        except ValueError:
            logger.warning("Ignoring unparseable date %r", value)
            return None
    logger.warning("Ignoring date of unexpected type %s", type(value).__name__)
    return None


def _lenient_decimal(value: Any) -> Decimal | None:
    value = _blank_to_none(value)
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        logger.warning("Ignoring unparseable amount %r", value)
        return None


def _lenient_int(value: Any) -> int | None:
    """Whole number from an int, float or numeric string, rounded half up; None if unusable."""
    value = _blank_to_none(value)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
        if not number.is_finite():
            raise InvalidOperation
        return int(number.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        logger.warning("Ignoring unparseable number %r", value)
        return None


def _decimal_to_number(value: Decimal | None) -> float | None:
    return None if value is None else float(value)


def _form_date(value: Any) -> Any:
    value = _blank_to_none(value)
    if isinstance(value, str):
        return value.split("T", 1)[0].strip()
    return value


WireId = Annotated[str | None, BeforeValidator(_coerce_id)]
RequiredWireId = Annotated[str, BeforeValidator(_coerce_id), Field(min_length=1)]
WireDate = Annotated[date | None, BeforeValidator(_lenient_date)]
WireInt = Annotated[int | None, BeforeValidator(_lenient_int)]
WireText = Annotated[str, BeforeValidator(lambda v: "" if v is None else str(v))]
WireMoney = Annotated[
    Decimal | None,
    BeforeValidator(_lenient_decimal),
    PlainSerializer(_decimal_to_number, return_type=float | None, when_used="json"),
]
FormDate = Annotated[date | None, BeforeValidator(_form_date)]
FormAmount = Annotated[Decimal, BeforeValidator(lambda v: 0 if _blank_to_none(v) is None else v)]


def id_field() -> Any:
    """Field for a record id that the API may send as ``id`` or ``_id``."""
    return Field(
        None,
        validation_alias=AliasChoices("id", "_id"),
        serialization_alias="id",
    )


def parse_enum(enum_cls: type[EnumT], value: Any, default: EnumT | None) -> EnumT | None:
    """Map a raw wire value onto ``enum_cls``; unknown values fall back to ``default``."""
    if value is None or value == "":
        return default
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning("Unknown %s value %r, using %r", enum_cls.__name__, value, default)
        return default


# ---------------------------------------------------------------------------
# Forms
# ---------------------------------------------------------------------------


FORM_CONFIG = ConfigDict(
    str_strip_whitespace=True,
    validate_default=True,
    extra="ignore",
)


def reject(message: str) -> NoReturn:
    """Raise a field error whose message is shown to the user verbatim."""
    raise PydanticCustomError("form_field", message)


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def field_errors(exc: ValidationError) -> dict[str, str]:
    """Collapse a ValidationError into ``{field: message}`` (first message wins)."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__all__",)
        errors.setdefault(str(loc[0]), error["msg"])
    return errors

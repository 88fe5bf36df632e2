"""
Правила проверки отдельных значений (Value Validators).

Каждое правило описано аннотированным типом pydantic и используется
как в фабриках сущностей, так и в аннотациях полей самих сущностей.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Optional, Type, TypeVar

from pydantic import (
    EmailStr,
    Field,
    StrictInt,
    StrictStr,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)

from ..shared_kernel import ensure_utc

UUID_PATTERN = (
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

EntityIdStr = Annotated[str, StringConstraints(pattern=UUID_PATTERN)]
NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
NonNegativeInt = Annotated[StrictInt, Field(ge=0)]

T_Enum = TypeVar("T_Enum", bound=Enum)

_entity_id = TypeAdapter(EntityIdStr)
_non_empty = TypeAdapter(NonEmptyStr)
_non_negative_int = TypeAdapter(NonNegativeInt)
_strict_int = TypeAdapter(StrictInt)
_optional_text = TypeAdapter(Optional[StrictStr])
_email = TypeAdapter(EmailStr)


def _passes(adapter: TypeAdapter, value: Any, strict: bool = True) -> bool:
    try:
        adapter.validate_python(value, strict=strict)
    except ValidationError:
        return False
    return True


def is_valid_entity_id(value: Any) -> bool:
    """Идентификатор: строка в каноническом формате UUID."""
    return _passes(_entity_id, value)


def is_non_empty_string(value: Any) -> bool:
    return _passes(_non_empty, value)


def is_optional_text(value: Any) -> bool:
    """None или строка (в том числе пустая)."""
    return _passes(_optional_text, value)


def is_non_negative_int(value: Any) -> bool:
    """Целое число >= 0. bool и float не принимаются."""
    return _passes(_non_negative_int, value)


def is_optional_int(value: Any) -> bool:
    return value is None or _passes(_strict_int, value)


def is_valid_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return _passes(_email, value, strict=False)


def parse_enum(enum_cls: Type[T_Enum], value: Any) -> Optional[T_Enum]:
    """Возвращает элемент перечисления или None, если значение вне перечисления."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return None


def parse_instant(value: Any) -> Optional[datetime]:
    """Момент времени в UTC. Наивное время считается временем UTC."""
    if not isinstance(value, datetime):
        return None
    return ensure_utc(value)


def parse_date(value: Any) -> Optional[date]:
    """Календарная дата. Момент времени сводится к дате в UTC."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    if isinstance(value, date):
        return value
    return None


def is_valid_time_range(start: datetime, end: datetime) -> bool:
    """Начало строго раньше конца."""
    return start < end

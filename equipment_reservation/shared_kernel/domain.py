"""
Основные типы и утилиты общего ядра.
"""

from datetime import datetime, timezone
from typing import Optional, Union
from uuid import uuid4
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Идентификаторы хранятся как строки в формате UUID
EntityId = str

UTC = timezone.utc


def generate_id() -> EntityId:
    """Генерирует новый идентификатор."""
    return str(uuid4())


def now() -> datetime:
    """Возвращает текущий момент времени в UTC."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Приводит момент времени к UTC. Наивное время считается временем UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_known_timezone(name: str) -> bool:
    """Проверяет, что строка является именем часового пояса IANA."""
    if not isinstance(name, str) or not name:
        return False
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def to_utc(value: Union[datetime, str], tz_name: str) -> Optional[datetime]:
    """
    Переводит локальное время системы в момент UTC.

    Строки разбираются как ISO 8601. Наивное время интерпретируется в поясе
    ``tz_name``, время с указанным поясом просто переводится в UTC.
    Возвращает None, если значение не удалось разобрать.
    """
    if isinstance(value, str):
        if value.endswith(("Z", "z")):
            value = value[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return None
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(tz_name))
    return value.astimezone(UTC)

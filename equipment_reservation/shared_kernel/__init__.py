"""
Общее ядро (Shared Kernel) системы бронирования оборудования.

Содержит тип результата, таксономию ошибок и утилиты для идентификаторов и времени.
"""

from .domain import (
    UTC,
    EntityId,
    ensure_utc,
    generate_id,
    is_known_timezone,
    now,
    to_utc,
)
from .errors import (
    AuthorizationException,
    ConflictException,
    DomainException,
    ForbiddenException,
    InfrastructureException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from .result import Err, Ok, Result

__all__ = [
    # Базовые типы
    "EntityId",
    "UTC",
    # Результат
    "Ok",
    "Err",
    "Result",
    # Исключения
    "DomainException",
    "ValidationException",
    "AuthorizationException",
    "UnauthorizedException",
    "ForbiddenException",
    "NotFoundException",
    "ConflictException",
    "InfrastructureException",
    # Утилиты
    "generate_id",
    "now",
    "ensure_utc",
    "to_utc",
    "is_known_timezone",
]

"""
Общие проверки для сервисов приложения.
"""

from typing import Any, Dict, List, Optional, TypeVar

from ...domain import Actor, User
from ...shared_kernel import (
    DomainException,
    EntityId,
    Err,
    ForbiddenException,
    NotFoundException,
    Ok,
    Result,
    UnauthorizedException,
)
from ..repositories import UserRepository

T = TypeVar("T")


def require_actor(actor: Optional[Actor]) -> Result[Actor, UnauthorizedException]:
    """Операция требует аутентифицированного участника."""
    if actor is None:
        return Err(UnauthorizedException())
    return Ok(actor)


def authorize(allowed: bool, detail: Optional[str] = None) -> Result[None, ForbiddenException]:
    if not allowed:
        return Err(ForbiddenException(detail))
    return Ok(None)


def require_found(
    result: Result[Optional[T], DomainException], message: str
) -> Result[T, DomainException]:
    """Превращает Ok(None) в NotFoundException."""
    if result.is_err():
        return result
    if result.value is None:
        return Err(NotFoundException(message))
    return result


def blank_to_none(value: Any) -> Any:
    """Пустая строка из формы означает отсутствие значения."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def load_users(
    users: UserRepository, user_ids: List[EntityId]
) -> Result[Dict[EntityId, User], DomainException]:
    """Загружает пользователей для полей отображения; отсутствующие пропускаются."""
    found: Dict[EntityId, User] = {}
    for user_id in dict.fromkeys(user_ids):
        result = users.find_by_id(user_id)
        if result.is_err():
            return result
        if result.value is not None:
            found[user_id] = result.value
    return Ok(found)

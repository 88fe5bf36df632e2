"""
Таксономия доменных ошибок.

Ошибки передаются как значения внутри ``Err``; выбрасываются они только
на внешней границе (``Err.unwrap``).
"""

from typing import Optional


class DomainException(Exception):
    """Базовое исключение для доменных ошибок."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __eq__(self, other):
        if not isinstance(other, DomainException):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message

    def __hash__(self):
        return hash((type(self), self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ValidationException(DomainException):
    """Нарушен инвариант одного поля или связки полей."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthorizationException(DomainException):
    """Действие запрещено для данного пользователя."""


class UnauthorizedException(AuthorizationException):
    """Нет аутентифицированного пользователя."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenException(AuthorizationException):
    """Пользователь аутентифицирован, но прав недостаточно."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__("Forbidden")
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class NotFoundException(DomainException):
    """Идентификатор корректен, но объект отсутствует."""


class ConflictException(DomainException):
    """Конфликт с уже сохранёнными данными (пересечение брони, дубликат)."""


class InfrastructureException(DomainException):
    """Сбой хранилища. Ядро не повторяет операцию."""

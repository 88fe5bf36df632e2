"""
Пользователи и аутентифицированный участник (Actor).
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from ..shared_kernel import Err, Ok, Result, ValidationException
from .validators import (
    EntityIdStr,
    is_optional_text,
    is_valid_email,
    is_valid_entity_id,
    parse_enum,
)


class UserRole(str, Enum):
    """Глобальный уровень прав."""

    GENERAL = "GENERAL"
    EDITOR = "EDITOR"
    ADMIN = "ADMIN"


ELEVATED_ROLES = frozenset({UserRole.ADMIN, UserRole.EDITOR})


class UserError(ValidationException):
    pass


class User(BaseModel):
    """Пользователь системы. Удаляется только мягко (на уровне хранилища)."""

    model_config = ConfigDict(frozen=True)

    id: EntityIdStr
    email: str
    password_hash: str
    name: Optional[str] = None
    role: UserRole = UserRole.GENERAL
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone_number: Optional[str] = None
    department: Optional[str] = None

    @property
    def label(self) -> Optional[str]:
        """Имя для отображения."""
        return self.display_name or self.name

    def with_changes(self, **changes: Any) -> "Result[User, UserError]":
        return create_user(**{**self.model_dump(), **changes})


class Actor(BaseModel):
    """Аутентифицированный участник, переданный слоем аутентификации."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: UserRole = UserRole.GENERAL
    email: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=user.id, role=user.role, email=user.email)


def create_user(
    id: str,
    email: str,
    password_hash: str,
    name: Optional[str] = None,
    role: Any = UserRole.GENERAL,
    display_name: Optional[str] = None,
    avatar_url: Optional[str] = None,
    phone_number: Optional[str] = None,
    department: Optional[str] = None,
) -> Result[User, UserError]:
    if not is_valid_entity_id(id):
        return Err(UserError("Invalid User ID", field="id"))
    if not is_valid_email(email):
        return Err(UserError("Invalid Email", field="email"))
    if not isinstance(password_hash, str):
        return Err(UserError("Invalid Password Hash", field="password_hash"))

    for field_name, value in (
        ("name", name),
        ("display_name", display_name),
        ("avatar_url", avatar_url),
        ("phone_number", phone_number),
        ("department", department),
    ):
        if not is_optional_text(value):
            label = field_name.replace("_", " ").title()
            return Err(UserError(f"Invalid {label}", field=field_name))

    # Роль по умолчанию - наименее привилегированная
    parsed_role = parse_enum(UserRole, UserRole.GENERAL if role is None else role)
    if parsed_role is None:
        return Err(UserError("Invalid Role", field="role"))

    return Ok(
        User(
            id=id,
            email=email,
            password_hash=password_hash,
            name=name,
            role=parsed_role,
            display_name=display_name,
            avatar_url=avatar_url,
            phone_number=phone_number,
            department=department,
        )
    )

"""
Сервис приложения для пользователей и избранного оборудования.

Хэширование паролей выполняет слой аутентификации; сюда приходит готовый хэш.
"""

from typing import Any, Callable, List, Optional

from ...domain import Actor, Equipment, PermissionService, User, UserRole, create_user
from ...shared_kernel import (
    ConflictException,
    DomainException,
    EntityId,
    Err,
    Ok,
    Result,
    generate_id,
)
from ..interfaces import ILogger
from ..repositories import EquipmentRepository, UserRepository
from .base import authorize, blank_to_none, require_actor, require_found

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"

# Поле не передано: сохраняется текущее значение
_KEEP: Any = object()


class UserApplicationService:
    def __init__(
        self,
        users: UserRepository,
        equipment: EquipmentRepository,
        logger: ILogger,
        id_factory: Callable[[], EntityId] = generate_id,
    ):
        self._users = users
        self._equipment = equipment
        self._logger = logger
        self._new_id = id_factory

    def _authorize_admin(
        self, actor: Optional[Actor], action: str
    ) -> Result[Actor, DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        allowed = authorize(PermissionService.can_manage_users(actor))
        if allowed.is_err():
            self._logger.warning(
                "User management denied", actor_id=actor.id, action=action
            )
            return allowed
        return actor_result

    def _ensure_email_free(self, email: str) -> Result[None, DomainException]:
        existing = self._users.find_by_email(email)
        if existing.is_err():
            return existing
        if existing.value is not None:
            return Err(ConflictException(DUPLICATE_EMAIL_MESSAGE))
        return Ok(None)

    def get_user(self, user_id: EntityId) -> Result[User, DomainException]:
        return require_found(self._users.find_by_id(user_id), "User not found")

    def get_current_user(self, actor: Optional[Actor]) -> Result[User, DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        return self.get_user(actor.id)

    def register_user(
        self, email: str, password_hash: str, name: Optional[str] = None
    ) -> Result[User, DomainException]:
        """
        Регистрация без участника.

        Первый зарегистрированный пользователь становится ADMIN
        (правило хранилища), остальные получают роль GENERAL.
        """
        user = create_user(self._new_id(), email, password_hash, blank_to_none(name))
        if user.is_err():
            return user
        free = self._ensure_email_free(email)
        if free.is_err():
            return free

        saved = self._users.save(user.value)
        if saved.is_ok():
            self._logger.info(
                "User registered", user_id=saved.value.id, role=saved.value.role
            )
        return saved

    def create_user(
        self,
        actor: Optional[Actor],
        email: str,
        password_hash: str,
        name: Optional[str] = None,
        role: Any = UserRole.GENERAL,
        department: Optional[str] = None,
    ) -> Result[User, DomainException]:
        """Создание пользователя администратором."""
        if actor is None:
            return require_actor(actor)
        user = create_user(
            self._new_id(),
            email,
            password_hash,
            name=blank_to_none(name),
            role=role,
            department=blank_to_none(department),
        )
        if user.is_err():
            return user
        allowed = self._authorize_admin(actor, "create_user")
        if allowed.is_err():
            return allowed

        free = self._ensure_email_free(email)
        if free.is_err():
            return free
        saved = self._users.save(user.value)
        if saved.is_ok():
            self._logger.info(
                "User created", user_id=saved.value.id, created_by=actor.id
            )
        return saved

    def update_user(
        self,
        actor: Optional[Actor],
        user_id: EntityId,
        role: Any,
        display_name: Optional[str] = _KEEP,
        phone_number: Optional[str] = _KEEP,
        department: Optional[str] = _KEEP,
    ) -> Result[User, DomainException]:
        """Администратор меняет роль и контактные данные пользователя."""
        allowed = self._authorize_admin(actor, "update_user")
        if allowed.is_err():
            return allowed
        existing = self.get_user(user_id)
        if existing.is_err():
            return existing

        changes = {"role": role}
        for field_name, value in (
            ("display_name", display_name),
            ("phone_number", phone_number),
            ("department", department),
        ):
            if value is not _KEEP:
                changes[field_name] = value
        updated = existing.value.with_changes(**changes)
        if updated.is_err():
            return updated

        saved = self._users.update(updated.value)
        if saved.is_ok():
            self._logger.info(
                "User updated", user_id=user_id, role=updated.value.role, by=actor.id
            )
        return saved

    def update_profile(
        self,
        actor: Optional[Actor],
        display_name: Optional[str] = None,
        phone_number: Optional[str] = None,
        department: Optional[str] = None,
    ) -> Result[User, DomainException]:
        """Пользователь меняет свой профиль; пустые значения не затирают текущие."""
        current = self.get_current_user(actor)
        if current.is_err():
            return current
        user = current.value

        updated = user.with_changes(
            display_name=blank_to_none(display_name) or user.display_name,
            phone_number=blank_to_none(phone_number) or user.phone_number,
            department=blank_to_none(department) or user.department,
        )
        if updated.is_err():
            return updated
        return self._users.update(updated.value)

    def change_password(
        self, actor: Optional[Actor], password_hash: str
    ) -> Result[None, DomainException]:
        current = self.get_current_user(actor)
        if current.is_err():
            return current

        changed = self._users.update_password(current.value.id, password_hash)
        if changed.is_ok():
            self._logger.info("Password changed", user_id=current.value.id)
        return changed

    def delete_user(
        self, actor: Optional[Actor], user_id: EntityId
    ) -> Result[None, DomainException]:
        """
        Мягкое удаление пользователя администратором.

        Пользователь снимается с должности администратора и заместителя
        администратора оборудования. Удалить самого себя нельзя.
        """
        allowed = self._authorize_admin(actor, "delete_user")
        if allowed.is_err():
            return allowed
        if user_id == actor.id:
            return authorize(False, detail="Cannot delete your own account")
        existing = self.get_user(user_id)
        if existing.is_err():
            return existing

        deleted = self._users.soft_delete(user_id)
        if deleted.is_ok():
            self._logger.info("User deleted", user_id=user_id, by=actor.id)
        return deleted

    def list_users(self, actor: Optional[Actor]) -> Result[List[User], DomainException]:
        allowed = self._authorize_admin(actor, "list_users")
        if allowed.is_err():
            return allowed
        return self._users.find_all()

    # Избранное

    def toggle_favorite(
        self, actor: Optional[Actor], equipment_id: EntityId
    ) -> Result[bool, DomainException]:
        """Добавляет оборудование в избранное или убирает его. Возвращает новое состояние."""
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        equipment = require_found(
            self._equipment.find_by_id(equipment_id), "Equipment not found"
        )
        if equipment.is_err():
            return equipment

        favorites = self._users.get_favorites(actor.id)
        if favorites.is_err():
            return favorites
        if equipment_id in favorites.value:
            removed = self._users.remove_favorite(actor.id, equipment_id)
            return removed if removed.is_err() else Ok(False)
        added = self._users.add_favorite(actor.id, equipment_id)
        return added if added.is_err() else Ok(True)

    def get_favorites(
        self, actor: Optional[Actor]
    ) -> Result[List[Equipment], DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        favorites = self._users.get_favorites(actor.id)
        if favorites.is_err():
            return favorites

        found = []
        for equipment_id in favorites.value:
            equipment = self._equipment.find_by_id(equipment_id)
            if equipment.is_err():
                return equipment
            if equipment.value is not None:
                found.append(equipment.value)
        return Ok(found)

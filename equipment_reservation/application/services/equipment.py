"""
Сервис приложения для оборудования и его категорий.
"""

from datetime import date
from typing import Any, Callable, Iterable, List, Optional

from ...domain import (
    Actor,
    Equipment,
    EquipmentCategory,
    PermissionService,
    RunningState,
    create_equipment,
    create_equipment_category,
)
from ...shared_kernel import (
    ConflictException,
    DomainException,
    EntityId,
    Err,
    Ok,
    Result,
    generate_id,
)
from ..dto import EquipmentView, LocationView
from ..interfaces import ILogger
from ..repositories import (
    BuildingRepository,
    EquipmentCategoryRepository,
    EquipmentRepository,
    FloorRepository,
    RoomRepository,
    UserRepository,
)
from .base import authorize, blank_to_none, load_users, require_actor, require_found


class EquipmentApplicationService:
    """
    Сервис приложения для управления оборудованием.

    Основные поля меняют ADMIN и EDITOR. Назначать администраторов
    оборудования могут также текущий администратор и его заместители.
    """

    def __init__(
        self,
        equipment: EquipmentRepository,
        categories: EquipmentCategoryRepository,
        rooms: RoomRepository,
        floors: FloorRepository,
        buildings: BuildingRepository,
        users: UserRepository,
        logger: ILogger,
        id_factory: Callable[[], EntityId] = generate_id,
    ):
        self._equipment = equipment
        self._categories = categories
        self._rooms = rooms
        self._floors = floors
        self._buildings = buildings
        self._users = users
        self._logger = logger
        self._new_id = id_factory

    def _authorize_manage(self, actor: Actor) -> Result[None, DomainException]:
        allowed = authorize(PermissionService.can_manage_equipment(actor))
        if allowed.is_err():
            self._logger.warning(
                "Equipment change denied", actor_id=actor.id, role=actor.role
            )
        return allowed

    def list_equipment(self) -> Result[List[Equipment], DomainException]:
        return self._equipment.find_all()

    def list_equipment_by_room(
        self, room_id: EntityId
    ) -> Result[List[Equipment], DomainException]:
        return self._equipment.find_by_room_id(room_id)

    def get_equipment(self, equipment_id: EntityId) -> Result[Equipment, DomainException]:
        return require_found(
            self._equipment.find_by_id(equipment_id), "Equipment not found"
        )

    def get_equipment_view(
        self, equipment_id: EntityId
    ) -> Result[EquipmentView, DomainException]:
        """Оборудование вместе с администраторами и местом размещения."""
        equipment = self.get_equipment(equipment_id)
        if equipment.is_err():
            return equipment
        item = equipment.value

        managers = [item.administrator_id] if item.administrator_id else []
        users = load_users(self._users, managers + list(item.vice_administrator_ids))
        if users.is_err():
            return users
        location = self._location(item.room_id)
        if location.is_err():
            return location

        return Ok(
            EquipmentView.from_domain(
                item,
                administrator=users.value.get(item.administrator_id),
                vice_administrators=[
                    users.value[user_id]
                    for user_id in item.vice_administrator_ids
                    if user_id in users.value
                ],
                location=location.value,
            )
        )

    def _location(
        self, room_id: Optional[EntityId]
    ) -> Result[Optional[LocationView], DomainException]:
        if room_id is None:
            return Ok(None)
        room = self._rooms.find_by_id(room_id)
        if room.is_err() or room.value is None:
            return room
        floor = self._floors.find_by_id(room.value.floor_id)
        if floor.is_err() or floor.value is None:
            return floor
        building = self._buildings.find_by_id(floor.value.building_id)
        if building.is_err() or building.value is None:
            return building
        return Ok(LocationView.from_domain(building.value, floor.value, room.value))

    def create_equipment(
        self,
        actor: Optional[Actor],
        name: str,
        description: Optional[str] = None,
        category_major: Optional[str] = None,
        category_minor: Optional[str] = None,
        room_id: Optional[EntityId] = None,
        running_state: Any = RunningState.OPERATIONAL,
        installation_date: Optional[date] = None,
        administrator_id: Optional[EntityId] = None,
        vice_administrator_ids: Iterable[EntityId] = (),
    ) -> Result[Equipment, DomainException]:
        if actor is None:
            return require_actor(actor)
        equipment = create_equipment(
            self._new_id(),
            name,
            description=blank_to_none(description),
            category_major=blank_to_none(category_major),
            category_minor=blank_to_none(category_minor),
            room_id=blank_to_none(room_id),
            running_state=running_state,
            installation_date=installation_date,
            administrator_id=blank_to_none(administrator_id),
            vice_administrator_ids=vice_administrator_ids,
        )
        if equipment.is_err():
            return equipment
        allowed = self._authorize_manage(actor)
        if allowed.is_err():
            return allowed

        room = self._require_room(equipment.value.room_id)
        if room.is_err():
            return room
        saved = self._equipment.save(equipment.value)
        if saved.is_ok():
            self._logger.info("Equipment created", equipment_id=saved.value.id)
        return saved

    def update_equipment(
        self,
        actor: Optional[Actor],
        equipment_id: EntityId,
        name: str,
        description: Optional[str] = None,
        category_major: Optional[str] = None,
        category_minor: Optional[str] = None,
        room_id: Optional[EntityId] = None,
        running_state: Any = RunningState.OPERATIONAL,
        installation_date: Optional[date] = None,
    ) -> Result[Equipment, DomainException]:
        """Меняет основные поля; администраторы оборудования сохраняются."""
        if actor is None:
            return require_actor(actor)
        candidate = create_equipment(
            equipment_id,
            name,
            description=blank_to_none(description),
            category_major=blank_to_none(category_major),
            category_minor=blank_to_none(category_minor),
            room_id=blank_to_none(room_id),
            running_state=running_state,
            installation_date=installation_date,
        )
        if candidate.is_err():
            return candidate
        allowed = self._authorize_manage(actor)
        if allowed.is_err():
            return allowed

        existing = self.get_equipment(equipment_id)
        if existing.is_err():
            return existing
        room = self._require_room(candidate.value.room_id)
        if room.is_err():
            return room

        updated = candidate.value.model_copy(
            update={
                "administrator_id": existing.value.administrator_id,
                "vice_administrator_ids": existing.value.vice_administrator_ids,
            }
        )
        saved = self._equipment.save(updated)
        if saved.is_ok():
            self._logger.info("Equipment updated", equipment_id=equipment_id)
        return saved

    def update_equipment_management(
        self,
        actor: Optional[Actor],
        equipment_id: EntityId,
        administrator_id: Optional[EntityId],
        vice_administrator_ids: Iterable[EntityId] = (),
    ) -> Result[Equipment, DomainException]:
        """Назначает администратора и заместителей администратора оборудования."""
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        existing = self.get_equipment(equipment_id)
        if existing.is_err():
            return existing

        updated = existing.value.with_changes(
            administrator_id=blank_to_none(administrator_id),
            vice_administrator_ids=vice_administrator_ids,
        )
        if updated.is_err():
            return updated
        allowed = authorize(
            PermissionService.can_edit_equipment_management(actor, existing.value)
        )
        if allowed.is_err():
            self._logger.warning(
                "Equipment management change denied",
                actor_id=actor.id,
                equipment_id=equipment_id,
            )
            return allowed

        saved = self._equipment.save(updated.value)
        if saved.is_ok():
            self._logger.info(
                "Equipment management updated",
                equipment_id=equipment_id,
                administrator_id=updated.value.administrator_id,
            )
        return saved

    def delete_equipment(
        self, actor: Optional[Actor], equipment_id: EntityId
    ) -> Result[None, DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        allowed = self._authorize_manage(actor)
        if allowed.is_err():
            return allowed
        existing = self.get_equipment(equipment_id)
        if existing.is_err():
            return existing

        deleted = self._equipment.delete(equipment_id)
        if deleted.is_ok():
            self._logger.info("Equipment deleted", equipment_id=equipment_id)
        return deleted

    def _require_room(self, room_id: Optional[EntityId]) -> Result[None, DomainException]:
        if room_id is None:
            return Ok(None)
        room = require_found(self._rooms.find_by_id(room_id), "Room not found")
        if room.is_err():
            return room
        return Ok(None)

    # Категории

    def list_categories(self) -> Result[List[EquipmentCategory], DomainException]:
        return self._categories.find_all()

    def create_category(
        self, actor: Optional[Actor], category_major: str, category_minor: str
    ) -> Result[EquipmentCategory, DomainException]:
        if actor is None:
            return require_actor(actor)
        category = create_equipment_category(
            self._new_id(), category_major, category_minor
        )
        if category.is_err():
            return category
        allowed = self._authorize_manage(actor)
        if allowed.is_err():
            return allowed

        duplicate = self._categories.find_by_major_minor(category_major, category_minor)
        if duplicate.is_err():
            return duplicate
        if duplicate.value is not None:
            return Err(ConflictException("Category already exists"))
        return self._categories.save(category.value)

    def delete_category(
        self, actor: Optional[Actor], category_id: EntityId
    ) -> Result[None, DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        allowed = self._authorize_manage(actor)
        if allowed.is_err():
            return allowed
        existing = require_found(
            self._categories.find_by_id(category_id), "Category not found"
        )
        if existing.is_err():
            return existing
        return self._categories.delete(category_id)

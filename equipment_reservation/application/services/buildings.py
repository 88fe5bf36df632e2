"""
Сервис приложения для зданий, этажей и помещений.

Изменять иерархию размещения может только ADMIN.
"""

from typing import Callable, List, Optional

from ...domain import (
    Actor,
    Building,
    Floor,
    PermissionService,
    Room,
    create_building,
    create_floor,
    create_room,
)
from ...shared_kernel import DomainException, EntityId, Result, generate_id
from ..interfaces import ILogger
from ..repositories import BuildingRepository, FloorRepository, RoomRepository
from .base import authorize, blank_to_none, require_actor, require_found


class BuildingApplicationService:
    """Сервис приложения для управления зданиями, этажами и помещениями."""

    def __init__(
        self,
        buildings: BuildingRepository,
        floors: FloorRepository,
        rooms: RoomRepository,
        logger: ILogger,
        id_factory: Callable[[], EntityId] = generate_id,
    ):
        self._buildings = buildings
        self._floors = floors
        self._rooms = rooms
        self._logger = logger
        self._new_id = id_factory

    def _authorize(self, actor: Optional[Actor]) -> Result[Actor, DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        allowed = authorize(PermissionService.can_manage_buildings(actor))
        if allowed.is_err():
            self._logger.warning(
                "Building hierarchy change denied", actor_id=actor.id, role=actor.role
            )
            return allowed
        return actor_result

    # Здания

    def list_buildings(self) -> Result[List[Building], DomainException]:
        return self._buildings.find_all()

    def get_building(self, building_id: EntityId) -> Result[Building, DomainException]:
        return require_found(self._buildings.find_by_id(building_id), "Building not found")

    def create_building(
        self, actor: Optional[Actor], name: str, address: Optional[str] = None
    ) -> Result[Building, DomainException]:
        if actor is None:
            return require_actor(actor)
        building = create_building(self._new_id(), name, blank_to_none(address))
        if building.is_err():
            return building
        allowed = self._authorize(actor)
        if allowed.is_err():
            return allowed

        saved = self._buildings.save(building.value)
        if saved.is_ok():
            self._logger.info("Building created", building_id=saved.value.id)
        return saved

    def update_building(
        self,
        actor: Optional[Actor],
        building_id: EntityId,
        name: str,
        address: Optional[str] = None,
    ) -> Result[Building, DomainException]:
        if actor is None:
            return require_actor(actor)
        building = create_building(building_id, name, blank_to_none(address))
        if building.is_err():
            return building
        allowed = self._authorize(actor)
        if allowed.is_err():
            return allowed

        existing = self.get_building(building_id)
        if existing.is_err():
            return existing
        return self._buildings.save(building.value)

    def delete_building(
        self, actor: Optional[Actor], building_id: EntityId
    ) -> Result[None, DomainException]:
        allowed = self._authorize(actor)
        if allowed.is_err():
            return allowed
        existing = self.get_building(building_id)
        if existing.is_err():
            return existing

        deleted = self._buildings.delete(building_id)
        if deleted.is_ok():
            self._logger.info("Building deleted", building_id=building_id)
        return deleted

    # Этажи

    def list_floors(self) -> Result[List[Floor], DomainException]:
        return self._floors.find_all()

    def list_floors_by_building(
        self, building_id: EntityId
    ) -> Result[List[Floor], DomainException]:
        return self._floors.find_by_building_id(building_id)

    def get_floor(self, floor_id: EntityId) -> Result[Floor, DomainException]:
        return require_found(self._floors.find_by_id(floor_id), "Floor not found")

    def create_floor(
        self,
        actor: Optional[Actor],
        building_id: EntityId,
        name: str,
        floor_number: Optional[int] = None,
    ) -> Result[Floor, DomainException]:
        return self._save_floor(
            actor, self._new_id(), name, building_id, floor_number, is_new=True
        )

    def update_floor(
        self,
        actor: Optional[Actor],
        floor_id: EntityId,
        name: str,
        building_id: EntityId,
        floor_number: Optional[int] = None,
    ) -> Result[Floor, DomainException]:
        return self._save_floor(
            actor, floor_id, name, building_id, floor_number, is_new=False
        )

    def _save_floor(
        self,
        actor: Optional[Actor],
        floor_id: EntityId,
        name: str,
        building_id: EntityId,
        floor_number: Optional[int],
        is_new: bool,
    ) -> Result[Floor, DomainException]:
        if actor is None:
            return require_actor(actor)
        floor = create_floor(floor_id, name, building_id, floor_number)
        if floor.is_err():
            return floor
        allowed = self._authorize(actor)
        if allowed.is_err():
            return allowed

        if not is_new:
            existing = self.get_floor(floor_id)
            if existing.is_err():
                return existing
        building = self.get_building(building_id)
        if building.is_err():
            return building
        saved = self._floors.save(floor.value)
        if saved.is_ok():
            self._logger.info("Floor saved", floor_id=floor_id, building_id=building_id)
        return saved

    def delete_floor(
        self, actor: Optional[Actor], floor_id: EntityId
    ) -> Result[None, DomainException]:
        allowed = self._authorize(actor)
        if allowed.is_err():
            return allowed
        existing = self.get_floor(floor_id)
        if existing.is_err():
            return existing
        return self._floors.delete(floor_id)

    # Помещения

    def list_rooms(self) -> Result[List[Room], DomainException]:
        return self._rooms.find_all()

    def list_rooms_by_floor(self, floor_id: EntityId) -> Result[List[Room], DomainException]:
        return self._rooms.find_by_floor_id(floor_id)

    def get_room(self, room_id: EntityId) -> Result[Room, DomainException]:
        return require_found(self._rooms.find_by_id(room_id), "Room not found")

    def create_room(
        self,
        actor: Optional[Actor],
        floor_id: EntityId,
        name: str,
        capacity: Optional[int] = None,
    ) -> Result[Room, DomainException]:
        return self._save_room(
            actor, self._new_id(), name, floor_id, capacity, is_new=True
        )

    def update_room(
        self,
        actor: Optional[Actor],
        room_id: EntityId,
        name: str,
        floor_id: EntityId,
        capacity: Optional[int] = None,
    ) -> Result[Room, DomainException]:
        return self._save_room(actor, room_id, name, floor_id, capacity, is_new=False)

    def _save_room(
        self,
        actor: Optional[Actor],
        room_id: EntityId,
        name: str,
        floor_id: EntityId,
        capacity: Optional[int],
        is_new: bool,
    ) -> Result[Room, DomainException]:
        if actor is None:
            return require_actor(actor)
        room = create_room(room_id, name, floor_id, capacity)
        if room.is_err():
            return room
        allowed = self._authorize(actor)
        if allowed.is_err():
            return allowed

        if not is_new:
            existing = self.get_room(room_id)
            if existing.is_err():
                return existing
        floor = self.get_floor(floor_id)
        if floor.is_err():
            return floor
        saved = self._rooms.save(room.value)
        if saved.is_ok():
            self._logger.info("Room saved", room_id=room_id, floor_id=floor_id)
        return saved

    def delete_room(
        self, actor: Optional[Actor], room_id: EntityId
    ) -> Result[None, DomainException]:
        allowed = self._authorize(actor)
        if allowed.is_err():
            return allowed
        existing = self.get_room(room_id)
        if existing.is_err():
            return existing
        return self._rooms.delete(room_id)

"""
Здания, этажи и помещения.

Иерархия размещения оборудования: Building -> Floor -> Room.
Связи хранятся только по идентификаторам.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from ..shared_kernel import Err, Ok, Result, ValidationException
from .validators import (
    EntityIdStr,
    NonEmptyStr,
    is_non_empty_string,
    is_optional_int,
    is_optional_text,
    is_valid_entity_id,
)


class BuildingError(ValidationException):
    pass


class FloorError(ValidationException):
    pass


class RoomError(ValidationException):
    pass


class Building(BaseModel):
    """Здание."""

    model_config = ConfigDict(frozen=True)

    id: EntityIdStr
    name: NonEmptyStr
    address: Optional[str] = None

    def with_changes(self, **changes: Any) -> "Result[Building, BuildingError]":
        """Новая версия здания с тем же id; инварианты проверяются заново."""
        return create_building(**{**self.model_dump(), **changes})


class Floor(BaseModel):
    """Этаж здания. Номер этажа может быть нулевым или отрицательным."""

    model_config = ConfigDict(frozen=True)

    id: EntityIdStr
    name: NonEmptyStr
    building_id: EntityIdStr
    floor_number: Optional[int] = None

    def with_changes(self, **changes: Any) -> "Result[Floor, FloorError]":
        return create_floor(**{**self.model_dump(), **changes})


class Room(BaseModel):
    """Помещение на этаже."""

    model_config = ConfigDict(frozen=True)

    id: EntityIdStr
    name: NonEmptyStr
    floor_id: EntityIdStr
    capacity: Optional[int] = None

    def with_changes(self, **changes: Any) -> "Result[Room, RoomError]":
        return create_room(**{**self.model_dump(), **changes})


def create_building(
    id: str, name: str, address: Optional[str] = None
) -> Result[Building, BuildingError]:
    if not is_valid_entity_id(id):
        return Err(BuildingError("Invalid Building ID", field="id"))
    if not is_non_empty_string(name):
        return Err(BuildingError("Invalid Building Name", field="name"))
    if not is_optional_text(address):
        return Err(BuildingError("Invalid Address", field="address"))

    return Ok(Building(id=id, name=name, address=address))


def create_floor(
    id: str, name: str, building_id: str, floor_number: Optional[int] = None
) -> Result[Floor, FloorError]:
    if not is_valid_entity_id(id):
        return Err(FloorError("Invalid Floor ID", field="id"))
    if not is_non_empty_string(name):
        return Err(FloorError("Invalid Floor Name", field="name"))
    if not is_valid_entity_id(building_id):
        return Err(FloorError("Invalid Building ID", field="building_id"))
    if not is_optional_int(floor_number):
        return Err(FloorError("Invalid Floor Number", field="floor_number"))

    return Ok(
        Floor(id=id, name=name, building_id=building_id, floor_number=floor_number)
    )


def create_room(
    id: str, name: str, floor_id: str, capacity: Optional[int] = None
) -> Result[Room, RoomError]:
    if not is_valid_entity_id(id):
        return Err(RoomError("Invalid Room ID", field="id"))
    if not is_non_empty_string(name):
        return Err(RoomError("Invalid Room Name", field="name"))
    if not is_valid_entity_id(floor_id):
        return Err(RoomError("Invalid Floor ID", field="floor_id"))
    if not is_optional_int(capacity):
        return Err(RoomError("Invalid Capacity", field="capacity"))

    return Ok(Room(id=id, name=name, floor_id=floor_id, capacity=capacity))

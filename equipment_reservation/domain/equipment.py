"""
Оборудование и категории оборудования.
"""

from datetime import date
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..shared_kernel import Err, Ok, Result, ValidationException
from .validators import (
    EntityIdStr,
    NonEmptyStr,
    is_non_empty_string,
    is_optional_text,
    is_valid_entity_id,
    parse_date,
    parse_enum,
)


class RunningState(str, Enum):
    """Эксплуатационное состояние оборудования."""

    OPERATIONAL = "OPERATIONAL"
    MAINTENANCE = "MAINTENANCE"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    RETIRED = "RETIRED"


class EquipmentError(ValidationException):
    pass


class EquipmentCategoryError(ValidationException):
    pass


class Equipment(BaseModel):
    """
    Единица оборудования.

    Администратор и заместители администратора получают права на управление
    именно этим оборудованием независимо от глобальной роли.
    """

    model_config = ConfigDict(frozen=True)

    id: EntityIdStr
    name: NonEmptyStr
    description: Optional[str] = None
    category_major: Optional[str] = None
    category_minor: Optional[str] = None
    room_id: Optional[EntityIdStr] = None
    running_state: RunningState = RunningState.OPERATIONAL
    installation_date: Optional[date] = None
    administrator_id: Optional[EntityIdStr] = None
    vice_administrator_ids: Tuple[EntityIdStr, ...] = ()

    def is_managed_by(self, user_id: str) -> bool:
        """Пользователь - администратор или заместитель администратора."""
        return user_id == self.administrator_id or user_id in self.vice_administrator_ids

    def with_changes(self, **changes: Any) -> "Result[Equipment, EquipmentError]":
        return create_equipment(**{**self.model_dump(), **changes})


class EquipmentCategory(BaseModel):
    """Категория оборудования. Пара (major, minor) уникальна в хранилище."""

    model_config = ConfigDict(frozen=True)

    id: EntityIdStr
    category_major: NonEmptyStr
    category_minor: NonEmptyStr


def create_equipment(
    id: str,
    name: str,
    description: Optional[str] = None,
    category_major: Optional[str] = None,
    category_minor: Optional[str] = None,
    room_id: Optional[str] = None,
    running_state: Any = RunningState.OPERATIONAL,
    installation_date: Optional[date] = None,
    administrator_id: Optional[str] = None,
    vice_administrator_ids: Iterable[str] = (),
) -> Result[Equipment, EquipmentError]:
    if not is_valid_entity_id(id):
        return Err(EquipmentError("Invalid Equipment ID", field="id"))
    if not is_non_empty_string(name):
        return Err(EquipmentError("Invalid Equipment Name", field="name"))

    for field_name, value in (
        ("description", description),
        ("category_major", category_major),
        ("category_minor", category_minor),
    ):
        if not is_optional_text(value):
            return Err(EquipmentError(f"Invalid {_label(field_name)}", field=field_name))

    if room_id is not None and not is_valid_entity_id(room_id):
        return Err(EquipmentError("Invalid Room ID", field="room_id"))

    state = parse_enum(RunningState, running_state)
    if state is None:
        return Err(EquipmentError("Invalid Running State", field="running_state"))

    installed = None
    if installation_date is not None:
        installed = parse_date(installation_date)
        if installed is None:
            return Err(
                EquipmentError("Invalid Installation Date", field="installation_date")
            )

    if administrator_id is not None and not is_valid_entity_id(administrator_id):
        return Err(EquipmentError("Invalid Administrator ID", field="administrator_id"))

    # Первый некорректный элемент прерывает создание
    if vice_administrator_ids is None:
        vice_administrator_ids = ()
    elif isinstance(vice_administrator_ids, str):
        vice_administrator_ids = (vice_administrator_ids,)
    vice_ids = []
    for vice_id in vice_administrator_ids:
        if not is_valid_entity_id(vice_id):
            return Err(
                EquipmentError(
                    "Invalid Vice Administrator ID", field="vice_administrator_ids"
                )
            )
        vice_ids.append(vice_id)

    return Ok(
        Equipment(
            id=id,
            name=name,
            description=description,
            category_major=category_major,
            category_minor=category_minor,
            room_id=room_id,
            running_state=state,
            installation_date=installed,
            administrator_id=administrator_id,
            vice_administrator_ids=tuple(vice_ids),
        )
    )


def create_equipment_category(
    id: str, category_major: str, category_minor: str
) -> Result[EquipmentCategory, EquipmentCategoryError]:
    if not is_valid_entity_id(id):
        return Err(EquipmentCategoryError("Invalid Category ID", field="id"))
    if not is_non_empty_string(category_major):
        return Err(
            EquipmentCategoryError("Invalid Category Major", field="category_major")
        )
    if not is_non_empty_string(category_minor):
        return Err(
            EquipmentCategoryError("Invalid Category Minor", field="category_minor")
        )

    return Ok(
        EquipmentCategory(
            id=id, category_major=category_major, category_minor=category_minor
        )
    )


def _label(field_name: str) -> str:
    return field_name.replace("_", " ").title()

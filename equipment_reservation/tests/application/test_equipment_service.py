import uuid

import pytest

from equipment_reservation.domain import Actor, RunningState, UserRole
from equipment_reservation.shared_kernel import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
)


@pytest.fixture
def managers(user_service):
    """Администратор и заместитель администратора оборудования (роль GENERAL)."""
    user_service.register_user("first@example.com", "hash")  # станет ADMIN
    administrator = user_service.register_user(
        "manager@example.com", "hash", "Смирнов"
    ).unwrap()
    vice = user_service.register_user("vice@example.com", "hash", "Кузнецова").unwrap()
    return administrator, vice


@pytest.fixture
def managed_equipment(equipment_service, admin, managers):
    administrator, vice = managers
    return equipment_service.create_equipment(
        admin,
        "Электронный микроскоп",
        administrator_id=administrator.id,
        vice_administrator_ids=[vice.id],
    ).unwrap()


def test_editor_creates_equipment(equipment_service, editor):
    equipment = equipment_service.create_equipment(
        editor, "Центрифуга", description="", running_state="MAINTENANCE"
    ).unwrap()

    assert equipment.description is None
    assert equipment.running_state is RunningState.MAINTENANCE
    assert equipment_service.list_equipment().unwrap() == [equipment]


def test_general_cannot_create_equipment(equipment_service, general):
    result = equipment_service.create_equipment(general, "Центрифуга")
    assert isinstance(result.unwrap_err(), ForbiddenException)


def test_equipment_room_must_exist(equipment_service, admin):
    error = equipment_service.create_equipment(
        admin, "Центрифуга", room_id=str(uuid.uuid4())
    ).unwrap_err()
    assert error == NotFoundException("Room not found")


def test_update_preserves_management(equipment_service, editor, managed_equipment):
    updated = equipment_service.update_equipment(
        editor, managed_equipment.id, "Микроскоп JEOL", running_state="OUT_OF_SERVICE"
    ).unwrap()

    assert updated.name == "Микроскоп JEOL"
    assert updated.running_state is RunningState.OUT_OF_SERVICE
    assert updated.administrator_id == managed_equipment.administrator_id
    assert updated.vice_administrator_ids == managed_equipment.vice_administrator_ids


def test_vice_administrator_updates_management(
    equipment_service, managers, managed_equipment
):
    """Заместитель администратора может переназначить управляющих оборудованием."""
    administrator, vice = managers
    vice_actor = Actor(id=vice.id, role=UserRole.GENERAL)
    new_vice = str(uuid.uuid4())

    updated = equipment_service.update_equipment_management(
        vice_actor, managed_equipment.id, administrator.id, [vice.id, new_vice]
    ).unwrap()

    assert updated.vice_administrator_ids == (vice.id, new_vice)


def test_stranger_cannot_update_management(
    equipment_service, general, managed_equipment
):
    result = equipment_service.update_equipment_management(
        general, managed_equipment.id, general.id
    )
    assert isinstance(result.unwrap_err(), ForbiddenException)


def test_management_update_validates_vice_ids(equipment_service, admin, equipment):
    error = equipment_service.update_equipment_management(
        admin, equipment.id, None, ["bad"]
    ).unwrap_err()
    assert error.message == "Invalid Vice Administrator ID"


def test_equipment_view_with_location(
    equipment_service, building_service, admin, managers
):
    building = building_service.create_building(admin, "Корпус А").unwrap()
    floor = building_service.create_floor(admin, building.id, "3 этаж").unwrap()
    room = building_service.create_room(admin, floor.id, "305").unwrap()
    administrator, vice = managers
    equipment = equipment_service.create_equipment(
        admin,
        "Хроматограф",
        room_id=room.id,
        administrator_id=administrator.id,
        vice_administrator_ids=[vice.id],
    ).unwrap()

    view = equipment_service.get_equipment_view(equipment.id).unwrap()

    assert view.location.building_name == "Корпус А"
    assert view.location.room_name == "305"
    assert view.administrator.name == "Смирнов"
    assert [user.name for user in view.vice_administrators] == ["Кузнецова"]
    assert equipment_service.list_equipment_by_room(room.id).unwrap() == [equipment]


def test_delete_equipment(equipment_service, admin, general, equipment):
    assert isinstance(
        equipment_service.delete_equipment(general, equipment.id).unwrap_err(),
        ForbiddenException,
    )
    assert equipment_service.delete_equipment(admin, equipment.id).is_ok()
    assert equipment_service.get_equipment(equipment.id).unwrap_err() == (
        NotFoundException("Equipment not found")
    )


# Категории


def test_category_pair_is_unique(equipment_service, editor):
    equipment_service.create_category(editor, "Оптика", "Микроскопы").unwrap()

    error = equipment_service.create_category(editor, "Оптика", "Микроскопы")
    assert error.unwrap_err() == ConflictException("Category already exists")
    assert equipment_service.create_category(editor, "Оптика", "Лазеры").is_ok()


def test_delete_category(equipment_service, admin, general):
    category = equipment_service.create_category(admin, "Химия", "Весы").unwrap()

    assert isinstance(
        equipment_service.delete_category(general, category.id).unwrap_err(),
        ForbiddenException,
    )
    assert equipment_service.delete_category(admin, category.id).is_ok()
    assert equipment_service.list_categories().unwrap() == []

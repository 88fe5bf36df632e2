import uuid
from datetime import datetime, timezone

import pytest

from equipment_reservation.domain import (
    Actor,
    PermissionService,
    UserRole,
    create_equipment,
    create_equipment_comment,
    create_reservation,
)


def new_id() -> str:
    return str(uuid.uuid4())


ADMINISTRATOR_ID = new_id()
VICE_ID = new_id()
OWNER_ID = new_id()

EQUIPMENT = create_equipment(
    new_id(),
    "Микроскоп",
    administrator_id=ADMINISTRATOR_ID,
    vice_administrator_ids=[VICE_ID],
).unwrap()

RESERVATION = create_reservation(
    new_id(),
    datetime(2025, 6, 2, 9, tzinfo=timezone.utc),
    datetime(2025, 6, 2, 10, tzinfo=timezone.utc),
    OWNER_ID,
    EQUIPMENT.id,
).unwrap()


def actor(role: UserRole, actor_id: str = None) -> Actor:
    return Actor(id=actor_id or new_id(), role=role)


@pytest.mark.parametrize(
    "role, expected",
    [(UserRole.ADMIN, True), (UserRole.EDITOR, False), (UserRole.GENERAL, False)],
)
def test_can_manage_buildings(role, expected):
    assert PermissionService.can_manage_buildings(actor(role)) is expected


@pytest.mark.parametrize(
    "role, expected",
    [(UserRole.ADMIN, True), (UserRole.EDITOR, True), (UserRole.GENERAL, False)],
)
def test_can_manage_equipment(role, expected):
    assert PermissionService.can_manage_equipment(actor(role)) is expected


@pytest.mark.parametrize(
    "participant, expected",
    [
        (Actor(id=new_id(), role=UserRole.ADMIN), True),
        (Actor(id=new_id(), role=UserRole.EDITOR), True),
        (Actor(id=ADMINISTRATOR_ID, role=UserRole.GENERAL), True),
        (Actor(id=VICE_ID, role=UserRole.GENERAL), True),
        (Actor(id=new_id(), role=UserRole.GENERAL), False),
    ],
)
def test_can_edit_equipment_management(participant, expected):
    """Администраторы оборудования управляют им независимо от глобальной роли."""
    assert PermissionService.can_edit_equipment_management(participant, EQUIPMENT) is (
        expected
    )


def test_can_manage_reservations():
    owner = actor(UserRole.GENERAL, OWNER_ID)
    stranger = actor(UserRole.GENERAL)

    assert PermissionService.can_manage_reservations(owner, RESERVATION)
    assert not PermissionService.can_manage_reservations(stranger, RESERVATION)
    assert PermissionService.can_manage_reservations(actor(UserRole.EDITOR), RESERVATION)
    # Без конкретной брони разрешено любому участнику
    assert PermissionService.can_manage_reservations(stranger)


def test_can_delete_reservation():
    assert PermissionService.can_delete_reservation(
        actor(UserRole.GENERAL, OWNER_ID), RESERVATION
    )
    assert PermissionService.can_delete_reservation(actor(UserRole.ADMIN), RESERVATION)
    assert not PermissionService.can_delete_reservation(
        actor(UserRole.GENERAL), RESERVATION
    )


def test_everyone_may_reserve_and_comment():
    assert PermissionService.can_reserve()
    assert PermissionService.can_comment()


def test_can_delete_comment():
    author = actor(UserRole.GENERAL)
    comment = create_equipment_comment(
        new_id(), EQUIPMENT.id, author.id, "Текст", datetime.now(timezone.utc)
    ).unwrap()

    assert PermissionService.can_delete_comment(author, comment)
    assert PermissionService.can_delete_comment(actor(UserRole.ADMIN), comment)
    assert not PermissionService.can_delete_comment(actor(UserRole.EDITOR), comment)


def test_only_admin_manages_users_and_settings():
    for role in (UserRole.EDITOR, UserRole.GENERAL):
        assert not PermissionService.can_manage_users(actor(role))
        assert not PermissionService.can_manage_settings(actor(role))
    assert PermissionService.can_manage_users(actor(UserRole.ADMIN))
    assert PermissionService.can_manage_settings(actor(UserRole.ADMIN))

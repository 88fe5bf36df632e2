import uuid
from datetime import datetime, timedelta, timezone

import pytest

from equipment_reservation.application import (
    CONFLICT_MESSAGE,
    ReservationApplicationService,
    ReservationConflictDetector,
)
from equipment_reservation.domain import Actor
from equipment_reservation.shared_kernel import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    Ok,
    UnauthorizedException,
    ValidationException,
)

UTC = timezone.utc
NINE = datetime(2025, 6, 2, 9, 0, tzinfo=UTC)
TEN = NINE + timedelta(hours=1)
ELEVEN = NINE + timedelta(hours=2)
NOON = NINE + timedelta(hours=3)


def test_booking_success(reservation_service, equipment, general):
    """Свободное окно бронируется от имени участника."""
    result = reservation_service.create_reservation(
        general, equipment.id, NINE, TEN, comment="Съёмка образцов"
    )

    reservation = result.unwrap()
    assert reservation.user_id == general.id
    assert reservation.equipment_id == equipment.id
    assert reservation_service.get_reservation(reservation.id).unwrap() == reservation


def test_booking_conflict(reservation_service, equipment, general, other_general):
    reservation_service.create_reservation(general, equipment.id, NINE, ELEVEN).unwrap()

    result = reservation_service.create_reservation(
        other_general, equipment.id, TEN, NOON
    )

    assert result.is_err()
    assert result.unwrap_err() == ConflictException(CONFLICT_MESSAGE)


def test_identical_window_conflicts(reservation_service, equipment, general):
    reservation_service.create_reservation(general, equipment.id, NINE, TEN).unwrap()

    error = reservation_service.create_reservation(
        general, equipment.id, NINE, TEN
    ).unwrap_err()
    assert error.message == "Time slot already reserved"


def test_adjacent_bookings_are_allowed(reservation_service, equipment, general):
    reservation_service.create_reservation(general, equipment.id, NINE, TEN).unwrap()

    assert reservation_service.create_reservation(
        general, equipment.id, TEN, ELEVEN
    ).is_ok()


def test_other_equipment_does_not_conflict(
    reservation_service, equipment_service, equipment, admin, general
):
    second = equipment_service.create_equipment(admin, "Второй микроскоп").unwrap()
    reservation_service.create_reservation(general, equipment.id, NINE, TEN).unwrap()

    assert reservation_service.create_reservation(general, second.id, NINE, TEN).is_ok()


def test_inverted_window_is_rejected(reservation_service, equipment, general, logger):
    error = reservation_service.create_reservation(
        general, equipment.id, TEN, NINE
    ).unwrap_err()

    assert isinstance(error, ValidationException)
    assert error.message == "Start time must be before end time"
    assert "Reservation saved" not in logger.messages("info")


def test_unauthenticated_booking(reservation_service, equipment):
    error = reservation_service.create_reservation(
        None, equipment.id, NINE, TEN
    ).unwrap_err()
    assert isinstance(error, UnauthorizedException)


def test_booking_unknown_equipment(reservation_service, general):
    error = reservation_service.create_reservation(
        general, str(uuid.uuid4()), NINE, TEN
    ).unwrap_err()
    assert error == NotFoundException("Equipment not found")


def test_local_time_is_converted_with_system_timezone(repos, logger, equipment, general):
    service = ReservationApplicationService(
        repos["reservations"],
        repos["equipment"],
        repos["users"],
        logger,
        timezone_provider=lambda: "Asia/Tokyo",
    )

    reservation = service.create_reservation(
        general, equipment.id, "2025-06-02T09:00", "2025-06-02T10:00"
    ).unwrap()

    assert reservation.start_time == datetime(2025, 6, 2, 0, 0, tzinfo=UTC)
    assert reservation.end_time == datetime(2025, 6, 2, 1, 0, tzinfo=UTC)


def test_unparseable_time_string(reservation_service, equipment, general):
    error = reservation_service.create_reservation(
        general, equipment.id, "2025-06-02T09:00", "позже"
    ).unwrap_err()
    assert error.message == "Invalid End Time"


# Изменение и удаление


def test_update_does_not_conflict_with_itself(reservation_service, equipment, general):
    """Перенос брони внутри собственного окна не считается пересечением."""
    reservation = reservation_service.create_reservation(
        general, equipment.id, NINE, ELEVEN
    ).unwrap()

    moved = reservation_service.update_reservation(
        general, reservation.id, TEN, NOON
    ).unwrap()

    assert moved.id == reservation.id
    assert moved.start_time == TEN
    assert moved.end_time == NOON


def test_update_keeps_original_owner(reservation_service, equipment, general, editor):
    reservation = reservation_service.create_reservation(
        general, equipment.id, NINE, TEN
    ).unwrap()

    moved = reservation_service.update_reservation(
        editor, reservation.id, TEN, ELEVEN
    ).unwrap()
    assert moved.user_id == general.id


def test_update_conflicts_with_other_reservation(
    reservation_service, equipment, general, other_general
):
    reservation_service.create_reservation(general, equipment.id, NINE, TEN).unwrap()
    other = reservation_service.create_reservation(
        other_general, equipment.id, ELEVEN, NOON
    ).unwrap()

    error = reservation_service.update_reservation(
        other_general, other.id, NINE + timedelta(minutes=30), NOON
    ).unwrap_err()
    assert error == ConflictException(CONFLICT_MESSAGE)


def test_stranger_cannot_update_or_delete(
    reservation_service, equipment, general, other_general
):
    reservation = reservation_service.create_reservation(
        general, equipment.id, NINE, TEN
    ).unwrap()

    update = reservation_service.update_reservation(
        other_general, reservation.id, TEN, ELEVEN
    )
    delete = reservation_service.delete_reservation(other_general, reservation.id)

    assert isinstance(update.unwrap_err(), ForbiddenException)
    assert isinstance(delete.unwrap_err(), ForbiddenException)
    assert reservation_service.get_reservation(reservation.id).is_ok()


def test_owner_deletes_reservation(reservation_service, equipment, general):
    reservation = reservation_service.create_reservation(
        general, equipment.id, NINE, TEN
    ).unwrap()

    assert reservation_service.delete_reservation(general, reservation.id) == Ok(None)
    error = reservation_service.get_reservation(reservation.id).unwrap_err()
    assert error == NotFoundException("Reservation not found")


def test_update_missing_reservation(reservation_service, general):
    error = reservation_service.update_reservation(
        general, str(uuid.uuid4()), NINE, TEN
    ).unwrap_err()
    assert error.message == "Reservation not found"


# Запросы


def test_list_reservations_includes_booker_and_equipment(
    reservation_service, user_service, equipment
):
    user = user_service.register_user("booker@example.com", "hash", "Петров").unwrap()
    reservation_service.create_reservation(
        Actor.from_user(user), equipment.id, NINE, TEN
    ).unwrap()

    views = reservation_service.list_reservations().unwrap()
    assert len(views) == 1
    assert views[0].booker.name == "Петров"
    assert views[0].equipment.name == equipment.name


def test_list_equipment_reservations_window(reservation_service, equipment, general):
    reservation_service.create_reservation(general, equipment.id, NINE, TEN).unwrap()
    reservation_service.create_reservation(general, equipment.id, ELEVEN, NOON).unwrap()

    views = reservation_service.list_equipment_reservations(
        equipment.id, NINE, ELEVEN
    ).unwrap()
    assert [view.start_time for view in views] == [NINE]


def test_list_user_reservations_newest_first(reservation_service, equipment, general):
    reservation_service.create_reservation(general, equipment.id, NINE, TEN).unwrap()
    reservation_service.create_reservation(general, equipment.id, ELEVEN, NOON).unwrap()

    views = reservation_service.list_user_reservations(general).unwrap()
    assert [view.start_time for view in views] == [ELEVEN, NINE]


# Детектор пересечений


class _WideRangeRepository:
    """Репозиторий, возвращающий все брони без фильтрации по окну."""

    def __init__(self, reservations):
        self.reservations = reservations

    def find_by_equipment_and_date_range(self, equipment_id, start_time, end_time):
        return Ok(list(self.reservations))


def test_detector_reapplies_half_open_rule(reservation_service, equipment, general):
    booked = reservation_service.create_reservation(
        general, equipment.id, NINE, TEN
    ).unwrap()
    detector = ReservationConflictDetector(_WideRangeRepository([booked]))

    assert detector.find_conflicts(equipment.id, TEN, ELEVEN).unwrap() == []
    assert detector.find_conflicts(equipment.id, NINE, TEN).unwrap() == [booked]
    assert (
        detector.find_conflicts(
            equipment.id, NINE, TEN, exclude_reservation_id=booked.id
        ).unwrap()
        == []
    )
    assert detector.is_available(str(uuid.uuid4()), NINE, TEN).unwrap() is True


@pytest.mark.parametrize("start_offset, expected", [(0, False), (60, True)])
def test_detector_is_available(
    reservation_service, equipment, general, start_offset, expected
):
    reservation_service.create_reservation(general, equipment.id, NINE, TEN).unwrap()
    start = NINE + timedelta(minutes=start_offset)

    available = reservation_service.conflict_detector.is_available(
        equipment.id, start, start + timedelta(minutes=30)
    )
    assert available.unwrap() is expected


def test_detector_ensure_available(reservation_service, equipment, general):
    booked = reservation_service.create_reservation(
        general, equipment.id, NINE, TEN
    ).unwrap()
    detector = reservation_service.conflict_detector

    error = detector.ensure_available(equipment.id, NINE, TEN).unwrap_err()
    assert error == ConflictException(CONFLICT_MESSAGE)
    assert detector.ensure_available(
        equipment.id, NINE, TEN, exclude_reservation_id=booked.id
    ).is_ok()

import threading
import uuid
from datetime import datetime, timedelta, timezone

from equipment_reservation.domain import (
    UserRole,
    create_equipment_category,
    create_reservation,
    create_user,
)
from equipment_reservation.infrastructure import InMemoryReservationRepository
from equipment_reservation.shared_kernel import ConflictException, InfrastructureException

UTC = timezone.utc
NINE = datetime(2025, 6, 2, 9, 0, tzinfo=UTC)


def new_id() -> str:
    return str(uuid.uuid4())


def reservation(equipment_id, start, end, user_id=None, reservation_id=None):
    return create_reservation(
        reservation_id or new_id(), start, end, user_id or new_id(), equipment_id
    ).unwrap()


def test_storage_rejects_overlapping_reservation(repos):
    """Хранилище само запрещает пересечение броней одного оборудования."""
    reservations = repos["reservations"]
    equipment_id = new_id()
    reservations.save(reservation(equipment_id, NINE, NINE + timedelta(hours=2))).unwrap()

    result = reservations.save(
        reservation(equipment_id, NINE + timedelta(hours=1), NINE + timedelta(hours=3))
    )

    assert result.unwrap_err() == ConflictException("Time slot already reserved")
    assert len(reservations.find_all().unwrap()) == 1


def test_storage_allows_resaving_same_reservation(repos):
    reservations = repos["reservations"]
    booked = reservation(new_id(), NINE, NINE + timedelta(hours=1))
    reservations.save(booked).unwrap()

    moved = booked.with_changes(end_time=NINE + timedelta(hours=2)).unwrap()
    assert reservations.save(moved).is_ok()


def test_concurrent_saves_keep_at_most_one_booking(repos):
    """Параллельные сохранения одного окна: успешно только одно."""
    reservations = repos["reservations"]
    equipment_id = new_id()
    results = []
    barrier = threading.Barrier(8)

    def book():
        barrier.wait()
        results.append(
            reservations.save(reservation(equipment_id, NINE, NINE + timedelta(hours=1)))
        )

    threads = [threading.Thread(target=book) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sum(result.is_ok() for result in results) == 1
    assert len(reservations.find_all().unwrap()) == 1


def test_find_by_equipment_and_date_range(repos):
    reservations = repos["reservations"]
    equipment_id = new_id()
    early = reservation(equipment_id, NINE, NINE + timedelta(hours=1))
    late = reservation(equipment_id, NINE + timedelta(hours=3), NINE + timedelta(hours=4))
    for item in (early, late):
        reservations.save(item).unwrap()

    found = reservations.find_by_equipment_and_date_range(
        equipment_id, NINE + timedelta(hours=1), NINE + timedelta(hours=3)
    ).unwrap()
    assert found == []

    found = reservations.find_by_equipment_and_date_range(
        equipment_id, NINE + timedelta(minutes=30), NINE + timedelta(hours=5)
    ).unwrap()
    assert {item.id for item in found} == {early.id, late.id}


def test_recently_used_equipment_is_distinct_and_newest_first(repos):
    reservations = repos["reservations"]
    user_id = new_id()
    first, second = new_id(), new_id()
    day = timedelta(days=1)
    hour = timedelta(hours=1)
    for equipment_id, start in (
        (first, NINE - 3 * day),
        (second, NINE - 2 * day),
        (first, NINE - day),
        (second, NINE + day),
    ):
        reservations.save(reservation(equipment_id, start, start + hour, user_id)).unwrap()

    recent = reservations.find_recently_used_equipment_by_user_id(
        user_id, 5, now=NINE
    ).unwrap()
    assert recent == [first, second]
    assert reservations.find_recently_used_equipment_by_user_id(
        user_id, 1, now=NINE
    ).unwrap() == [first]


def test_category_pair_unique_in_storage(repos):
    categories = repos["categories"]
    categories.save(create_equipment_category(new_id(), "Оптика", "Лазеры").unwrap())

    duplicate = categories.save(
        create_equipment_category(new_id(), "Оптика", "Лазеры").unwrap()
    )
    assert isinstance(duplicate.unwrap_err(), ConflictException)
    assert categories.find_by_major_minor("Оптика", "Лазеры").unwrap() is not None


def test_first_saved_user_is_admin(repos):
    users = repos["users"]
    first = users.save(create_user(new_id(), "a@example.com", "h").unwrap()).unwrap()
    second = users.save(create_user(new_id(), "b@example.com", "h").unwrap()).unwrap()

    assert first.role is UserRole.ADMIN
    assert users.find_by_id(first.id).unwrap().role is UserRole.ADMIN
    assert second.role is UserRole.GENERAL


def test_soft_deleted_user_is_hidden_but_email_stays_taken(repos):
    users = repos["users"]
    user = users.save(create_user(new_id(), "gone@example.com", "h").unwrap()).unwrap()

    users.soft_delete(user.id).unwrap()

    assert users.find_by_id(user.id).unwrap() is None
    assert users.find_by_email("gone@example.com").unwrap() is None
    assert users.find_all().unwrap() == []
    again = users.save(create_user(new_id(), "gone@example.com", "h").unwrap())
    assert isinstance(again.unwrap_err(), ConflictException)


def test_email_lookup_is_case_insensitive(repos):
    users = repos["users"]
    user = users.save(create_user(new_id(), "Mixed@Example.com", "h").unwrap()).unwrap()
    assert users.find_by_email("mixed@example.com").unwrap() == user


def test_favorites_are_unique(repos):
    users = repos["users"]
    user_id, equipment_id = new_id(), new_id()

    users.add_favorite(user_id, equipment_id).unwrap()
    users.add_favorite(user_id, equipment_id).unwrap()
    assert users.get_favorites(user_id).unwrap() == [equipment_id]

    users.remove_favorite(user_id, equipment_id).unwrap()
    assert users.get_favorites(user_id).unwrap() == []


class _ExplodingStore:
    """Хранилище, в котором недоступна таблица броней."""

    lock = threading.RLock()

    @property
    def reservations(self):
        raise RuntimeError("disk unavailable")


def test_unexpected_failure_becomes_infrastructure_error(logger):
    repository = InMemoryReservationRepository(_ExplodingStore(), logger)

    error = repository.find_all().unwrap_err()

    assert isinstance(error, InfrastructureException)
    assert "disk unavailable" in error.message
    assert "Repository operation failed" in logger.messages("error")

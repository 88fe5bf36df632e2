"""
Реализации репозиториев в памяти.

Все репозитории работают поверх общего хранилища ``InMemoryStore``.
Ограничения, которые в базе данных задаются схемой (уникальность email,
уникальность пары категорий, запрет пересечения броней), проверяются
здесь под одной блокировкой вместе с записью.
"""

import threading
from datetime import datetime
from functools import wraps
from typing import Dict, Generic, List, Optional, Set, TypeVar

from ..application.conflicts import CONFLICT_MESSAGE
from ..application.interfaces import ILogger
from ..application.repositories import (
    BuildingRepository,
    EquipmentCategoryRepository,
    EquipmentCommentRepository,
    EquipmentRepository,
    FloorRepository,
    MaintenanceRecordRepository,
    ReservationRepository,
    RoomRepository,
    SystemSettingsRepository,
    UserRepository,
)
from ..domain import (
    Building,
    Equipment,
    EquipmentCategory,
    EquipmentComment,
    Floor,
    MaintenanceRecord,
    Reservation,
    Room,
    SystemSetting,
    User,
    UserRole,
)
from ..shared_kernel import (
    ConflictException,
    EntityId,
    Err,
    InfrastructureException,
    NotFoundException,
    Ok,
    ensure_utc,
    now as utc_now,
)

T = TypeVar("T")


class InMemoryStore:
    """Общее хранилище данных всех репозиториев."""

    def __init__(self):
        self.lock = threading.RLock()
        self.buildings: Dict[EntityId, Building] = {}
        self.floors: Dict[EntityId, Floor] = {}
        self.rooms: Dict[EntityId, Room] = {}
        self.equipment: Dict[EntityId, Equipment] = {}
        self.categories: Dict[EntityId, EquipmentCategory] = {}
        self.reservations: Dict[EntityId, Reservation] = {}
        self.maintenance_records: Dict[EntityId, MaintenanceRecord] = {}
        self.comments: Dict[EntityId, EquipmentComment] = {}
        self.users: Dict[EntityId, User] = {}
        self.deleted_user_ids: Set[EntityId] = set()
        self.favorites: Dict[EntityId, List[EntityId]] = {}
        self.settings: Dict[str, SystemSetting] = {}


def _guarded(method):
    """Неожиданный сбой хранилища превращается в Err(InfrastructureException)."""

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except Exception as exc:
            self._logger.error(
                "Repository operation failed",
                operation=method.__qualname__,
                error=repr(exc),
            )
            return Err(InfrastructureException(f"Storage failure: {exc}"))

    return wrapper


class _InMemoryRepository(Generic[T]):
    """Общая часть репозиториев: таблица - это словарь id -> сущность."""

    table_name: str = ""

    def __init__(self, store: InMemoryStore, logger: ILogger):
        self._store = store
        self._logger = logger

    @property
    def _table(self) -> Dict[EntityId, T]:
        return getattr(self._store, self.table_name)

    @_guarded
    def find_all(self):
        with self._store.lock:
            return Ok(list(self._table.values()))

    @_guarded
    def find_by_id(self, id: EntityId):
        with self._store.lock:
            return Ok(self._table.get(id))

    @_guarded
    def save(self, entity: T):
        with self._store.lock:
            self._table[entity.id] = entity
        return Ok(entity)

    @_guarded
    def delete(self, id: EntityId):
        with self._store.lock:
            self._table.pop(id, None)
        return Ok(None)

    def _filter(self, **criteria) -> List[T]:
        with self._store.lock:
            return [
                item
                for item in self._table.values()
                if all(getattr(item, name) == value for name, value in criteria.items())
            ]


class InMemoryBuildingRepository(_InMemoryRepository[Building], BuildingRepository):
    table_name = "buildings"


class InMemoryFloorRepository(_InMemoryRepository[Floor], FloorRepository):
    table_name = "floors"

    @_guarded
    def find_by_building_id(self, building_id: EntityId):
        return Ok(self._filter(building_id=building_id))


class InMemoryRoomRepository(_InMemoryRepository[Room], RoomRepository):
    table_name = "rooms"

    @_guarded
    def find_by_floor_id(self, floor_id: EntityId):
        return Ok(self._filter(floor_id=floor_id))


class InMemoryEquipmentRepository(_InMemoryRepository[Equipment], EquipmentRepository):
    table_name = "equipment"

    @_guarded
    def find_by_room_id(self, room_id: EntityId):
        return Ok(self._filter(room_id=room_id))


class InMemoryEquipmentCategoryRepository(
    _InMemoryRepository[EquipmentCategory], EquipmentCategoryRepository
):
    table_name = "categories"

    @_guarded
    def find_by_major_minor(self, category_major: str, category_minor: str):
        found = self._filter(
            category_major=category_major, category_minor=category_minor
        )
        return Ok(found[0] if found else None)

    @_guarded
    def save(self, entity: EquipmentCategory):
        with self._store.lock:
            for other in self._table.values():
                if (
                    other.id != entity.id
                    and other.category_major == entity.category_major
                    and other.category_minor == entity.category_minor
                ):
                    return Err(ConflictException("Category already exists"))
            self._table[entity.id] = entity
        return Ok(entity)


class InMemoryReservationRepository(
    _InMemoryRepository[Reservation], ReservationRepository
):
    table_name = "reservations"

    @_guarded
    def find_by_equipment_and_date_range(
        self, equipment_id: EntityId, start_time: datetime, end_time: datetime
    ):
        return Ok(
            [
                reservation
                for reservation in self._filter(equipment_id=equipment_id)
                if reservation.overlaps_with(start_time, end_time)
            ]
        )

    @_guarded
    def find_by_user_id(self, user_id: EntityId):
        return Ok(self._filter(user_id=user_id))

    @_guarded
    def find_recently_used_equipment_by_user_id(
        self, user_id: EntityId, limit: int, now: Optional[datetime] = None
    ):
        current = ensure_utc(now) if now is not None else utc_now()
        finished = sorted(
            (r for r in self._filter(user_id=user_id) if r.end_time <= current),
            key=lambda r: r.end_time,
            reverse=True,
        )
        equipment_ids = list(dict.fromkeys(r.equipment_id for r in finished))
        return Ok(equipment_ids[:limit])

    @_guarded
    def save(self, entity: Reservation):
        # Проверка и запись атомарны относительно других сохранений
        with self._store.lock:
            for other in self._table.values():
                if (
                    other.id != entity.id
                    and other.equipment_id == entity.equipment_id
                    and other.overlaps_with(entity.start_time, entity.end_time)
                ):
                    return Err(ConflictException(CONFLICT_MESSAGE))
            self._table[entity.id] = entity
        return Ok(entity)


class InMemoryMaintenanceRecordRepository(
    _InMemoryRepository[MaintenanceRecord], MaintenanceRecordRepository
):
    table_name = "maintenance_records"

    @_guarded
    def find_by_equipment_id(self, equipment_id: EntityId):
        return Ok(self._filter(equipment_id=equipment_id))


class InMemoryEquipmentCommentRepository(
    _InMemoryRepository[EquipmentComment], EquipmentCommentRepository
):
    table_name = "comments"

    @_guarded
    def find_by_equipment_id(self, equipment_id: EntityId):
        return Ok(self._filter(equipment_id=equipment_id))


class InMemoryUserRepository(UserRepository):
    """Пользователи с мягким удалением и избранным оборудованием."""

    def __init__(self, store: InMemoryStore, logger: ILogger):
        self._store = store
        self._logger = logger

    def _active(self) -> List[User]:
        return [
            user
            for user_id, user in self._store.users.items()
            if user_id not in self._store.deleted_user_ids
        ]

    @_guarded
    def find_by_id(self, id: EntityId):
        with self._store.lock:
            if id in self._store.deleted_user_ids:
                return Ok(None)
            return Ok(self._store.users.get(id))

    @_guarded
    def find_by_email(self, email: str):
        with self._store.lock:
            for user in self._active():
                if user.email.lower() == email.lower():
                    return Ok(user)
        return Ok(None)

    @_guarded
    def find_all(self):
        with self._store.lock:
            return Ok(self._active())

    @_guarded
    def save(self, user: User):
        with self._store.lock:
            # Уникальный индекс email охватывает и удалённых пользователей
            for other in self._store.users.values():
                if other.id != user.id and other.email.lower() == user.email.lower():
                    return Err(ConflictException("User with this email already exists"))
            if not self._store.users:
                user = user.model_copy(update={"role": UserRole.ADMIN})
                self._logger.info("First user promoted to ADMIN", user_id=user.id)
            self._store.users[user.id] = user
        return Ok(user)

    @_guarded
    def update(self, user: User):
        with self._store.lock:
            if user.id not in self._store.users or user.id in self._store.deleted_user_ids:
                return Err(NotFoundException("User not found"))
            self._store.users[user.id] = user
        return Ok(user)

    @_guarded
    def update_password(self, user_id: EntityId, password_hash: str):
        with self._store.lock:
            user = self._store.users.get(user_id)
            if user is None or user_id in self._store.deleted_user_ids:
                return Err(NotFoundException("User not found"))
            self._store.users[user_id] = user.model_copy(
                update={"password_hash": password_hash}
            )
        return Ok(None)

    @_guarded
    def soft_delete(self, user_id: EntityId):
        with self._store.lock:
            self._store.deleted_user_ids.add(user_id)
            for equipment in list(self._store.equipment.values()):
                if not equipment.is_managed_by(user_id):
                    continue
                administrator_id = equipment.administrator_id
                self._store.equipment[equipment.id] = equipment.model_copy(
                    update={
                        "administrator_id": (
                            None if administrator_id == user_id else administrator_id
                        ),
                        "vice_administrator_ids": tuple(
                            vice_id
                            for vice_id in equipment.vice_administrator_ids
                            if vice_id != user_id
                        ),
                    }
                )
        return Ok(None)

    @_guarded
    def get_favorites(self, user_id: EntityId):
        with self._store.lock:
            return Ok(list(self._store.favorites.get(user_id, [])))

    @_guarded
    def add_favorite(self, user_id: EntityId, equipment_id: EntityId):
        with self._store.lock:
            favorites = self._store.favorites.setdefault(user_id, [])
            if equipment_id not in favorites:
                favorites.append(equipment_id)
        return Ok(None)

    @_guarded
    def remove_favorite(self, user_id: EntityId, equipment_id: EntityId):
        with self._store.lock:
            favorites = self._store.favorites.get(user_id, [])
            if equipment_id in favorites:
                favorites.remove(equipment_id)
        return Ok(None)


class InMemorySystemSettingsRepository(SystemSettingsRepository):
    def __init__(self, store: InMemoryStore, logger: ILogger):
        self._store = store
        self._logger = logger

    @_guarded
    def find_by_key(self, key: str):
        with self._store.lock:
            return Ok(self._store.settings.get(key))

    @_guarded
    def save(self, setting: SystemSetting):
        with self._store.lock:
            # Одна запись на ключ: при обновлении id сохраняется
            existing = self._store.settings.get(setting.key)
            if existing is not None:
                setting = setting.model_copy(update={"id": existing.id})
            self._store.settings[setting.key] = setting
        return Ok(setting)

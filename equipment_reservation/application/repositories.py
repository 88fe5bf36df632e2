"""
Абстрактные репозитории.

Каждый метод возвращает Ok(значение) или Err(ошибка хранилища).
Отсутствующий объект - это Ok(None), а не ошибка.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

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
)
from ..shared_kernel import DomainException, EntityId, InfrastructureException, Result

T_Entity = TypeVar("T_Entity")


class Repository(Generic[T_Entity], ABC):
    """Базовый контракт репозитория сущности."""

    @abstractmethod
    def find_all(self) -> Result[List[T_Entity], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def find_by_id(
        self, id: EntityId
    ) -> Result[Optional[T_Entity], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def save(self, entity: T_Entity) -> Result[T_Entity, DomainException]:
        """Добавляет новую или заменяет существующую сущность с тем же id."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, id: EntityId) -> Result[None, InfrastructureException]:
        raise NotImplementedError


class BuildingRepository(Repository[Building]):
    pass


class FloorRepository(Repository[Floor]):
    @abstractmethod
    def find_by_building_id(
        self, building_id: EntityId
    ) -> Result[List[Floor], InfrastructureException]:
        raise NotImplementedError


class RoomRepository(Repository[Room]):
    @abstractmethod
    def find_by_floor_id(
        self, floor_id: EntityId
    ) -> Result[List[Room], InfrastructureException]:
        raise NotImplementedError


class EquipmentRepository(Repository[Equipment]):
    @abstractmethod
    def find_by_room_id(
        self, room_id: EntityId
    ) -> Result[List[Equipment], InfrastructureException]:
        raise NotImplementedError


class EquipmentCategoryRepository(Repository[EquipmentCategory]):
    @abstractmethod
    def find_by_major_minor(
        self, category_major: str, category_minor: str
    ) -> Result[Optional[EquipmentCategory], InfrastructureException]:
        raise NotImplementedError


class ReservationRepository(Repository[Reservation]):
    """
    Репозиторий броней.

    ``save`` обязан отклонять бронь, пересекающуюся с другой бронью того же
    оборудования, возвращая Err(ConflictException). Это окончательная защита
    от двойного бронирования при конкурентных запросах.
    """

    @abstractmethod
    def find_by_equipment_and_date_range(
        self, equipment_id: EntityId, start_time: datetime, end_time: datetime
    ) -> Result[List[Reservation], InfrastructureException]:
        """Брони оборудования, пересекающиеся с интервалом [start_time, end_time)."""
        raise NotImplementedError

    @abstractmethod
    def find_by_user_id(
        self, user_id: EntityId
    ) -> Result[List[Reservation], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def find_recently_used_equipment_by_user_id(
        self, user_id: EntityId, limit: int, now: Optional[datetime] = None
    ) -> Result[List[EntityId], InfrastructureException]:
        """Оборудование из завершённых броней пользователя, сначала самые свежие."""
        raise NotImplementedError


class MaintenanceRecordRepository(Repository[MaintenanceRecord]):
    @abstractmethod
    def find_by_equipment_id(
        self, equipment_id: EntityId
    ) -> Result[List[MaintenanceRecord], InfrastructureException]:
        raise NotImplementedError


class EquipmentCommentRepository(ABC):
    @abstractmethod
    def find_by_id(
        self, id: EntityId
    ) -> Result[Optional[EquipmentComment], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def find_by_equipment_id(
        self, equipment_id: EntityId
    ) -> Result[List[EquipmentComment], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def save(self, comment: EquipmentComment) -> Result[EquipmentComment, DomainException]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, id: EntityId) -> Result[None, InfrastructureException]:
        raise NotImplementedError


class UserRepository(ABC):
    """
    Репозиторий пользователей.

    Мягко удалённые пользователи не возвращаются методами поиска.
    Первый сохранённый пользователь получает роль ADMIN.
    """

    @abstractmethod
    def find_by_id(self, id: EntityId) -> Result[Optional[User], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def find_by_email(self, email: str) -> Result[Optional[User], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def find_all(self) -> Result[List[User], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def save(self, user: User) -> Result[User, DomainException]:
        raise NotImplementedError

    @abstractmethod
    def update(self, user: User) -> Result[User, DomainException]:
        raise NotImplementedError

    @abstractmethod
    def update_password(
        self, user_id: EntityId, password_hash: str
    ) -> Result[None, DomainException]:
        raise NotImplementedError

    @abstractmethod
    def soft_delete(self, user_id: EntityId) -> Result[None, InfrastructureException]:
        """Помечает пользователя удалённым и снимает его с управления оборудованием."""
        raise NotImplementedError

    @abstractmethod
    def get_favorites(
        self, user_id: EntityId
    ) -> Result[List[EntityId], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def add_favorite(
        self, user_id: EntityId, equipment_id: EntityId
    ) -> Result[None, InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def remove_favorite(
        self, user_id: EntityId, equipment_id: EntityId
    ) -> Result[None, InfrastructureException]:
        raise NotImplementedError


class SystemSettingsRepository(ABC):
    @abstractmethod
    def find_by_key(
        self, key: str
    ) -> Result[Optional[SystemSetting], InfrastructureException]:
        raise NotImplementedError

    @abstractmethod
    def save(self, setting: SystemSetting) -> Result[SystemSetting, DomainException]:
        """Сохраняет значение; для ключа хранится одна запись."""
        raise NotImplementedError

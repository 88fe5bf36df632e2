"""
Доменная модель: сущности, фабрики и правила авторизации.
"""

from .building import (
    Building,
    BuildingError,
    Floor,
    FloorError,
    Room,
    RoomError,
    create_building,
    create_floor,
    create_room,
)
from .equipment import (
    Equipment,
    EquipmentCategory,
    EquipmentCategoryError,
    EquipmentError,
    RunningState,
    create_equipment,
    create_equipment_category,
)
from .equipment_comment import (
    EquipmentComment,
    EquipmentCommentError,
    create_equipment_comment,
)
from .maintenance_record import (
    MaintenanceRecord,
    MaintenanceRecordError,
    create_maintenance_record,
)
from .permissions import PermissionService
from .reservation import Reservation, ReservationError, create_reservation, overlaps
from .system_setting import (
    DEFAULT_TIMEZONE,
    TIMEZONE_KEY,
    SystemSetting,
    SystemSettingError,
    create_system_setting,
)
from .user import Actor, User, UserError, UserRole, create_user

__all__ = [
    # Размещение
    "Building",
    "BuildingError",
    "create_building",
    "Floor",
    "FloorError",
    "create_floor",
    "Room",
    "RoomError",
    "create_room",
    # Оборудование
    "Equipment",
    "EquipmentError",
    "RunningState",
    "create_equipment",
    "EquipmentCategory",
    "EquipmentCategoryError",
    "create_equipment_category",
    "EquipmentComment",
    "EquipmentCommentError",
    "create_equipment_comment",
    "MaintenanceRecord",
    "MaintenanceRecordError",
    "create_maintenance_record",
    # Бронирование
    "Reservation",
    "ReservationError",
    "create_reservation",
    "overlaps",
    # Пользователи и настройки
    "User",
    "UserError",
    "UserRole",
    "Actor",
    "create_user",
    "SystemSetting",
    "SystemSettingError",
    "create_system_setting",
    "TIMEZONE_KEY",
    "DEFAULT_TIMEZONE",
    # Политики
    "PermissionService",
]

"""
Инфраструктурный слой: хранилище в памяти и логирование.
"""

from .logger import StandardLogger, configure_logging
from .repositories import (
    InMemoryBuildingRepository,
    InMemoryEquipmentCategoryRepository,
    InMemoryEquipmentCommentRepository,
    InMemoryEquipmentRepository,
    InMemoryFloorRepository,
    InMemoryMaintenanceRecordRepository,
    InMemoryReservationRepository,
    InMemoryRoomRepository,
    InMemoryStore,
    InMemorySystemSettingsRepository,
    InMemoryUserRepository,
)

__all__ = [
    "StandardLogger",
    "configure_logging",
    "InMemoryStore",
    "InMemoryBuildingRepository",
    "InMemoryFloorRepository",
    "InMemoryRoomRepository",
    "InMemoryEquipmentRepository",
    "InMemoryEquipmentCategoryRepository",
    "InMemoryReservationRepository",
    "InMemoryMaintenanceRecordRepository",
    "InMemoryEquipmentCommentRepository",
    "InMemoryUserRepository",
    "InMemorySystemSettingsRepository",
]

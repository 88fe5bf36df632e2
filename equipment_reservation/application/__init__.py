"""
Прикладной слой: порты, репозитории, модели чтения и сервисы приложения.
"""

from .conflicts import CONFLICT_MESSAGE, ReservationConflictDetector
from .interfaces import ILogger
from .services import (
    BuildingApplicationService,
    CommentApplicationService,
    DashboardApplicationService,
    EquipmentApplicationService,
    MaintenanceApplicationService,
    ReservationApplicationService,
    SettingsApplicationService,
    UserApplicationService,
)

__all__ = [
    "CONFLICT_MESSAGE",
    "ReservationConflictDetector",
    "ILogger",
    "BuildingApplicationService",
    "CommentApplicationService",
    "DashboardApplicationService",
    "EquipmentApplicationService",
    "MaintenanceApplicationService",
    "ReservationApplicationService",
    "SettingsApplicationService",
    "UserApplicationService",
]

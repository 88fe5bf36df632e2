from .buildings import BuildingApplicationService
from .comments import CommentApplicationService
from .dashboard import DashboardApplicationService
from .equipment import EquipmentApplicationService
from .maintenance import MaintenanceApplicationService
from .reservations import ReservationApplicationService
from .settings import SettingsApplicationService
from .users import UserApplicationService

__all__ = [
    "BuildingApplicationService",
    "CommentApplicationService",
    "DashboardApplicationService",
    "EquipmentApplicationService",
    "MaintenanceApplicationService",
    "ReservationApplicationService",
    "SettingsApplicationService",
    "UserApplicationService",
]

from typing import Any, Dict, Optional

from .application import (
    BuildingApplicationService,
    CommentApplicationService,
    DashboardApplicationService,
    EquipmentApplicationService,
    MaintenanceApplicationService,
    ReservationApplicationService,
    SettingsApplicationService,
    UserApplicationService,
)
from .config import Settings, get_settings
from .infrastructure import (
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
    StandardLogger,
    configure_logging,
)


def bootstrap_app(settings: Optional[Settings] = None) -> Dict[str, Any]:
    """Создает и настраивает все компоненты приложения."""
    settings = settings or get_settings()

    # 1. Журнал и общее хранилище
    logger = StandardLogger(configure_logging(settings.log_level))
    store = InMemoryStore()

    # 2. Репозитории поверх одного хранилища
    buildings = InMemoryBuildingRepository(store, logger)
    floors = InMemoryFloorRepository(store, logger)
    rooms = InMemoryRoomRepository(store, logger)
    equipment = InMemoryEquipmentRepository(store, logger)
    categories = InMemoryEquipmentCategoryRepository(store, logger)
    reservations = InMemoryReservationRepository(store, logger)
    records = InMemoryMaintenanceRecordRepository(store, logger)
    comments = InMemoryEquipmentCommentRepository(store, logger)
    users = InMemoryUserRepository(store, logger)
    system_settings = InMemorySystemSettingsRepository(store, logger)

    # 3. Сервисы приложения; часовой пояс броней берется из системных настроек
    settings_service = SettingsApplicationService(
        system_settings, logger, default_timezone=settings.default_timezone
    )

    return {
        "store": store,
        "logger": logger,
        "settings": settings,
        "settings_service": settings_service,
        "building_service": BuildingApplicationService(buildings, floors, rooms, logger),
        "equipment_service": EquipmentApplicationService(
            equipment, categories, rooms, floors, buildings, users, logger
        ),
        "reservation_service": ReservationApplicationService(
            reservations,
            equipment,
            users,
            logger,
            timezone_provider=settings_service.get_timezone,
        ),
        "maintenance_service": MaintenanceApplicationService(
            records, equipment, users, logger
        ),
        "comment_service": CommentApplicationService(comments, equipment, users, logger),
        "user_service": UserApplicationService(users, equipment, logger),
        "dashboard_service": DashboardApplicationService(
            buildings,
            equipment,
            reservations,
            users,
            recent_reservations_limit=settings.recent_reservations_limit,
            recently_used_limit=settings.recently_used_limit,
        ),
    }

"""
Общие фикстуры тестов: чистое хранилище в памяти, участники и сервисы.
"""

import uuid
from datetime import datetime, timezone

import pytest

from equipment_reservation.application import (
    BuildingApplicationService,
    CommentApplicationService,
    DashboardApplicationService,
    EquipmentApplicationService,
    MaintenanceApplicationService,
    ReservationApplicationService,
    SettingsApplicationService,
    UserApplicationService,
)
from equipment_reservation.domain import Actor, UserRole
from equipment_reservation.infrastructure import (
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

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class RecordingLogger:
    """Логгер для тестов: запоминает сообщения вместо вывода."""

    def __init__(self):
        self.records = []

    def _record(self, level, message, **kwargs):
        self.records.append((level, message, kwargs))

    def info(self, message, **kwargs):
        self._record("info", message, **kwargs)

    def error(self, message, **kwargs):
        self._record("error", message, **kwargs)

    def warning(self, message, **kwargs):
        self._record("warning", message, **kwargs)

    def debug(self, message, **kwargs):
        self._record("debug", message, **kwargs)

    def messages(self, level):
        return [message for lvl, message, _ in self.records if lvl == level]


def new_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def repos(store, logger):
    """Репозитории поверх одного чистого хранилища."""
    return {
        "buildings": InMemoryBuildingRepository(store, logger),
        "floors": InMemoryFloorRepository(store, logger),
        "rooms": InMemoryRoomRepository(store, logger),
        "equipment": InMemoryEquipmentRepository(store, logger),
        "categories": InMemoryEquipmentCategoryRepository(store, logger),
        "reservations": InMemoryReservationRepository(store, logger),
        "records": InMemoryMaintenanceRecordRepository(store, logger),
        "comments": InMemoryEquipmentCommentRepository(store, logger),
        "users": InMemoryUserRepository(store, logger),
        "settings": InMemorySystemSettingsRepository(store, logger),
    }


@pytest.fixture
def admin() -> Actor:
    return Actor(id=new_id(), role=UserRole.ADMIN, email="admin@example.com")


@pytest.fixture
def editor() -> Actor:
    return Actor(id=new_id(), role=UserRole.EDITOR, email="editor@example.com")


@pytest.fixture
def general() -> Actor:
    return Actor(id=new_id(), role=UserRole.GENERAL, email="user@example.com")


@pytest.fixture
def other_general() -> Actor:
    return Actor(id=new_id(), role=UserRole.GENERAL, email="other@example.com")


@pytest.fixture
def building_service(repos, logger) -> BuildingApplicationService:
    return BuildingApplicationService(
        repos["buildings"], repos["floors"], repos["rooms"], logger
    )


@pytest.fixture
def equipment_service(repos, logger) -> EquipmentApplicationService:
    return EquipmentApplicationService(
        repos["equipment"],
        repos["categories"],
        repos["rooms"],
        repos["floors"],
        repos["buildings"],
        repos["users"],
        logger,
    )


@pytest.fixture
def settings_service(repos, logger) -> SettingsApplicationService:
    return SettingsApplicationService(repos["settings"], logger, clock=lambda: FIXED_NOW)


@pytest.fixture
def reservation_service(repos, logger) -> ReservationApplicationService:
    """Сервис броней; локальное время интерпретируется как UTC."""
    return ReservationApplicationService(
        repos["reservations"],
        repos["equipment"],
        repos["users"],
        logger,
        timezone_provider=lambda: "UTC",
    )


@pytest.fixture
def maintenance_service(repos, logger) -> MaintenanceApplicationService:
    return MaintenanceApplicationService(
        repos["records"], repos["equipment"], repos["users"], logger
    )


@pytest.fixture
def comment_service(repos, logger) -> CommentApplicationService:
    return CommentApplicationService(
        repos["comments"], repos["equipment"], repos["users"], logger,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def user_service(repos, logger) -> UserApplicationService:
    return UserApplicationService(repos["users"], repos["equipment"], logger)


@pytest.fixture
def dashboard_service(repos) -> DashboardApplicationService:
    return DashboardApplicationService(
        repos["buildings"],
        repos["equipment"],
        repos["reservations"],
        repos["users"],
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def equipment(equipment_service, admin):
    """Сохранённое оборудование без места размещения."""
    return equipment_service.create_equipment(admin, "Микроскоп").unwrap()

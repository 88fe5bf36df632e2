"""
Сервис приложения для системных настроек.
"""

from typing import Callable, Optional

from ...domain import (
    DEFAULT_TIMEZONE,
    TIMEZONE_KEY,
    Actor,
    PermissionService,
    SystemSetting,
    create_system_setting,
)
from ...shared_kernel import (
    DomainException,
    EntityId,
    Result,
    generate_id,
    is_known_timezone,
    now,
)
from ..interfaces import ILogger
from ..repositories import SystemSettingsRepository
from .base import authorize, require_actor


class SettingsApplicationService:
    def __init__(
        self,
        settings: SystemSettingsRepository,
        logger: ILogger,
        default_timezone: str = DEFAULT_TIMEZONE,
        id_factory: Callable[[], EntityId] = generate_id,
        clock=now,
    ):
        self._settings = settings
        self._logger = logger
        if not is_known_timezone(default_timezone):
            logger.error(
                "Unknown default timezone, using fallback",
                timezone=default_timezone,
                fallback=DEFAULT_TIMEZONE,
            )
            default_timezone = DEFAULT_TIMEZONE
        self._default_timezone = default_timezone
        self._new_id = id_factory
        self._clock = clock

    def get_timezone(self) -> str:
        """
        Часовой пояс системы.

        При ошибке хранилища или отсутствии записи возвращается пояс
        по умолчанию; ошибка записывается в журнал.
        """
        setting = self._settings.find_by_key(TIMEZONE_KEY)
        if setting.is_err():
            self._logger.error(
                "Failed to load timezone setting", error=setting.error.message
            )
            return self._default_timezone
        if setting.value is None:
            return self._default_timezone
        return setting.value.value

    def update_timezone(
        self, actor: Optional[Actor], timezone: str
    ) -> Result[SystemSetting, DomainException]:
        if actor is None:
            return require_actor(actor)
        setting = create_system_setting(
            self._new_id(), TIMEZONE_KEY, timezone, self._clock(), updated_by=actor.id
        )
        if setting.is_err():
            return setting
        allowed = authorize(PermissionService.can_manage_settings(actor))
        if allowed.is_err():
            self._logger.warning("Settings change denied", actor_id=actor.id)
            return allowed

        saved = self._settings.save(setting.value)
        if saved.is_ok():
            self._logger.info("Timezone updated", timezone=timezone, by=actor.id)
        return saved

import os
from typing import Final

from dotenv import load_dotenv

from .domain import DEFAULT_TIMEZONE


class Settings:
    """
    Настройки приложения из переменных окружения.

    Значения читаются из окружения и файла .env; у каждой есть значение
    по умолчанию.
    """

    def __init__(self) -> None:
        load_dotenv()

        # Часовой пояс, если он не сохранён в системных настройках
        self.default_timezone: Final[str] = os.getenv(
            "RESERVATION_DEFAULT_TIMEZONE", DEFAULT_TIMEZONE
        )
        self.log_level: Final[str] = os.getenv("RESERVATION_LOG_LEVEL", "INFO")

        # Сводка главной страницы
        self.recent_reservations_limit: Final[int] = int(
            os.getenv("RESERVATION_RECENT_RESERVATIONS_LIMIT", "10")
        )
        self.recently_used_limit: Final[int] = int(
            os.getenv("RESERVATION_RECENTLY_USED_LIMIT", "5")
        )


def get_settings() -> Settings:
    return Settings()

"""
Системные настройки: одна логическая запись ключ-значение на настройку.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..shared_kernel import Err, Ok, Result, ValidationException, is_known_timezone
from .validators import NonEmptyStr, is_non_empty_string

TIMEZONE_KEY = "timezone"
DEFAULT_TIMEZONE = "Asia/Tokyo"


class SystemSettingError(ValidationException):
    pass


class SystemSetting(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    key: NonEmptyStr
    value: str
    updated_at: datetime
    updated_by: Optional[str] = None


def create_system_setting(
    id: str,
    key: str,
    value: str,
    updated_at: datetime,
    updated_by: Optional[str] = None,
) -> Result[SystemSetting, SystemSettingError]:
    if not is_non_empty_string(key):
        return Err(SystemSettingError("Key is required", field="key"))
    if not is_non_empty_string(value):
        return Err(SystemSettingError("Value is required", field="value"))
    if key == TIMEZONE_KEY and not is_known_timezone(value):
        return Err(SystemSettingError(f"Invalid timezone: {value}", field="value"))
    if not isinstance(updated_at, datetime):
        return Err(SystemSettingError("Invalid Updated At", field="updated_at"))

    return Ok(
        SystemSetting(
            id=id, key=key, value=value, updated_at=updated_at, updated_by=updated_by
        )
    )

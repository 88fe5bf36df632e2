"""
Бронирование оборудования на интервал времени.

Интервал брони полуоткрытый: [start_time, end_time).
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ..shared_kernel import Err, Ok, Result, ValidationException, ensure_utc
from .validators import (
    EntityIdStr,
    is_optional_text,
    is_valid_entity_id,
    is_valid_time_range,
    parse_instant,
)


class ReservationError(ValidationException):
    pass


def overlaps(
    start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime
) -> bool:
    """Пересекаются ли интервалы [start_a, end_a) и [start_b, end_b).

    Общая граница пересечением не считается.
    """
    return start_a < end_b and start_b < end_a


class Reservation(BaseModel):
    """Бронь оборудования пользователем."""

    model_config = ConfigDict(frozen=True)

    id: EntityIdStr
    start_time: datetime
    end_time: datetime
    comment: Optional[str] = None
    user_id: EntityIdStr
    equipment_id: EntityIdStr

    @field_validator("start_time", "end_time")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def overlaps_with(self, start_time: datetime, end_time: datetime) -> bool:
        return overlaps(
            self.start_time, self.end_time, ensure_utc(start_time), ensure_utc(end_time)
        )

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id

    def with_changes(self, **changes: Any) -> "Result[Reservation, ReservationError]":
        return create_reservation(**{**self.model_dump(), **changes})


def create_reservation(
    id: str,
    start_time: datetime,
    end_time: datetime,
    user_id: str,
    equipment_id: str,
    comment: Optional[str] = None,
) -> Result[Reservation, ReservationError]:
    if not is_valid_entity_id(id):
        return Err(ReservationError("Invalid Reservation ID", field="id"))
    if not is_valid_entity_id(user_id):
        return Err(ReservationError("Invalid User ID", field="user_id"))
    if not is_valid_entity_id(equipment_id):
        return Err(ReservationError("Invalid Equipment ID", field="equipment_id"))
    if not is_optional_text(comment):
        return Err(ReservationError("Invalid Comment", field="comment"))

    start = parse_instant(start_time)
    if start is None:
        return Err(ReservationError("Invalid Start Time", field="start_time"))
    end = parse_instant(end_time)
    if end is None:
        return Err(ReservationError("Invalid End Time", field="end_time"))
    if not is_valid_time_range(start, end):
        return Err(
            ReservationError("Start time must be before end time", field="start_time")
        )

    return Ok(
        Reservation(
            id=id,
            start_time=start,
            end_time=end,
            comment=comment,
            user_id=user_id,
            equipment_id=equipment_id,
        )
    )

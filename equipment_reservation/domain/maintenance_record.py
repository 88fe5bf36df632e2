"""
Записи о техническом обслуживании оборудования.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from ..shared_kernel import Err, Ok, Result, ValidationException
from .validators import (
    EntityIdStr,
    NonEmptyStr,
    NonNegativeInt,
    is_non_empty_string,
    is_non_negative_int,
    is_valid_entity_id,
    parse_date,
)


class MaintenanceRecordError(ValidationException):
    pass


class MaintenanceRecord(BaseModel):
    """Запись об обслуживании. Стоимость - целое неотрицательное число."""

    model_config = ConfigDict(frozen=True)

    id: EntityIdStr
    equipment_id: EntityIdStr
    record_date: date
    description: NonEmptyStr
    performed_by: EntityIdStr
    cost: Optional[NonNegativeInt] = None

    def with_changes(
        self, **changes: Any
    ) -> "Result[MaintenanceRecord, MaintenanceRecordError]":
        return create_maintenance_record(**{**self.model_dump(), **changes})


def create_maintenance_record(
    id: str,
    equipment_id: str,
    record_date: date,
    description: str,
    performed_by: str,
    cost: Optional[int] = None,
) -> Result[MaintenanceRecord, MaintenanceRecordError]:
    if not is_valid_entity_id(id):
        return Err(MaintenanceRecordError("Invalid Maintenance Record ID", field="id"))
    if not is_valid_entity_id(equipment_id):
        return Err(MaintenanceRecordError("Invalid Equipment ID", field="equipment_id"))
    if not is_valid_entity_id(performed_by):
        return Err(MaintenanceRecordError("Invalid User ID", field="performed_by"))
    if not is_non_empty_string(description):
        return Err(MaintenanceRecordError("Invalid Description", field="description"))
    day = parse_date(record_date)
    if day is None:
        return Err(MaintenanceRecordError("Invalid Record Date", field="record_date"))
    if cost is not None and not is_non_negative_int(cost):
        return Err(MaintenanceRecordError("Invalid Cost", field="cost"))

    return Ok(
        MaintenanceRecord(
            id=id,
            equipment_id=equipment_id,
            record_date=day,
            description=description,
            performed_by=performed_by,
            cost=cost,
        )
    )

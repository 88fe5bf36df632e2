from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from ..shared_kernel import Err, Ok, Result, ValidationException, ensure_utc
from .validators import (
    EntityIdStr,
    NonEmptyStr,
    is_non_empty_string,
    is_valid_entity_id,
    parse_instant,
)


class EquipmentCommentError(ValidationException):
    pass


class EquipmentComment(BaseModel):
    """Комментарий пользователя к оборудованию."""

    model_config = ConfigDict(frozen=True)

    id: EntityIdStr
    equipment_id: EntityIdStr
    user_id: EntityIdStr
    content: NonEmptyStr
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    def is_authored_by(self, user_id: str) -> bool:
        return self.user_id == user_id


def create_equipment_comment(
    id: str,
    equipment_id: str,
    user_id: str,
    content: str,
    created_at: datetime,
) -> Result[EquipmentComment, EquipmentCommentError]:
    if not is_valid_entity_id(id):
        return Err(EquipmentCommentError("Invalid Equipment Comment ID", field="id"))
    if not is_valid_entity_id(equipment_id):
        return Err(EquipmentCommentError("Invalid Equipment ID", field="equipment_id"))
    if not is_valid_entity_id(user_id):
        return Err(EquipmentCommentError("Invalid User ID", field="user_id"))
    if not is_non_empty_string(content):
        return Err(EquipmentCommentError("Invalid Content", field="content"))

    created = parse_instant(created_at)
    if created is None:
        return Err(EquipmentCommentError("Invalid Created At", field="created_at"))

    return Ok(
        EquipmentComment(
            id=id,
            equipment_id=equipment_id,
            user_id=user_id,
            content=content,
            created_at=created,
        )
    )

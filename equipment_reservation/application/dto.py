"""
DTO (модели чтения) для представления данных.

Поля для отображения (booker, location, administrator и т.п.) собираются
на границе запроса и не входят в инварианты сущностей.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from ..domain import (
    Building,
    Equipment,
    EquipmentComment,
    Floor,
    MaintenanceRecord,
    Reservation,
    Room,
    RunningState,
    User,
)


class UserSummary(BaseModel):
    """Краткие сведения о пользователе."""

    id: str
    name: Optional[str]

    @classmethod
    def from_domain(cls, user: User) -> "UserSummary":
        return cls(id=user.id, name=user.label)


class EquipmentSummary(BaseModel):
    id: str
    name: str

    @classmethod
    def from_domain(cls, equipment: Equipment) -> "EquipmentSummary":
        return cls(id=equipment.id, name=equipment.name)


class LocationView(BaseModel):
    building_name: str
    floor_name: str
    room_name: str

    @classmethod
    def from_domain(cls, building: Building, floor: Floor, room: Room) -> "LocationView":
        return cls(
            building_name=building.name, floor_name=floor.name, room_name=room.name
        )


class ReservationView(BaseModel):
    """DTO для представления брони."""

    id: str
    start_time: datetime
    end_time: datetime
    comment: Optional[str]
    user_id: str
    equipment_id: str
    booker: Optional[UserSummary] = None
    equipment: Optional[EquipmentSummary] = None

    @classmethod
    def from_domain(
        cls,
        reservation: Reservation,
        booker: Optional[User] = None,
        equipment: Optional[Equipment] = None,
    ) -> "ReservationView":
        return cls(
            id=reservation.id,
            start_time=reservation.start_time,
            end_time=reservation.end_time,
            comment=reservation.comment,
            user_id=reservation.user_id,
            equipment_id=reservation.equipment_id,
            booker=UserSummary.from_domain(booker) if booker else None,
            equipment=EquipmentSummary.from_domain(equipment) if equipment else None,
        )


class EquipmentView(BaseModel):
    """DTO для представления оборудования."""

    id: str
    name: str
    description: Optional[str]
    category_major: Optional[str]
    category_minor: Optional[str]
    room_id: Optional[str]
    running_state: RunningState
    installation_date: Optional[date]
    administrator_id: Optional[str]
    vice_administrator_ids: List[str]
    administrator: Optional[UserSummary] = None
    vice_administrators: List[UserSummary] = []
    location: Optional[LocationView] = None

    @classmethod
    def from_domain(
        cls,
        equipment: Equipment,
        administrator: Optional[User] = None,
        vice_administrators: Optional[List[User]] = None,
        location: Optional[LocationView] = None,
    ) -> "EquipmentView":
        return cls(
            id=equipment.id,
            name=equipment.name,
            description=equipment.description,
            category_major=equipment.category_major,
            category_minor=equipment.category_minor,
            room_id=equipment.room_id,
            running_state=equipment.running_state,
            installation_date=equipment.installation_date,
            administrator_id=equipment.administrator_id,
            vice_administrator_ids=list(equipment.vice_administrator_ids),
            administrator=(
                UserSummary.from_domain(administrator) if administrator else None
            ),
            vice_administrators=[
                UserSummary.from_domain(user) for user in vice_administrators or []
            ],
            location=location,
        )


class CommentView(BaseModel):
    id: str
    equipment_id: str
    user_id: str
    content: str
    created_at: datetime
    author: Optional[UserSummary] = None

    @classmethod
    def from_domain(
        cls, comment: EquipmentComment, author: Optional[User] = None
    ) -> "CommentView":
        return cls(
            id=comment.id,
            equipment_id=comment.equipment_id,
            user_id=comment.user_id,
            content=comment.content,
            created_at=comment.created_at,
            author=UserSummary.from_domain(author) if author else None,
        )


class MaintenanceRecordView(BaseModel):
    id: str
    equipment_id: str
    record_date: date
    description: str
    performed_by: str
    cost: Optional[int]
    performed_by_user: Optional[UserSummary] = None

    @classmethod
    def from_domain(
        cls, record: MaintenanceRecord, performed_by_user: Optional[User] = None
    ) -> "MaintenanceRecordView":
        return cls(
            id=record.id,
            equipment_id=record.equipment_id,
            record_date=record.record_date,
            description=record.description,
            performed_by=record.performed_by,
            cost=record.cost,
            performed_by_user=(
                UserSummary.from_domain(performed_by_user)
                if performed_by_user
                else None
            ),
        )


class DashboardStats(BaseModel):
    """Сводка для главной страницы."""

    building_count: int
    equipment_count: int
    active_reservation_count: int
    recent_reservations: List[ReservationView]
    favorite_equipments: List[EquipmentSummary]
    recently_used_equipments: List[EquipmentSummary]

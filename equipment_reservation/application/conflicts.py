"""
Обнаружение пересечений броней одного оборудования.
"""

from datetime import datetime
from typing import List, Optional

from ..domain import Reservation
from ..shared_kernel import (
    ConflictException,
    DomainException,
    EntityId,
    Err,
    InfrastructureException,
    Ok,
    Result,
    ensure_utc,
)
from .repositories import ReservationRepository

CONFLICT_MESSAGE = "Time slot already reserved"


class ReservationConflictDetector:
    """
    Доменный сервис проверки занятости оборудования.

    Кандидатов выбирает репозиторий, а правило полуоткрытого интервала
    применяется здесь повторно: границы запроса в хранилище могут быть шире.
    """

    def __init__(self, reservation_repository: ReservationRepository):
        self.reservation_repository = reservation_repository

    def find_conflicts(
        self,
        equipment_id: EntityId,
        start_time: datetime,
        end_time: datetime,
        exclude_reservation_id: Optional[EntityId] = None,
    ) -> Result[List[Reservation], InfrastructureException]:
        """Возвращает брони, пересекающиеся с [start_time, end_time)."""
        start, end = ensure_utc(start_time), ensure_utc(end_time)
        candidates = self.reservation_repository.find_by_equipment_and_date_range(
            equipment_id, start, end
        )
        if candidates.is_err():
            return candidates

        return Ok(
            [
                reservation
                for reservation in candidates.value
                if reservation.equipment_id == equipment_id
                and reservation.id != exclude_reservation_id
                and reservation.overlaps_with(start, end)
            ]
        )

    def ensure_available(
        self,
        equipment_id: EntityId,
        start_time: datetime,
        end_time: datetime,
        exclude_reservation_id: Optional[EntityId] = None,
    ) -> Result[None, DomainException]:
        conflicts = self.find_conflicts(
            equipment_id, start_time, end_time, exclude_reservation_id
        )
        if conflicts.is_err():
            return conflicts
        if conflicts.value:
            return Err(ConflictException(CONFLICT_MESSAGE))
        return Ok(None)

    def is_available(
        self,
        equipment_id: EntityId,
        start_time: datetime,
        end_time: datetime,
        exclude_reservation_id: Optional[EntityId] = None,
    ) -> Result[bool, InfrastructureException]:
        conflicts = self.find_conflicts(
            equipment_id, start_time, end_time, exclude_reservation_id
        )
        if conflicts.is_err():
            return conflicts
        return Ok(not conflicts.value)

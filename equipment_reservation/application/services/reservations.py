"""
Сервис приложения для бронирования оборудования.

Порядок обработки команды: участник -> валидация -> права ->
проверка пересечений -> сохранение. Хранилище повторно проверяет
пересечение при сохранении и может вернуть ConflictException.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from ...domain import (
    DEFAULT_TIMEZONE,
    Actor,
    Equipment,
    PermissionService,
    Reservation,
    ReservationError,
    create_reservation,
)
from ...shared_kernel import (
    DomainException,
    EntityId,
    Err,
    Ok,
    Result,
    generate_id,
    to_utc,
)
from ..conflicts import ReservationConflictDetector
from ..dto import ReservationView
from ..interfaces import ILogger
from ..repositories import EquipmentRepository, ReservationRepository, UserRepository
from .base import authorize, blank_to_none, load_users, require_actor, require_found

TimeInput = Union[datetime, str]


class ReservationApplicationService:
    """Сервис приложения для управления бронями."""

    def __init__(
        self,
        reservations: ReservationRepository,
        equipment: EquipmentRepository,
        users: UserRepository,
        logger: ILogger,
        timezone_provider: Callable[[], str] = lambda: DEFAULT_TIMEZONE,
        id_factory: Callable[[], EntityId] = generate_id,
    ):
        self._reservations = reservations
        self._equipment = equipment
        self._users = users
        self._logger = logger
        self._timezone = timezone_provider
        self._new_id = id_factory
        self.conflict_detector = ReservationConflictDetector(reservations)

    def _to_utc(self, value: TimeInput) -> Any:
        # Неразобранное значение уходит в фабрику и отклоняется там
        converted = to_utc(value, self._timezone())
        return value if converted is None else converted

    # Запросы

    def get_reservation(
        self, reservation_id: EntityId
    ) -> Result[Reservation, DomainException]:
        return require_found(
            self._reservations.find_by_id(reservation_id), "Reservation not found"
        )

    def list_reservations(self) -> Result[List[ReservationView], DomainException]:
        """Все брони в порядке начала."""
        reservations = self._reservations.find_all()
        if reservations.is_err():
            return reservations
        return self._to_views(sorted(reservations.value, key=lambda r: r.start_time))

    def list_equipment_reservations(
        self, equipment_id: EntityId, start_time: TimeInput, end_time: TimeInput
    ) -> Result[List[ReservationView], DomainException]:
        """Брони оборудования, пересекающиеся с заданным окном (например, для календаря)."""
        start = to_utc(start_time, self._timezone())
        if start is None:
            return Err(ReservationError("Invalid Start Time", field="start_time"))
        end = to_utc(end_time, self._timezone())
        if end is None:
            return Err(ReservationError("Invalid End Time", field="end_time"))

        reservations = self._reservations.find_by_equipment_and_date_range(
            equipment_id, start, end
        )
        if reservations.is_err():
            return reservations
        return self._to_views(sorted(reservations.value, key=lambda r: r.start_time))

    def list_user_reservations(
        self, actor: Optional[Actor]
    ) -> Result[List[ReservationView], DomainException]:
        """Брони участника, сначала самые поздние."""
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        reservations = self._reservations.find_by_user_id(actor.id)
        if reservations.is_err():
            return reservations
        return self._to_views(
            sorted(reservations.value, key=lambda r: r.start_time, reverse=True)
        )

    def _to_views(
        self, reservations: List[Reservation]
    ) -> Result[List[ReservationView], DomainException]:
        users = load_users(self._users, [r.user_id for r in reservations])
        if users.is_err():
            return users

        equipment: Dict[EntityId, Equipment] = {}
        for equipment_id in dict.fromkeys(r.equipment_id for r in reservations):
            found = self._equipment.find_by_id(equipment_id)
            if found.is_err():
                return found
            if found.value is not None:
                equipment[equipment_id] = found.value

        return Ok(
            [
                ReservationView.from_domain(
                    reservation,
                    booker=users.value.get(reservation.user_id),
                    equipment=equipment.get(reservation.equipment_id),
                )
                for reservation in reservations
            ]
        )

    # Команды

    def create_reservation(
        self,
        actor: Optional[Actor],
        equipment_id: EntityId,
        start_time: TimeInput,
        end_time: TimeInput,
        comment: Optional[str] = None,
    ) -> Result[Reservation, DomainException]:
        """Бронирует оборудование от имени участника."""
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result

        reservation = create_reservation(
            self._new_id(),
            self._to_utc(start_time),
            self._to_utc(end_time),
            user_id=actor.id,
            equipment_id=equipment_id,
            comment=blank_to_none(comment),
        )
        if reservation.is_err():
            return reservation
        allowed = authorize(PermissionService.can_reserve())
        if allowed.is_err():
            return allowed

        return self._check_and_save(reservation.value, exclude_reservation_id=None)

    def update_reservation(
        self,
        actor: Optional[Actor],
        reservation_id: EntityId,
        start_time: TimeInput,
        end_time: TimeInput,
        comment: Optional[str] = None,
    ) -> Result[Reservation, DomainException]:
        """Переносит бронь. Владелец брони не меняется."""
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        existing = self.get_reservation(reservation_id)
        if existing.is_err():
            return existing

        updated = existing.value.with_changes(
            start_time=self._to_utc(start_time),
            end_time=self._to_utc(end_time),
            comment=blank_to_none(comment),
        )
        if updated.is_err():
            return updated
        allowed = authorize(
            PermissionService.can_manage_reservations(actor, existing.value)
        )
        if allowed.is_err():
            self._logger.warning(
                "Reservation change denied",
                actor_id=actor.id,
                reservation_id=reservation_id,
            )
            return allowed

        return self._check_and_save(updated.value, exclude_reservation_id=reservation_id)

    def _check_and_save(
        self, reservation: Reservation, exclude_reservation_id: Optional[EntityId]
    ) -> Result[Reservation, DomainException]:
        equipment = require_found(
            self._equipment.find_by_id(reservation.equipment_id), "Equipment not found"
        )
        if equipment.is_err():
            return equipment

        available = self.conflict_detector.ensure_available(
            reservation.equipment_id,
            reservation.start_time,
            reservation.end_time,
            exclude_reservation_id,
        )
        if available.is_err():
            self._logger.info(
                "Reservation conflict",
                equipment_id=reservation.equipment_id,
                start_time=reservation.start_time.isoformat(),
            )
            return available

        saved = self._reservations.save(reservation)
        if saved.is_ok():
            self._logger.info(
                "Reservation saved",
                reservation_id=reservation.id,
                equipment_id=reservation.equipment_id,
                user_id=reservation.user_id,
            )
        return saved

    def delete_reservation(
        self, actor: Optional[Actor], reservation_id: EntityId
    ) -> Result[None, DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        existing = self.get_reservation(reservation_id)
        if existing.is_err():
            return existing

        allowed = authorize(
            PermissionService.can_delete_reservation(actor, existing.value)
        )
        if allowed.is_err():
            self._logger.warning(
                "Reservation delete denied",
                actor_id=actor.id,
                reservation_id=reservation_id,
            )
            return allowed

        deleted = self._reservations.delete(reservation_id)
        if deleted.is_ok():
            self._logger.info("Reservation deleted", reservation_id=reservation_id)
        return deleted

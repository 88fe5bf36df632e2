"""
Сводка для главной страницы.
"""

from typing import List, Optional

from ...domain import Actor, Equipment, Reservation, User
from ...shared_kernel import DomainException, Ok, Result, now
from ..dto import DashboardStats, EquipmentSummary, ReservationView
from ..repositories import (
    BuildingRepository,
    EquipmentRepository,
    ReservationRepository,
    UserRepository,
)


class DashboardApplicationService:
    def __init__(
        self,
        buildings: BuildingRepository,
        equipment: EquipmentRepository,
        reservations: ReservationRepository,
        users: UserRepository,
        recent_reservations_limit: int = 10,
        recently_used_limit: int = 5,
        clock=now,
    ):
        self._buildings = buildings
        self._equipment = equipment
        self._reservations = reservations
        self._users = users
        self._recent_limit = recent_reservations_limit
        self._recently_used_limit = recently_used_limit
        self._clock = clock

    def get_stats(self, actor: Optional[Actor]) -> Result[DashboardStats, DomainException]:
        """
        Счётчики зданий, оборудования и активных броней, а для участника -
        его последние брони, избранное и недавно использованное оборудование.

        Бронь активна, пока не закончилась (end_time >= текущего момента).
        """
        buildings = self._buildings.find_all()
        if buildings.is_err():
            return buildings
        equipment = self._equipment.find_all()
        if equipment.is_err():
            return equipment
        reservations = self._reservations.find_all()
        if reservations.is_err():
            return reservations

        current = self._clock()
        active = [r for r in reservations.value if r.end_time >= current]
        by_id = {item.id: item for item in equipment.value}

        recent: List[ReservationView] = []
        favorites: List[Equipment] = []
        recently_used: List[Equipment] = []
        if actor is not None:
            mine = sorted(
                (r for r in reservations.value if r.user_id == actor.id),
                key=lambda r: r.start_time,
                reverse=True,
            )[: self._recent_limit]
            booker = self._users.find_by_id(actor.id)
            if booker.is_err():
                return booker
            recent = [self._view(r, booker.value, by_id) for r in mine]

            # Недоступные вспомогательные данные не ломают сводку
            favorite_ids = self._users.get_favorites(actor.id)
            if favorite_ids.is_ok():
                favorites = [by_id[i] for i in favorite_ids.value if i in by_id]
            used_ids = self._reservations.find_recently_used_equipment_by_user_id(
                actor.id, self._recently_used_limit, now=current
            )
            if used_ids.is_ok():
                recently_used = [by_id[i] for i in used_ids.value if i in by_id]

        return Ok(
            DashboardStats(
                building_count=len(buildings.value),
                equipment_count=len(equipment.value),
                active_reservation_count=len(active),
                recent_reservations=recent,
                favorite_equipments=[EquipmentSummary.from_domain(e) for e in favorites],
                recently_used_equipments=[
                    EquipmentSummary.from_domain(e) for e in recently_used
                ],
            )
        )

    @staticmethod
    def _view(reservation: Reservation, booker: Optional[User], by_id) -> ReservationView:
        return ReservationView.from_domain(
            reservation, booker=booker, equipment=by_id.get(reservation.equipment_id)
        )

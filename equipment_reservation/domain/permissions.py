"""
Правила авторизации.

Чистые функции без побочных эффектов: (участник, объект) -> bool.
Отказ превращается в ForbiddenException вызывающим кодом.
"""

from typing import Optional, Union

from .equipment import Equipment
from .equipment_comment import EquipmentComment
from .reservation import Reservation
from .user import ELEVATED_ROLES, Actor, User, UserRole

Principal = Union[Actor, User]


class PermissionService:
    """Политики доступа к изменению сущностей."""

    @staticmethod
    def can_manage_buildings(actor: Principal) -> bool:
        return actor.role == UserRole.ADMIN

    @staticmethod
    def can_manage_equipment(actor: Principal) -> bool:
        return actor.role in ELEVATED_ROLES

    @staticmethod
    def can_edit_equipment_management(actor: Principal, equipment: Equipment) -> bool:
        """
        Кто может назначать администраторов оборудования и вести журнал обслуживания.

        Разрешено: ADMIN, EDITOR, администратор или заместитель администратора
        этого оборудования.
        """
        if actor.role in ELEVATED_ROLES:
            return True
        return equipment.is_managed_by(actor.id)

    @staticmethod
    def can_manage_reservations(
        actor: Principal, reservation: Optional[Reservation] = None
    ) -> bool:
        if actor.role in ELEVATED_ROLES:
            return True
        if reservation is not None:
            return reservation.is_owned_by(actor.id)
        # Без конкретной брони: каждый управляет своими бронями
        return True

    @staticmethod
    def can_delete_reservation(actor: Principal, reservation: Reservation) -> bool:
        if actor.role in ELEVATED_ROLES:
            return True
        return reservation.is_owned_by(actor.id)

    @staticmethod
    def can_reserve() -> bool:
        return True

    @staticmethod
    def can_comment() -> bool:
        return True

    @staticmethod
    def can_delete_comment(actor: Principal, comment: EquipmentComment) -> bool:
        return actor.role == UserRole.ADMIN or comment.is_authored_by(actor.id)

    @staticmethod
    def can_manage_users(actor: Principal) -> bool:
        return actor.role == UserRole.ADMIN

    @staticmethod
    def can_manage_settings(actor: Principal) -> bool:
        return actor.role == UserRole.ADMIN

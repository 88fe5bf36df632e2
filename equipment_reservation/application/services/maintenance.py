"""
Сервис приложения для журнала технического обслуживания.
"""

from datetime import date
from typing import Callable, List, Optional

from ...domain import (
    Actor,
    Equipment,
    MaintenanceRecord,
    PermissionService,
    create_maintenance_record,
)
from ...shared_kernel import DomainException, EntityId, Ok, Result, generate_id
from ..dto import MaintenanceRecordView
from ..interfaces import ILogger
from ..repositories import (
    EquipmentRepository,
    MaintenanceRecordRepository,
    UserRepository,
)
from .base import authorize, load_users, require_actor, require_found


class MaintenanceApplicationService:
    """
    Записи обслуживания ведут администраторы оборудования,
    их заместители, а также ADMIN и EDITOR.
    """

    def __init__(
        self,
        records: MaintenanceRecordRepository,
        equipment: EquipmentRepository,
        users: UserRepository,
        logger: ILogger,
        id_factory: Callable[[], EntityId] = generate_id,
    ):
        self._records = records
        self._equipment = equipment
        self._users = users
        self._logger = logger
        self._new_id = id_factory

    def list_records(
        self, equipment_id: EntityId
    ) -> Result[List[MaintenanceRecordView], DomainException]:
        """Журнал обслуживания оборудования, сначала свежие записи."""
        records = self._records.find_by_equipment_id(equipment_id)
        if records.is_err():
            return records
        ordered = sorted(records.value, key=lambda r: r.record_date, reverse=True)

        users = load_users(self._users, [r.performed_by for r in ordered])
        if users.is_err():
            return users
        return Ok(
            [
                MaintenanceRecordView.from_domain(
                    record, performed_by_user=users.value.get(record.performed_by)
                )
                for record in ordered
            ]
        )

    def get_record(self, record_id: EntityId) -> Result[MaintenanceRecord, DomainException]:
        return require_found(
            self._records.find_by_id(record_id), "Maintenance record not found"
        )

    def _authorize(
        self, actor: Actor, equipment_id: EntityId
    ) -> Result[Equipment, DomainException]:
        equipment = require_found(
            self._equipment.find_by_id(equipment_id), "Equipment not found"
        )
        if equipment.is_err():
            return equipment
        allowed = authorize(
            PermissionService.can_edit_equipment_management(actor, equipment.value)
        )
        if allowed.is_err():
            self._logger.warning(
                "Maintenance change denied", actor_id=actor.id, equipment_id=equipment_id
            )
            return allowed
        return equipment

    def create_record(
        self,
        actor: Optional[Actor],
        equipment_id: EntityId,
        record_date: date,
        description: str,
        cost: Optional[int] = None,
        performed_by: Optional[EntityId] = None,
    ) -> Result[MaintenanceRecord, DomainException]:
        """Добавляет запись; исполнитель по умолчанию - сам участник."""
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result

        record = create_maintenance_record(
            self._new_id(),
            equipment_id,
            record_date,
            description,
            performed_by or actor.id,
            cost,
        )
        if record.is_err():
            return record
        allowed = self._authorize(actor, equipment_id)
        if allowed.is_err():
            return allowed

        saved = self._records.save(record.value)
        if saved.is_ok():
            self._logger.info(
                "Maintenance record created",
                record_id=saved.value.id,
                equipment_id=equipment_id,
            )
        return saved

    def update_record(
        self,
        actor: Optional[Actor],
        record_id: EntityId,
        record_date: date,
        description: str,
        cost: Optional[int] = None,
    ) -> Result[MaintenanceRecord, DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        existing = self.get_record(record_id)
        if existing.is_err():
            return existing

        updated = existing.value.with_changes(
            record_date=record_date, description=description, cost=cost
        )
        if updated.is_err():
            return updated
        allowed = self._authorize(actor, existing.value.equipment_id)
        if allowed.is_err():
            return allowed
        return self._records.save(updated.value)

    def delete_record(
        self, actor: Optional[Actor], record_id: EntityId
    ) -> Result[None, DomainException]:
        actor_result = require_actor(actor)
        if actor_result.is_err():
            return actor_result
        existing = self.get_record(record_id)
        if existing.is_err():
            return existing
        allowed = self._authorize(actor, existing.value.equipment_id)
        if allowed.is_err():
            return allowed

        deleted = self._records.delete(record_id)
        if deleted.is_ok():
            self._logger.info("Maintenance record deleted", record_id=record_id)
        return deleted

from datetime import date
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.entity.closed_slot_config_entity import ClosedSlotConfig
from src.service.booking.domain.enum.booking_enums import AuditAction
from src.service.booking.domain.value_object.actor_context import ActorContext, StaffActor


class ManageClosedSlotsUseCase:
    """
    Manager-only closing and reopening of slots for a date.

    Every write is a compare-and-set on the config version; the date entry
    disappears once no slot is closed.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @staticmethod
    def _require_manager(actor: ActorContext) -> StaffActor:
        if not isinstance(actor, StaffActor) or not actor.is_manager:
            raise ForbiddenError('Only managers can close or open slots')
        return actor

    async def _update(
        self,
        *,
        booking_date: date,
        actor: ActorContext,
        operation: str,
        change: Callable[[ClosedSlotConfig, str], ClosedSlotConfig],
    ) -> ClosedSlotConfig:
        manager = self._require_manager(actor)
        async with self.uow:
            current = await self.uow.closed_slot_repo.get(booking_date=booking_date)
            updated = change(current, manager.actor_id)
            saved = await self.uow.closed_slot_repo.save(
                config=updated, expected_version=current.version
            )
            await self.uow.audit_log_repo.add(
                entry=AuditLogEntry.record(
                    action=AuditAction.CLOSED_SLOTS_UPDATED,
                    actor=manager,
                    target_id=booking_date.isoformat(),
                    details={
                        'operation': operation,
                        'before': current.sorted_slot_ids,
                        'after': saved.sorted_slot_ids,
                    },
                )
            )
            await self.uow.commit()

        Logger.base.info(
            f'🚧 [SLOTS] {operation} on {booking_date}: closed {saved.sorted_slot_ids or "none"}'
        )
        return saved

    @Logger.io
    async def set_slots(
        self, *, booking_date: date, slot_ids: list[str], actor: ActorContext
    ) -> ClosedSlotConfig:
        return await self._update(
            booking_date=booking_date,
            actor=actor,
            operation='set',
            change=lambda config, by: config.set_slots(slot_ids=slot_ids, updated_by=by),
        )

    @Logger.io
    async def toggle(self, *, booking_date: date, slot_id: str, actor: ActorContext) -> ClosedSlotConfig:
        return await self._update(
            booking_date=booking_date,
            actor=actor,
            operation='toggle',
            change=lambda config, by: config.toggle(slot_id=slot_id, updated_by=by),
        )

    @Logger.io
    async def close_all(self, *, booking_date: date, actor: ActorContext) -> ClosedSlotConfig:
        return await self._update(
            booking_date=booking_date,
            actor=actor,
            operation='close_all',
            change=lambda config, by: config.close_all(updated_by=by),
        )

    @Logger.io
    async def open_all(self, *, booking_date: date, actor: ActorContext) -> ClosedSlotConfig:
        return await self._update(
            booking_date=booking_date,
            actor=actor,
            operation='open_all',
            change=lambda config, by: config.open_all(updated_by=by),
        )

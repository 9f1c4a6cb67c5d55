from datetime import datetime, timezone
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.booking_errors import ConcurrentModification, InvalidAddOn
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.enum.booking_enums import AuditAction
from src.service.booking.domain.value_object.actor_context import ActorContext, StaffActor
from src.service.booking.domain.value_object.pricing_catalog import AddOnConfig, AddOnPrice


class UpdateAddOnConfigUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(
        self, *, entries: dict[str, AddOnPrice], expected_version: int, actor: ActorContext
    ) -> AddOnConfig:
        """
        Replace the add-on price list.

        Raises:
            ForbiddenError: caller is not a manager
            InvalidAddOn: empty list or a negative price
            ConcurrentModification: `expected_version` is stale
        """
        if not isinstance(actor, StaffActor) or not actor.is_manager:
            raise ForbiddenError('Only managers can change add-on prices')
        if not entries:
            raise InvalidAddOn('At least one add-on is required')
        for add_on_id, entry in entries.items():
            if entry.price < 0:
                raise InvalidAddOn(f'Add-on {add_on_id} price must not be negative')

        async with self.uow:
            current = await self.uow.pricing_config_repo.get_add_on_config()
            if current.version != expected_version:
                raise ConcurrentModification(
                    'Add-on prices were changed by someone else, refresh and retry'
                )

            updated = AddOnConfig(
                entries=dict(entries),
                version=current.version + 1,
                updated_at=datetime.now(timezone.utc),
                updated_by=actor.actor_id,
            )
            await self.uow.pricing_config_repo.save_add_on_config(
                config=updated, expected_version=expected_version
            )
            await self.uow.audit_log_repo.add(
                entry=AuditLogEntry.record(
                    action=AuditAction.ADD_ONS_UPDATED,
                    actor=actor,
                    target_id='add_ons',
                    details={'version': updated.version, 'entries': updated.to_dict()},
                )
            )
            await self.uow.commit()
        return updated

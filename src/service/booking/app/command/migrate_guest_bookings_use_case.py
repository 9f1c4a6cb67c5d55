from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.enum.booking_enums import AuditAction
from src.service.booking.domain.value_object.actor_context import ActorContext, CustomerActor
from src.service.booking.domain.value_object.guest_session import normalize_uae_phone


class MigrateGuestBookingsUseCase:
    """
    Re-own every guest booking made with a phone number to a signed-in customer.

    One batched UPDATE; running it again migrates nothing and returns 0.
    The phone must be the customer's own verified phone.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, actor: ActorContext, phone: str) -> int:
        if not isinstance(actor, CustomerActor):
            raise ForbiddenError('Only signed-in customers can claim guest bookings')

        normalized = normalize_uae_phone(phone)
        if not actor.phone or normalize_uae_phone(actor.phone) != normalized:
            raise ForbiddenError('You can only claim bookings made with your own phone number')

        async with self.uow:
            migrated = await self.uow.booking_command_repo.migrate_guest_bookings(
                user_id=actor.user_id, phone=normalized
            )
            if migrated:
                await self.uow.audit_log_repo.add(
                    entry=AuditLogEntry.record(
                        action=AuditAction.GUEST_BOOKINGS_MIGRATED,
                        actor=actor,
                        target_id=actor.user_id,
                        details={'phone': normalized, 'count': migrated},
                    )
                )
            await self.uow.commit()
        return migrated

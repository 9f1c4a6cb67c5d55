from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.domain.booking_errors import ReferralCreditConsumed
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.enum.booking_enums import AuditAction
from src.service.booking.domain.value_object.actor_context import ActorContext


class ConsumeReferralCreditUseCase:
    """Flip a referred user's one-time discount to used; idempotent per booking"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    async def consume(self, *, user_id: str, booking_id: UUID, actor: ActorContext) -> bool:
        """Runs inside the caller's open unit of work; the caller commits."""
        try:
            consumed = await self.uow.referral_credit_repo.consume_referee_discount(
                user_id=user_id, booking_id=booking_id
            )
        except ReferralCreditConsumed:
            metrics.record_redemption(kind='referral', result='already_consumed')
            raise

        await self.uow.audit_log_repo.add(
            entry=AuditLogEntry.record(
                action=AuditAction.REFERRAL_CREDIT_CONSUMED,
                actor=actor,
                target_id=str(booking_id),
                details={'user_id': user_id},
            )
        )
        return consumed

    @Logger.io
    async def execute(self, *, user_id: str, booking_id: UUID, actor: ActorContext) -> bool:
        async with self.uow:
            consumed = await self.consume(user_id=user_id, booking_id=booking_id, actor=actor)
            await self.uow.commit()

        metrics.record_redemption(kind='referral', result='consumed')
        return consumed

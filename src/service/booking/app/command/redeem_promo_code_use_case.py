from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.domain.booking_errors import (
    PromoExhausted,
    PromoNotApplicable,
    PromoNotFound,
)
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enums import AuditAction
from src.service.booking.domain.value_object.actor_context import ActorContext


class RedeemPromoCodeUseCase:
    """
    Record one use of a promo code for a booking, exactly once.

    A second call for the same booking is a no-op that returns False.
    Fails with PromoExhausted (and rolls back) when the code has no uses left,
    and with PromoNotApplicable when the booking was not priced with the code.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    async def redeem(self, *, promo_code_id: UUID, booking: Booking, actor: ActorContext) -> bool:
        """Runs inside the caller's open unit of work; the caller commits."""
        promo_code = await self.uow.promo_code_repo.get_by_id(promo_code_id=promo_code_id)
        if not promo_code:
            raise PromoNotFound('Promo code not found')
        if booking.promo_code_id != promo_code_id:
            raise PromoNotApplicable(
                f'Booking {booking.booking_number} was not priced with promo code {promo_code.code}'
            )

        try:
            redeemed = await self.uow.promo_code_repo.redeem(
                promo_code_id=promo_code_id, booking_id=booking.id
            )
        except PromoExhausted:
            metrics.record_redemption(kind='promo', result='exhausted')
            raise

        if redeemed:
            await self.uow.audit_log_repo.add(
                entry=AuditLogEntry.record(
                    action=AuditAction.PROMO_CODE_REDEEMED,
                    actor=actor,
                    target_id=str(booking.id),
                    details={'promo_code_id': str(promo_code_id), 'code': promo_code.code},
                )
            )
        return redeemed

    @Logger.io
    async def execute(self, *, promo_code_id: UUID, booking_id: UUID, actor: ActorContext) -> bool:
        with self.tracer.start_as_current_span(
            'use_case.redeem_promo_code',
            attributes={'promo_code.id': str(promo_code_id), 'booking.id': str(booking_id)},
        ):
            async with self.uow:
                booking = await self.uow.booking_command_repo.get_by_id(booking_id=booking_id)
                if not booking:
                    raise NotFoundError('Booking not found')
                redeemed = await self.redeem(
                    promo_code_id=promo_code_id, booking=booking, actor=actor
                )
                await self.uow.commit()

            metrics.record_redemption(kind='promo', result='redeemed' if redeemed else 'duplicate')
            return redeemed

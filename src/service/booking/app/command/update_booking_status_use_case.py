from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.domain.booking_errors import TerminalState
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enums import AuditAction, CustomerKind
from src.service.booking.domain.enum.booking_status import BookingStatus, next_status
from src.service.booking.domain.value_object.actor_context import (
    ActorContext,
    CustomerActor,
    GuestActor,
)


class UpdateBookingStatusUseCase:
    """
    Move a booking through its lifecycle.

    Flow (one transaction):
    1. Lock the booking row (SELECT ... FOR UPDATE)
    2. Check the actor may perform the transition
    3. Validate against the transition table and stamp the timestamp
    4. Compare-and-set the status (UPDATE ... WHERE status = :expected)
    5. On completed, credit the referrer of the booking's customer once

    Staff, managers and the system may perform any legal transition; customers
    and guests may only cancel bookings they own.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @staticmethod
    def _authorize(*, booking: Booking, target: BookingStatus, actor: ActorContext) -> None:
        if not isinstance(actor, (CustomerActor, GuestActor)):
            return
        if not booking.is_owned_by(actor):
            raise ForbiddenError('You can only change your own bookings')
        if target != BookingStatus.CANCELLED:
            raise ForbiddenError('Customers can only cancel a booking')

    @Logger.io
    async def execute(
        self, *, booking_id: UUID, target_status: BookingStatus, actor: ActorContext
    ) -> Booking:
        return await self._apply(
            booking_id=booking_id, resolve_target=lambda _: target_status, actor=actor
        )

    @Logger.io
    async def advance(self, *, booking_id: UUID, actor: ActorContext) -> Booking:
        """Move to the next status on the normal progression"""

        def resolve_target(booking: Booking) -> BookingStatus:
            target = next_status(booking.status)
            if target is None:
                raise TerminalState(booking.status.value)
            return target

        return await self._apply(booking_id=booking_id, resolve_target=resolve_target, actor=actor)

    async def _apply(
        self,
        *,
        booking_id: UUID,
        resolve_target: Callable[[Booking], BookingStatus],
        actor: ActorContext,
    ) -> Booking:
        with self.tracer.start_as_current_span(
            'use_case.update_booking_status',
            attributes={'booking.id': str(booking_id), 'actor.role': actor.role},
        ):
            async with self.uow:
                booking = await self.uow.booking_command_repo.get_by_id_for_update(
                    booking_id=booking_id
                )
                if not booking:
                    raise NotFoundError('Booking not found')

                target = resolve_target(booking)
                self._authorize(booking=booking, target=target, actor=actor)

                try:
                    updated = booking.transition(target=target, actor=actor)
                    await self.uow.booking_command_repo.update_status(
                        booking=updated, expected_status=booking.status
                    )
                except ConflictError:
                    metrics.record_transition(
                        source_status=booking.status, target_status=target, result='conflict'
                    )
                    raise

                if (
                    target == BookingStatus.COMPLETED
                    and booking.customer_kind == CustomerKind.CUSTOMER
                    and booking.customer_id
                ):
                    await self.uow.referral_credit_repo.record_successful_referral(
                        referee_user_id=booking.customer_id
                    )

                await self.uow.audit_log_repo.add(
                    entry=AuditLogEntry.record(
                        action=AuditAction.BOOKING_STATUS_CHANGED,
                        actor=actor,
                        target_id=str(booking.id),
                        details={'from': booking.status.value, 'to': target.value},
                    )
                )
                await self.uow.commit()

            metrics.record_transition(
                source_status=booking.status, target_status=target, result='ok'
            )
            Logger.base.info(
                f'🔄 [BOOKING] {booking.booking_number}: {booking.status} -> {target} by {actor.actor_id}'
            )
            return updated

from decimal import Decimal
import time
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.app.business_clock import Clock, business_now
from src.service.booking.app.command.consume_referral_credit_use_case import (
    ConsumeReferralCreditUseCase,
)
from src.service.booking.app.command.redeem_promo_code_use_case import RedeemPromoCodeUseCase
from src.service.booking.app.command.update_booking_status_use_case import (
    UpdateBookingStatusUseCase,
)
from src.service.booking.app.discount_resolver import resolve_discounts
from src.service.booking.domain.booking_errors import SlotNoLongerAvailable
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enums import AuditAction, BookingSource
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.domain.pricing_domain import compute_price
from src.service.booking.domain.slot_availability_domain import is_slot_available
from src.service.booking.domain.value_object.actor_context import (
    ActorContext,
    CustomerActor,
    StaffActor,
    SystemActor,
)
from src.service.booking.domain.value_object.booking_request import BookingRequest


class CreateBookingUseCase:
    """
    Reserve a slot and create a booking

    Flow:
    1. One transaction: load closed and booked slots for the date, check the
       requested slot, price the selection, insert the booking as pending.
       The partial unique index turns a lost race into SlotNoLongerAvailable.
    2. After commit, one more transaction: redeem the promo code and consume
       the referral credit. Both land or neither does.
    3. If redemption fails for any reason, the system cancels the booking and
       the error propagates.

    The price is always computed here; a client-supplied price is never accepted.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        settings: Settings,
        clock: Optional[Clock] = None,
    ) -> None:
        self.uow = uow
        self.settings = settings
        self.clock = clock or (lambda: business_now(settings.BUSINESS_TIMEZONE))
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow=uow, settings=settings)

    @Logger.io
    async def execute(self, *, request: BookingRequest, actor: ActorContext) -> Booking:
        """
        Args:
            request: Validated selection, date, slot, location and payment method
            actor: Customer, guest or staff placing the booking

        Returns:
            The created booking in pending status

        Raises:
            SlotNoLongerAvailable: slot closed, in the past, or taken (also by a concurrent request)
            NoPriceForSelection / InvalidAddOn: selection cannot be priced
            PromoNotFound / PromoInactive / PromoExpired / PromoExhausted / PromoNotApplicable
        """
        booking_id = uuid_utils.uuid7()
        source = BookingSource.STAFF if isinstance(actor, StaffActor) else BookingSource.CUSTOMER
        started = time.perf_counter()

        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={
                'booking.id': str(booking_id),
                'booking.date': request.booking_date.isoformat(),
                'booking.time': request.time_slot.id,
                'actor.role': actor.role,
            },
        ):
            try:
                booking = await self._reserve_and_create(
                    booking_id=booking_id, request=request, actor=actor
                )
            except SlotNoLongerAvailable:
                metrics.record_slot_conflict(operation='create')
                metrics.record_booking(
                    source=source, result='slot_taken', duration=time.perf_counter() - started
                )
                raise
            except CustomBaseError:
                metrics.record_booking(
                    source=source, result='rejected', duration=time.perf_counter() - started
                )
                raise

            try:
                await self._redeem(booking=booking, actor=actor)
            except CustomBaseError:
                metrics.record_booking(
                    source=source,
                    result='redemption_failed',
                    duration=time.perf_counter() - started,
                )
                raise

            metrics.record_booking(
                source=source, result='created', duration=time.perf_counter() - started
            )
            Logger.base.info(
                f'✅ [BOOKING] Created {booking.booking_number} for {request.booking_date} '
                f'{request.time_slot.id}, total {booking.price}'
            )
            return booking

    async def _reserve_and_create(
        self, *, booking_id: uuid_utils.UUID, request: BookingRequest, actor: ActorContext
    ) -> Booking:
        now = self.clock()
        async with self.uow:
            closed = await self.uow.closed_slot_repo.get(booking_date=request.booking_date)
            booked = await self.uow.booking_command_repo.list_active_slot_ids(
                booking_date=request.booking_date
            )
            if not is_slot_available(
                slot_id=request.time_slot.id,
                booking_date=request.booking_date,
                now=now,
                booked_slot_ids=booked,
                closed_slot_ids=closed.slot_ids,
            ):
                raise SlotNoLongerAvailable(request.booking_date, request.time_slot.id)

            catalog = await self.uow.pricing_config_repo.get_package_catalog()
            add_on_config = await self.uow.pricing_config_repo.get_add_on_config()
            discounts = await resolve_discounts(
                selection=request.service,
                actor=actor,
                promo_code_repo=self.uow.promo_code_repo,
                referral_credit_repo=self.uow.referral_credit_repo,
                now=now,
            )
            price_breakdown = compute_price(
                selection=request.service,
                catalog=catalog,
                add_on_config=add_on_config,
                promo_discount=discounts.promo_discount,
                referral_discount=discounts.referral_discount,
                subscription_discount_rate=Decimal(str(self.settings.SUBSCRIPTION_DISCOUNT_RATE)),
            )

            booking = Booking.create(
                id=booking_id,
                request=request,
                actor=actor,
                price_breakdown=price_breakdown,
                promo_code_id=discounts.promo_code.id if discounts.promo_code else None,
                promo_discount=discounts.promo_discount,
                referral_discount=discounts.referral_discount,
            )
            await self.uow.booking_command_repo.create(booking=booking)
            await self.uow.audit_log_repo.add(
                entry=AuditLogEntry.record(
                    action=(
                        AuditAction.STAFF_ORDER_CREATED
                        if isinstance(actor, StaffActor)
                        else AuditAction.BOOKING_CREATED
                    ),
                    actor=actor,
                    target_id=str(booking.id),
                    details={
                        'booking_number': booking.booking_number,
                        'date': booking.booking_date.isoformat(),
                        'time': booking.time,
                        'package_id': booking.package_id,
                        'price': booking.price,
                    },
                )
            )
            await self.uow.commit()
        return booking

    async def _redeem(self, *, booking: Booking, actor: ActorContext) -> None:
        referee = (
            actor
            if isinstance(actor, CustomerActor) and booking.referral_discount is not None
            else None
        )
        if booking.promo_code_id is None and referee is None:
            return

        promo_redemption = RedeemPromoCodeUseCase(uow=self.uow)
        referral_consumption = ConsumeReferralCreditUseCase(uow=self.uow)
        try:
            # Promo use and referral credit are committed together or not at all
            async with self.uow:
                promo_redeemed = False
                if booking.promo_code_id is not None:
                    promo_redeemed = await promo_redemption.redeem(
                        promo_code_id=booking.promo_code_id, booking=booking, actor=actor
                    )
                if referee is not None:
                    await referral_consumption.consume(
                        user_id=referee.user_id, booking_id=booking.id, actor=actor
                    )
                await self.uow.commit()
        except CustomBaseError as e:
            Logger.base.warning(
                f'⚠️ [BOOKING] Redemption failed for {booking.booking_number}, cancelling: {e.message}'
            )
            await self._cancel_unredeemed(booking=booking, error=e)
            raise

        if booking.promo_code_id is not None:
            metrics.record_redemption(
                kind='promo', result='redeemed' if promo_redeemed else 'duplicate'
            )
        if referee is not None:
            metrics.record_redemption(kind='referral', result='consumed')

    async def _cancel_unredeemed(self, *, booking: Booking, error: CustomBaseError) -> None:
        try:
            await UpdateBookingStatusUseCase(uow=self.uow).execute(
                booking_id=booking.id,
                target_status=BookingStatus.CANCELLED,
                actor=SystemActor(reason=f'redemption failed: {type(error).__name__}'),
            )
        except CustomBaseError as cancel_error:
            # The redemption error still propagates to the caller
            Logger.base.error(
                f'💥 [BOOKING] Could not cancel {booking.booking_number}: {cancel_error.message}'
            )

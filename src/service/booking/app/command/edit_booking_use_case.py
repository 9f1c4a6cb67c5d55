from decimal import Decimal
from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.app.business_clock import Clock, business_now
from src.service.booking.domain.booking_errors import (
    InvalidSelection,
    PromoNotApplicable,
    SlotNoLongerAvailable,
)
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.entity.booking_entity import Booking, BookingEdit
from src.service.booking.domain.enum.booking_enums import AuditAction
from src.service.booking.domain.pricing_domain import compute_price
from src.service.booking.domain.slot_availability_domain import is_slot_available
from src.service.booking.domain.value_object.actor_context import ActorContext, StaffActor
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown
from src.service.booking.domain.value_object.time_slot import get_time_slot


class EditBookingUseCase:
    """
    Staff / manager edit of an active booking

    - A package change re-prices from the stored selection and discount snapshots
    - An explicit price override is manager-only and excludes a package change
    - A date / time change re-checks availability, ignoring the booking's own slot
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

    @staticmethod
    def _validate_request(*, edit: BookingEdit, actor: ActorContext) -> BookingEdit:
        if not isinstance(actor, StaffActor):
            raise ForbiddenError('Only staff can edit bookings')
        if edit.is_empty:
            raise InvalidSelection('Nothing to change')
        if edit.package_id is not None and edit.price is not None:
            raise InvalidSelection('Change the package or override the price, not both')
        if edit.price is not None and not actor.is_manager:
            raise ForbiddenError('Only managers can override the price')
        if edit.time is not None:
            get_time_slot(edit.time)
        if edit.package_id is not None:
            edit = attrs.evolve(edit, package_id=edit.package_id.strip().lower())
        return edit

    async def _reprice(self, *, booking: Booking, package_id: str) -> PriceBreakdown:
        if booking.promo_code_id is not None:
            promo_code = await self.uow.promo_code_repo.get_by_id(
                promo_code_id=booking.promo_code_id
            )
            # Only applicability is rechecked; the code was redeemed at creation
            if (
                promo_code is not None
                and promo_code.applicable_packages
                and package_id not in promo_code.applicable_packages
            ):
                raise PromoNotApplicable(
                    f'Promo code {promo_code.code} does not apply to {package_id}'
                )

        catalog = await self.uow.pricing_config_repo.get_package_catalog()
        add_on_config = await self.uow.pricing_config_repo.get_add_on_config()
        return compute_price(
            selection=booking.selection.with_package(package_id),
            catalog=catalog,
            add_on_config=add_on_config,
            promo_discount=booking.promo_discount,
            referral_discount=booking.referral_discount,
            subscription_discount_rate=Decimal(str(self.settings.SUBSCRIPTION_DISCOUNT_RATE)),
        )

    async def _check_new_slot(self, *, booking: Booking, edit: BookingEdit) -> None:
        new_date = edit.booking_date or booking.booking_date
        new_time = edit.time or booking.time
        if (new_date, new_time) == (booking.booking_date, booking.time):
            return

        closed = await self.uow.closed_slot_repo.get(booking_date=new_date)
        booked = await self.uow.booking_command_repo.list_active_slot_ids(
            booking_date=new_date, exclude_booking_id=booking.id
        )
        if not is_slot_available(
            slot_id=new_time,
            booking_date=new_date,
            now=self.clock(),
            booked_slot_ids=booked,
            closed_slot_ids=closed.slot_ids,
        ):
            raise SlotNoLongerAvailable(new_date, new_time)

    @Logger.io
    async def execute(self, *, booking_id: UUID, edit: BookingEdit, actor: ActorContext) -> Booking:
        edit = self._validate_request(edit=edit, actor=actor)

        with self.tracer.start_as_current_span(
            'use_case.edit_booking',
            attributes={'booking.id': str(booking_id), 'actor.role': actor.role},
        ):
            async with self.uow:
                booking = await self.uow.booking_command_repo.get_by_id_for_update(
                    booking_id=booking_id
                )
                if not booking:
                    raise NotFoundError('Booking not found')
                booking.validate_editable()

                price_breakdown = None
                if edit.package_id is not None:
                    price_breakdown = await self._reprice(
                        booking=booking, package_id=edit.package_id
                    )

                try:
                    if edit.changes_slot:
                        await self._check_new_slot(booking=booking, edit=edit)
                    updated = booking.apply_edit(
                        edit=edit, actor=actor, price_breakdown=price_breakdown
                    )
                    await self.uow.booking_command_repo.update_details(booking=updated)
                except SlotNoLongerAvailable:
                    metrics.record_slot_conflict(operation='edit')
                    raise

                await self.uow.audit_log_repo.add(
                    entry=AuditLogEntry.record(
                        action=AuditAction.BOOKING_EDITED,
                        actor=actor,
                        target_id=str(booking.id),
                        details={
                            'changes': {
                                key: value
                                for key, value in attrs.asdict(edit, recurse=True).items()
                                if value is not None
                            },
                            'previous_price': booking.price,
                            'price': updated.price,
                        },
                    )
                )
                await self.uow.commit()

            Logger.base.info(f'✏️ [BOOKING] {booking.booking_number} edited by {actor.actor_id}')
            return updated

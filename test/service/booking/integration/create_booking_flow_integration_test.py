"""
Integration tests for the booking flow through real units of work

Test Focus:
1. Two customers racing for the same slot: exactly one wins
2. Promo codes are redeemed once per booking and respect max_uses
3. Referral discount is consumed once; completing the booking credits the referrer
4. Promo use and referral credit are redeemed together or not at all
"""

import asyncio
from typing import Callable
from unittest.mock import patch

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine
import uuid_utils

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.booking.app.command.apply_referral_code_use_case import ApplyReferralCodeUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.get_or_create_referral_credit_use_case import (
    GetOrCreateReferralCreditUseCase,
)
from src.service.booking.app.command.manage_promo_code_use_case import ManagePromoCodeUseCase
from src.service.booking.app.command.redeem_promo_code_use_case import RedeemPromoCodeUseCase
from src.service.booking.app.command.update_booking_status_use_case import (
    UpdateBookingStatusUseCase,
)
from src.service.booking.domain.booking_errors import (
    PromoExhausted,
    PromoNotApplicable,
    ReferralCreditConsumed,
    SlotNoLongerAvailable,
)
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enums import DiscountType
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.domain.value_object.actor_context import CustomerActor
from test.constants import ANOTHER_CUSTOMER_ID, ANOTHER_CUSTOMER_PHONE
from test.service.booking.fixtures import (
    CUSTOMER,
    GUEST,
    MANAGER,
    STAFF,
    TOMORROW,
    fixed_clock,
    make_request,
    make_selection,
)


UowFactory = Callable[[], SqlAlchemyUnitOfWork]


def create_use_case(uow_factory: UowFactory) -> CreateBookingUseCase:
    return CreateBookingUseCase(uow=uow_factory(), settings=Settings(), clock=fixed_clock())


@pytest.mark.integration
class TestConcurrentBooking:
    @pytest.mark.asyncio
    async def test_only_one_of_two_concurrent_bookings_wins(self, file_engine: AsyncEngine) -> None:
        """
        Core test: the slot invariant holds under concurrency

        Given: a free 14:00 slot tomorrow
        When: a customer and a guest book it at the same time on separate connections
        Then:
          - exactly one booking is created
          - the other request fails with SlotNoLongerAvailable
          - the slot holds a single active booking
        """
        # Arrange
        database = Database(engine=file_engine)

        def uow_factory() -> SqlAlchemyUnitOfWork:
            return SqlAlchemyUnitOfWork(session_factory=database.session)

        # Act
        results = await asyncio.gather(
            create_use_case(uow_factory).execute(request=make_request(), actor=CUSTOMER),
            create_use_case(uow_factory).execute(request=make_request(), actor=GUEST),
            return_exceptions=True,
        )

        # Assert
        created = [result for result in results if isinstance(result, Booking)]
        refused = [result for result in results if isinstance(result, SlotNoLongerAvailable)]
        assert len(created) == 1, results
        assert len(refused) == 1, results

        async with uow_factory() as uow:
            booked = await uow.booking_command_repo.list_active_slot_ids(booking_date=TOMORROW)
        assert booked == {'14:00'}


@pytest.mark.integration
class TestPromoRedemption:
    @pytest.mark.asyncio
    async def test_single_use_promo(self, uow_factory: UowFactory) -> None:
        # Arrange
        await ManagePromoCodeUseCase(uow=uow_factory()).create(
            code='ONCE',
            discount_type=DiscountType.FIXED,
            discount_value=5,
            max_uses=1,
            actor=MANAGER,
        )

        # Act
        booking = await create_use_case(uow_factory).execute(
            request=make_request(selection=make_selection(promo_code='once')), actor=CUSTOMER
        )

        # Assert
        assert booking.price == 40
        async with uow_factory() as uow:
            promo_code = await uow.promo_code_repo.get_by_code(code='ONCE')
        assert promo_code is not None
        assert promo_code.current_uses == 1

        # Redeeming the same booking again changes nothing
        redeemed_again = await RedeemPromoCodeUseCase(uow=uow_factory()).execute(
            promo_code_id=promo_code.id, booking_id=booking.id, actor=CUSTOMER
        )
        assert redeemed_again is False

        # The only use is taken
        with pytest.raises(PromoExhausted):
            await create_use_case(uow_factory).execute(
                request=make_request(
                    selection=make_selection(promo_code='ONCE'), time='16:00'
                ),
                actor=GUEST,
            )

    @pytest.mark.asyncio
    async def test_redeeming_a_code_the_booking_was_not_priced_with_is_refused(
        self, uow_factory: UowFactory
    ) -> None:
        # Arrange
        manage = ManagePromoCodeUseCase(uow=uow_factory())
        await manage.create(
            code='FIVEOFF', discount_type=DiscountType.FIXED, discount_value=5, actor=MANAGER
        )
        other = await manage.create(
            code='TENOFF', discount_type=DiscountType.FIXED, discount_value=10, actor=MANAGER
        )
        booking = await create_use_case(uow_factory).execute(
            request=make_request(selection=make_selection(promo_code='FIVEOFF')), actor=CUSTOMER
        )
        plain_booking = await create_use_case(uow_factory).execute(
            request=make_request(time='16:00'), actor=GUEST
        )

        # Act / Assert
        for booking_id in (booking.id, plain_booking.id):
            with pytest.raises(PromoNotApplicable):
                await RedeemPromoCodeUseCase(uow=uow_factory()).execute(
                    promo_code_id=other.id, booking_id=booking_id, actor=STAFF
                )

        async with uow_factory() as uow:
            unused = await uow.promo_code_repo.get_by_id(promo_code_id=other.id)
        assert unused is not None
        assert unused.current_uses == 0


@pytest.mark.integration
class TestReferralFlow:
    @pytest.mark.asyncio
    async def test_referral_discount_used_once_and_referrer_credited(
        self, uow_factory: UowFactory
    ) -> None:
        # Arrange: another customer refers our customer
        referrer = await GetOrCreateReferralCreditUseCase(uow=uow_factory()).execute(
            user_id=ANOTHER_CUSTOMER_ID
        )
        await ApplyReferralCodeUseCase(uow=uow_factory(), settings=Settings()).execute(
            user_id=CUSTOMER.user_id, referral_code=referrer.referral_code
        )

        # Act: first booking uses the 15% discount, the second pays full price
        first = await create_use_case(uow_factory).execute(request=make_request(), actor=CUSTOMER)
        second = await create_use_case(uow_factory).execute(
            request=make_request(time='16:00'), actor=CUSTOMER
        )

        # Assert
        assert first.price == 38  # 45 - round(6.75)
        assert second.price == 45
        async with uow_factory() as uow:
            with pytest.raises(ReferralCreditConsumed):
                await uow.referral_credit_repo.consume_referee_discount(
                    user_id=CUSTOMER.user_id, booking_id=second.id
                )
            # Consuming again for the booking that used it is a no-op
            assert await uow.referral_credit_repo.consume_referee_discount(
                user_id=CUSTOMER.user_id, booking_id=first.id
            )

        status_use_case = UpdateBookingStatusUseCase(uow=uow_factory())
        for _ in range(4):
            completed = await status_use_case.advance(booking_id=first.id, actor=STAFF)
        assert completed.status == BookingStatus.COMPLETED

        async with uow_factory() as uow:
            credited = await uow.referral_credit_repo.get_by_user_id(user_id=ANOTHER_CUSTOMER_ID)
        assert credited is not None
        assert credited.successful_referrals == 1
        assert credited.pending_referrals == 0

    @pytest.mark.asyncio
    async def test_lost_referral_rolls_back_promo_use_and_cancels_booking(
        self, uow_factory: UowFactory
    ) -> None:
        """
        Given: a referred customer books with a promo code
        When: the referral discount is used by another booking between pricing and redemption
        Then: ReferralCreditConsumed propagates, the promo use is not kept,
              and the booking is cancelled
        """
        # Arrange
        referrer = await GetOrCreateReferralCreditUseCase(uow=uow_factory()).execute(
            user_id=ANOTHER_CUSTOMER_ID
        )
        await ApplyReferralCodeUseCase(uow=uow_factory(), settings=Settings()).execute(
            user_id=CUSTOMER.user_id, referral_code=referrer.referral_code
        )
        await ManagePromoCodeUseCase(uow=uow_factory()).create(
            code='TWICE',
            discount_type=DiscountType.FIXED,
            discount_value=5,
            max_uses=2,
            actor=MANAGER,
        )
        created: list[Booking] = []
        reserve_and_create = CreateBookingUseCase._reserve_and_create

        async def reserve_then_lose_referral(
            self: CreateBookingUseCase, **kwargs: object
        ) -> Booking:
            booking = await reserve_and_create(self, **kwargs)  # type: ignore[arg-type]
            created.append(booking)
            async with uow_factory() as uow:
                await uow.referral_credit_repo.consume_referee_discount(
                    user_id=CUSTOMER.user_id, booking_id=uuid_utils.uuid7()
                )
                await uow.commit()
            return booking

        # Act
        with patch.object(CreateBookingUseCase, '_reserve_and_create', reserve_then_lose_referral):
            with pytest.raises(ReferralCreditConsumed):
                await create_use_case(uow_factory).execute(
                    request=make_request(selection=make_selection(promo_code='TWICE')),
                    actor=CUSTOMER,
                )

        # Assert
        async with uow_factory() as uow:
            promo_code = await uow.promo_code_repo.get_by_code(code='TWICE')
            booking = await uow.booking_command_repo.get_by_id(booking_id=created[0].id)
        assert promo_code is not None
        assert promo_code.current_uses == 0
        assert booking is not None
        assert booking.status == BookingStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancelling_own_booking_frees_slot_for_others(
        self, uow_factory: UowFactory
    ) -> None:
        booking = await create_use_case(uow_factory).execute(
            request=make_request(), actor=CUSTOMER
        )

        await UpdateBookingStatusUseCase(uow=uow_factory()).execute(
            booking_id=booking.id, target_status=BookingStatus.CANCELLED, actor=CUSTOMER
        )
        rebooked = await create_use_case(uow_factory).execute(
            request=make_request(),
            actor=CustomerActor(user_id=ANOTHER_CUSTOMER_ID, phone=ANOTHER_CUSTOMER_PHONE),
        )

        assert rebooked.time == booking.time
        assert rebooked.status == BookingStatus.PENDING

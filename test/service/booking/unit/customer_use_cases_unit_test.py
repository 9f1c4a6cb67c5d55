"""
Unit tests for the customer-facing use cases around a booking

Test Focus:
1. Guest migration: own phone only, idempotent count, audited only when something moved
2. Guest sessions: phone normalized on issue, a missing token is ABSENT
3. Price quote: monthly total only for subscriptions, anonymous quotes skip referral
4. Listing and duplicate checks are scoped to the caller
5. Referral codes: the referrer slot is claimed atomically
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import ForbiddenError
from src.service.booking.app.command.apply_referral_code_use_case import ApplyReferralCodeUseCase
from src.service.booking.app.command.guest_session_use_case import GuestSessionUseCase
from src.service.booking.app.command.migrate_guest_bookings_use_case import (
    MigrateGuestBookingsUseCase,
)
from src.service.booking.app.interface.i_booking_query_repo import BookingFilter
from src.service.booking.app.query.check_duplicate_booking_use_case import (
    CheckDuplicateBookingUseCase,
)
from src.service.booking.app.query.compute_price_use_case import ComputePriceUseCase
from src.service.booking.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.booking.domain.booking_errors import ReferralCodeInvalid
from src.service.booking.domain.entity.referral_credit_entity import ReferralCredit
from src.service.booking.domain.enum.booking_enums import (
    AuditAction,
    CustomerKind,
    DiscountType,
    GuestSessionStatus,
)
from src.service.booking.domain.value_object.actor_context import CustomerActor, SystemActor
from src.service.booking.domain.value_object.discount import Discount
from src.service.booking.domain.value_object.pricing_catalog import (
    DEFAULT_ADD_ON_CONFIG,
    DEFAULT_PACKAGE_CATALOG,
)
from test.constants import (
    ANOTHER_CUSTOMER_ID,
    ANOTHER_CUSTOMER_PHONE,
    CUSTOMER_ID,
    GUEST_PHONE,
    GUEST_PHONE_LOCAL,
)
from test.service.booking.fixtures import (
    CUSTOMER,
    GUEST,
    STAFF,
    TOMORROW,
    MockUnitOfWork,
    fixed_clock,
    make_selection,
)


@pytest.mark.unit
class TestMigrateGuestBookings:
    @pytest.mark.asyncio
    async def test_migrates_bookings_made_with_own_phone(self) -> None:
        # Arrange
        uow = MockUnitOfWork()
        uow.booking_command_repo.migrate_guest_bookings.return_value = 3

        # Act
        migrated = await MigrateGuestBookingsUseCase(uow=uow).execute(
            actor=CUSTOMER, phone=GUEST_PHONE_LOCAL
        )

        # Assert
        assert migrated == 3
        uow.booking_command_repo.migrate_guest_bookings.assert_awaited_once_with(
            user_id=CUSTOMER.user_id, phone=GUEST_PHONE
        )
        entry = uow.audit_log_repo.add.call_args.kwargs['entry']
        assert entry.action == AuditAction.GUEST_BOOKINGS_MIGRATED
        assert entry.details['count'] == 3

    @pytest.mark.asyncio
    async def test_second_run_migrates_nothing_and_is_not_audited(self) -> None:
        uow = MockUnitOfWork()
        uow.booking_command_repo.migrate_guest_bookings.return_value = 0

        migrated = await MigrateGuestBookingsUseCase(uow=uow).execute(
            actor=CUSTOMER, phone=GUEST_PHONE
        )

        assert migrated == 0
        uow.audit_log_repo.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_someone_elses_phone_is_refused(self) -> None:
        uow = MockUnitOfWork()

        with pytest.raises(ForbiddenError):
            await MigrateGuestBookingsUseCase(uow=uow).execute(
                actor=CUSTOMER, phone=ANOTHER_CUSTOMER_PHONE
            )

        uow.booking_command_repo.migrate_guest_bookings.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_customer_without_phone_is_refused(self) -> None:
        with pytest.raises(ForbiddenError):
            await MigrateGuestBookingsUseCase(uow=MockUnitOfWork()).execute(
                actor=CustomerActor(user_id=CUSTOMER_ID), phone=GUEST_PHONE
            )

    @pytest.mark.asyncio
    async def test_guest_cannot_migrate(self) -> None:
        with pytest.raises(ForbiddenError):
            await MigrateGuestBookingsUseCase(uow=MockUnitOfWork()).execute(
                actor=GUEST, phone=GUEST_PHONE
            )


@pytest.mark.unit
class TestGuestSession:
    @pytest.fixture
    def signer(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def use_case(self, signer: MagicMock) -> GuestSessionUseCase:
        return GuestSessionUseCase(signer=signer, settings=Settings())

    @pytest.mark.asyncio
    async def test_issue_normalizes_phone(
        self, use_case: GuestSessionUseCase, signer: MagicMock
    ) -> None:
        await use_case.issue(phone=GUEST_PHONE_LOCAL)

        signer.issue.assert_called_once_with(phone=GUEST_PHONE)

    @pytest.mark.asyncio
    async def test_missing_token_is_absent(
        self, use_case: GuestSessionUseCase, signer: MagicMock
    ) -> None:
        validation = await use_case.validate(token=None)

        assert validation.status == GuestSessionStatus.ABSENT
        signer.verify.assert_not_called()


@pytest.mark.unit
class TestComputePrice:
    @pytest.fixture
    def referral_credit_repo(self) -> AsyncMock:
        repo = AsyncMock()
        repo.get_by_user_id.return_value = None
        return repo

    @pytest.fixture
    def use_case(self, referral_credit_repo: AsyncMock) -> ComputePriceUseCase:
        pricing_config_repo = AsyncMock()
        pricing_config_repo.get_package_catalog.return_value = DEFAULT_PACKAGE_CATALOG
        pricing_config_repo.get_add_on_config.return_value = DEFAULT_ADD_ON_CONFIG
        return ComputePriceUseCase(
            pricing_config_repo=pricing_config_repo,
            promo_code_repo=AsyncMock(),
            referral_credit_repo=referral_credit_repo,
            settings=Settings(),
            clock=fixed_clock(),
        )

    @pytest.mark.asyncio
    async def test_one_off_quote_has_no_monthly_total(self, use_case: ComputePriceUseCase) -> None:
        quote = await use_case.execute(selection=make_selection())

        assert quote.breakdown.total == 45
        assert quote.monthly_total is None
        assert quote.promo_code is None

    @pytest.mark.asyncio
    async def test_subscription_quote_has_monthly_total(self, use_case: ComputePriceUseCase) -> None:
        quote = await use_case.execute(selection=make_selection(is_subscription=True))

        assert quote.breakdown.subscription_discount > 0
        assert quote.monthly_total == quote.breakdown.total * 4

    @pytest.mark.asyncio
    async def test_anonymous_quote_skips_referral_lookup(
        self, use_case: ComputePriceUseCase, referral_credit_repo: AsyncMock
    ) -> None:
        await use_case.execute(selection=make_selection(), actor=None)

        referral_credit_repo.get_by_user_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_customer_quote_includes_referral_discount(
        self, use_case: ComputePriceUseCase, referral_credit_repo: AsyncMock
    ) -> None:
        credit = ReferralCredit.create(user_id=CUSTOMER.user_id)
        credit.referred_by = ANOTHER_CUSTOMER_ID
        credit.referee_discount = Discount(discount_type=DiscountType.PERCENTAGE, value=20)
        referral_credit_repo.get_by_user_id.return_value = credit

        quote = await use_case.execute(selection=make_selection(), actor=CUSTOMER)

        assert quote.breakdown.total == 36


@pytest.mark.unit
class TestBookingQueriesAreScoped:
    @pytest.fixture
    def booking_query_repo(self) -> AsyncMock:
        repo = AsyncMock()
        repo.list_bookings.return_value = []
        return repo

    @pytest.mark.asyncio
    async def test_customer_filter_is_forced_to_own_bookings(
        self, booking_query_repo: AsyncMock
    ) -> None:
        # A customer asking for someone else's bookings still only gets their own
        requested = BookingFilter(customer_id=ANOTHER_CUSTOMER_ID, booking_date=TOMORROW)

        await ListBookingsUseCase(booking_query_repo=booking_query_repo).execute(
            booking_filter=requested, actor=CUSTOMER
        )

        used = booking_query_repo.list_bookings.call_args.kwargs['booking_filter']
        assert used.customer_kind == CustomerKind.CUSTOMER
        assert used.customer_id == CUSTOMER.user_id
        assert used.booking_date == TOMORROW

    @pytest.mark.asyncio
    async def test_guest_sees_own_session_only(self, booking_query_repo: AsyncMock) -> None:
        await ListBookingsUseCase(booking_query_repo=booking_query_repo).execute(
            booking_filter=BookingFilter(), actor=GUEST
        )

        used = booking_query_repo.list_bookings.call_args.kwargs['booking_filter']
        assert used.customer_kind == CustomerKind.GUEST
        assert used.guest_session_id == GUEST.session_id

    @pytest.mark.asyncio
    async def test_staff_filter_is_kept(self, booking_query_repo: AsyncMock) -> None:
        requested = BookingFilter(customer_phone=GUEST_PHONE)

        await ListBookingsUseCase(booking_query_repo=booking_query_repo).execute(
            booking_filter=requested, actor=STAFF
        )

        booking_query_repo.list_bookings.assert_awaited_once_with(booking_filter=requested)

    @pytest.mark.asyncio
    async def test_system_actor_cannot_list(self, booking_query_repo: AsyncMock) -> None:
        with pytest.raises(ForbiddenError):
            await ListBookingsUseCase(booking_query_repo=booking_query_repo).execute(
                booking_filter=BookingFilter(), actor=SystemActor(reason='test')
            )

    @pytest.mark.asyncio
    async def test_staff_duplicate_check_matches_normalized_phone(
        self, booking_query_repo: AsyncMock
    ) -> None:
        await CheckDuplicateBookingUseCase(booking_query_repo=booking_query_repo).execute(
            booking_date=TOMORROW, actor=STAFF, customer_phone=GUEST_PHONE_LOCAL
        )

        used = booking_query_repo.list_bookings.call_args.kwargs['booking_filter']
        assert used.customer_phone == GUEST_PHONE
        assert used.active_only

    @pytest.mark.asyncio
    async def test_staff_duplicate_check_without_phone_is_empty(
        self, booking_query_repo: AsyncMock
    ) -> None:
        duplicates = await CheckDuplicateBookingUseCase(
            booking_query_repo=booking_query_repo
        ).execute(booking_date=TOMORROW, actor=STAFF)

        assert duplicates == []
        booking_query_repo.list_bookings.assert_not_awaited()


@pytest.mark.unit
class TestApplyReferralCode:
    @pytest.fixture
    def referrer(self) -> ReferralCredit:
        return ReferralCredit.create(user_id=ANOTHER_CUSTOMER_ID)

    @pytest.fixture
    def uow(self, referrer: ReferralCredit) -> MockUnitOfWork:
        uow = MockUnitOfWork()
        repo = uow.referral_credit_repo
        repo.create.side_effect = lambda *, credit: credit
        repo.get_by_code.return_value = referrer
        repo.increment_pending_referral.return_value = True
        repo.save_referee.side_effect = lambda *, credit: credit
        return uow

    @pytest.mark.asyncio
    async def test_first_code_grants_discount(
        self, uow: MockUnitOfWork, referrer: ReferralCredit
    ) -> None:
        updated = await ApplyReferralCodeUseCase(uow=uow, settings=Settings()).execute(
            user_id=CUSTOMER_ID, referral_code=referrer.referral_code
        )

        assert updated.referred_by == referrer.user_id
        assert updated.referee_discount == Discount(
            discount_type=DiscountType.PERCENTAGE, value=15
        )
        uow.referral_credit_repo.increment_pending_referral.assert_awaited_once_with(
            referrer_user_id=referrer.user_id, max_referrals=50
        )
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_referrer_filled_up_concurrently(
        self, uow: MockUnitOfWork, referrer: ReferralCredit
    ) -> None:
        uow.referral_credit_repo.increment_pending_referral.return_value = False

        with pytest.raises(ReferralCodeInvalid):
            await ApplyReferralCodeUseCase(uow=uow, settings=Settings()).execute(
                user_id=CUSTOMER_ID, referral_code=referrer.referral_code
            )

        uow.referral_credit_repo.save_referee.assert_not_awaited()

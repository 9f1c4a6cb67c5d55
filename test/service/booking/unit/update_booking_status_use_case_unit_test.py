"""
Unit tests for UpdateBookingStatusUseCase

Test Focus:
1. Staff move bookings along the lifecycle; each change is compare-and-set
2. Customers and guests may only cancel bookings they own
3. Completing a customer's booking credits their referrer
4. Fail Fast: not found, illegal transition, terminal state, concurrent change
"""

import pytest
import uuid_utils

from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.service.booking.app.command.update_booking_status_use_case import (
    UpdateBookingStatusUseCase,
)
from src.service.booking.domain.booking_errors import (
    ConcurrentModification,
    IllegalTransition,
    TerminalState,
)
from src.service.booking.domain.enum.booking_enums import AuditAction
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.domain.value_object.actor_context import CustomerActor
from test.constants import ANOTHER_CUSTOMER_ID
from test.service.booking.fixtures import CUSTOMER, GUEST, STAFF, MockUnitOfWork, make_booking


@pytest.mark.unit
class TestUpdateBookingStatus:
    @pytest.fixture
    def uow(self) -> MockUnitOfWork:
        return MockUnitOfWork()

    @pytest.fixture
    def use_case(self, uow: MockUnitOfWork) -> UpdateBookingStatusUseCase:
        return UpdateBookingStatusUseCase(uow=uow)

    @pytest.mark.asyncio
    async def test_staff_confirms_pending_booking(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        # Arrange
        booking = make_booking()
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        # Act
        updated = await use_case.execute(
            booking_id=booking.id, target_status=BookingStatus.CONFIRMED, actor=STAFF
        )

        # Assert
        assert updated.status == BookingStatus.CONFIRMED
        assert updated.confirmed_at is not None
        uow.booking_command_repo.update_status.assert_awaited_once_with(
            booking=updated, expected_status=BookingStatus.PENDING
        )
        entry = uow.audit_log_repo.add.call_args.kwargs['entry']
        assert entry.action == AuditAction.BOOKING_STATUS_CHANGED
        assert entry.details == {'from': 'pending', 'to': 'confirmed'}
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_customer_cancels_own_booking(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        booking = make_booking(actor=CUSTOMER, status=BookingStatus.CONFIRMED)
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        updated = await use_case.execute(
            booking_id=booking.id, target_status=BookingStatus.CANCELLED, actor=CUSTOMER
        )

        assert updated.status == BookingStatus.CANCELLED
        assert updated.cancelled_at is not None

    @pytest.mark.asyncio
    async def test_guest_cancels_own_booking(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        booking = make_booking(actor=GUEST)
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        updated = await use_case.execute(
            booking_id=booking.id, target_status=BookingStatus.CANCELLED, actor=GUEST
        )

        assert updated.status == BookingStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_customer_cannot_cancel_someone_elses_booking(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        booking = make_booking(actor=CUSTOMER)
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                booking_id=booking.id,
                target_status=BookingStatus.CANCELLED,
                actor=CustomerActor(user_id=ANOTHER_CUSTOMER_ID),
            )

        uow.booking_command_repo.update_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_customer_cannot_confirm(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        booking = make_booking(actor=CUSTOMER)
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        with pytest.raises(ForbiddenError):
            await use_case.execute(
                booking_id=booking.id, target_status=BookingStatus.CONFIRMED, actor=CUSTOMER
            )

    @pytest.mark.asyncio
    async def test_booking_not_found(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        uow.booking_command_repo.get_by_id_for_update.return_value = None

        with pytest.raises(NotFoundError, match='Booking not found'):
            await use_case.execute(
                booking_id=uuid_utils.uuid7(), target_status=BookingStatus.CONFIRMED, actor=STAFF
            )

    @pytest.mark.asyncio
    async def test_skipping_a_step_is_illegal(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        booking = make_booking()
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        with pytest.raises(IllegalTransition):
            await use_case.execute(
                booking_id=booking.id, target_status=BookingStatus.COMPLETED, actor=STAFF
            )

        assert uow.commits == 0

    @pytest.mark.asyncio
    async def test_cancelled_booking_cannot_change(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        booking = make_booking(status=BookingStatus.CANCELLED)
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        with pytest.raises(TerminalState):
            await use_case.execute(
                booking_id=booking.id, target_status=BookingStatus.CONFIRMED, actor=STAFF
            )

    @pytest.mark.asyncio
    async def test_status_changed_underneath_raises_conflict(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        booking = make_booking()
        uow.booking_command_repo.get_by_id_for_update.return_value = booking
        uow.booking_command_repo.update_status.side_effect = ConcurrentModification('stale')

        with pytest.raises(ConcurrentModification):
            await use_case.execute(
                booking_id=booking.id, target_status=BookingStatus.CONFIRMED, actor=STAFF
            )

        assert uow.commits == 0

    @pytest.mark.asyncio
    async def test_completing_customer_booking_credits_referrer(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        booking = make_booking(actor=CUSTOMER, status=BookingStatus.IN_PROGRESS)
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        await use_case.execute(
            booking_id=booking.id, target_status=BookingStatus.COMPLETED, actor=STAFF
        )

        uow.referral_credit_repo.record_successful_referral.assert_awaited_once_with(
            referee_user_id=CUSTOMER.user_id
        )

    @pytest.mark.asyncio
    async def test_completing_guest_booking_credits_nobody(
        self, use_case: UpdateBookingStatusUseCase, uow: MockUnitOfWork
    ) -> None:
        booking = make_booking(actor=GUEST, status=BookingStatus.IN_PROGRESS)
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        await use_case.execute(
            booking_id=booking.id, target_status=BookingStatus.COMPLETED, actor=STAFF
        )

        uow.referral_credit_repo.record_successful_referral.assert_not_awaited()


@pytest.mark.unit
class TestAdvanceBooking:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'source,expected',
        [
            (BookingStatus.PENDING, BookingStatus.CONFIRMED),
            (BookingStatus.CONFIRMED, BookingStatus.ON_THE_WAY),
            (BookingStatus.ON_THE_WAY, BookingStatus.IN_PROGRESS),
            (BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED),
        ],
    )
    async def test_advance_moves_to_next_status(
        self, source: BookingStatus, expected: BookingStatus
    ) -> None:
        uow = MockUnitOfWork()
        booking = make_booking(status=source)
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        updated = await UpdateBookingStatusUseCase(uow=uow).advance(
            booking_id=booking.id, actor=STAFF
        )

        assert updated.status == expected

    @pytest.mark.asyncio
    async def test_advance_completed_booking_is_terminal(self) -> None:
        uow = MockUnitOfWork()
        booking = make_booking(status=BookingStatus.COMPLETED)
        uow.booking_command_repo.get_by_id_for_update.return_value = booking

        with pytest.raises(TerminalState):
            await UpdateBookingStatusUseCase(uow=uow).advance(booking_id=booking.id, actor=STAFF)

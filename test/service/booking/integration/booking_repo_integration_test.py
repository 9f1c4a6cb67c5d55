"""
Integration tests for the booking repositories against SQLite

Test Focus:
1. The active-slot unique index: a second active booking on a slot is a conflict
2. Cancelling frees the slot; status updates are compare-and-set
3. Guest migration is one batched update and idempotent
4. Closed slots and add-on prices are versioned; an emptied date has no row
5. Only a key clash on first save reads as a concurrent edit
"""

from typing import Callable

import pytest
from sqlalchemy.exc import IntegrityError

from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.booking.domain.booking_errors import (
    ConcurrentModification,
    SlotNoLongerAvailable,
)
from src.service.booking.domain.entity.booking_entity import BookingEdit
from src.service.booking.domain.entity.closed_slot_config_entity import ClosedSlotConfig
from src.service.booking.domain.enum.booking_enums import CustomerKind
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.domain.value_object.pricing_catalog import (
    DEFAULT_ADD_ON_CONFIG,
    DEFAULT_PACKAGE_CATALOG,
    AddOnConfig,
    AddOnPrice,
)
from test.constants import GUEST_PHONE, MANAGER_EMAIL
from test.service.booking.fixtures import (
    CUSTOMER,
    GUEST,
    MANAGER,
    STAFF,
    TOMORROW,
    make_booking,
    make_request,
)


UowFactory = Callable[[], SqlAlchemyUnitOfWork]


@pytest.mark.integration
class TestBookingCommandRepo:
    @pytest.mark.asyncio
    async def test_second_active_booking_on_slot_is_refused(self, uow_factory: UowFactory) -> None:
        """
        Given: an active booking at 14:00 tomorrow
        When: another booking is inserted for the same slot
        Then: the store refuses it with SlotNoLongerAvailable
        """
        # Arrange
        async with uow_factory() as uow:
            await uow.booking_command_repo.create(booking=make_booking())
            await uow.commit()

        # Act / Assert
        with pytest.raises(SlotNoLongerAvailable):
            async with uow_factory() as uow:
                await uow.booking_command_repo.create(booking=make_booking(actor=GUEST))
                await uow.commit()

    @pytest.mark.asyncio
    async def test_cancelled_booking_frees_the_slot(self, uow_factory: UowFactory) -> None:
        booking = make_booking()
        async with uow_factory() as uow:
            await uow.booking_command_repo.create(booking=booking)
            await uow.commit()

        async with uow_factory() as uow:
            cancelled = booking.transition(target=BookingStatus.CANCELLED, actor=CUSTOMER)
            await uow.booking_command_repo.update_status(
                booking=cancelled, expected_status=BookingStatus.PENDING
            )
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.booking_command_repo.list_active_slot_ids(booking_date=TOMORROW) == set()
            await uow.booking_command_repo.create(booking=make_booking(actor=GUEST))
            await uow.commit()

        async with uow_factory() as uow:
            assert await uow.booking_command_repo.list_active_slot_ids(booking_date=TOMORROW) == {
                '14:00'
            }

    @pytest.mark.asyncio
    async def test_stale_status_update_is_a_conflict(self, uow_factory: UowFactory) -> None:
        booking = make_booking()
        async with uow_factory() as uow:
            await uow.booking_command_repo.create(booking=booking)
            await uow.commit()

        confirmed = booking.transition(target=BookingStatus.CONFIRMED, actor=STAFF)
        async with uow_factory() as uow:
            await uow.booking_command_repo.update_status(
                booking=confirmed, expected_status=BookingStatus.PENDING
            )
            await uow.commit()

        with pytest.raises(ConcurrentModification):
            async with uow_factory() as uow:
                await uow.booking_command_repo.update_status(
                    booking=booking.transition(target=BookingStatus.CANCELLED, actor=STAFF),
                    expected_status=BookingStatus.PENDING,
                )

        async with uow_factory() as uow:
            stored = await uow.booking_command_repo.get_by_id(booking_id=booking.id)
        assert stored is not None
        assert stored.status == BookingStatus.CONFIRMED
        assert stored.confirmed_at is not None

    @pytest.mark.asyncio
    async def test_round_trip_keeps_selection_and_price(self, uow_factory: UowFactory) -> None:
        booking = make_booking(actor=GUEST)
        async with uow_factory() as uow:
            await uow.booking_command_repo.create(booking=booking)
            await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.booking_command_repo.get_by_id(booking_id=booking.id)

        assert stored is not None
        assert stored.booking_number == booking.booking_number
        assert stored.customer_kind == CustomerKind.GUEST
        assert stored.guest_phone == GUEST_PHONE
        assert stored.booking_date == TOMORROW
        assert stored.price == 45
        assert stored.price_breakdown == booking.price_breakdown
        assert stored.location == booking.location

    @pytest.mark.asyncio
    async def test_price_override_round_trip_keeps_breakdown_in_step(
        self, uow_factory: UowFactory
    ) -> None:
        booking = make_booking()
        async with uow_factory() as uow:
            await uow.booking_command_repo.create(booking=booking)
            await uow.commit()

        async with uow_factory() as uow:
            await uow.booking_command_repo.update_details(
                booking=booking.apply_edit(edit=BookingEdit(price=20), actor=MANAGER)
            )
            await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.booking_command_repo.get_by_id(booking_id=booking.id)
        assert stored is not None
        assert stored.price == stored.price_breakdown.total == 20
        assert stored.price_breakdown.manual_adjustment == -25
        assert stored.price_breakdown.computed_total == 45

    @pytest.mark.asyncio
    async def test_reschedule_ignores_own_slot(self, uow_factory: UowFactory) -> None:
        booking = make_booking()
        other = make_booking(actor=GUEST, request=make_request(time='16:00'))
        async with uow_factory() as uow:
            await uow.booking_command_repo.create(booking=booking)
            await uow.booking_command_repo.create(booking=other)
            await uow.commit()

        async with uow_factory() as uow:
            booked = await uow.booking_command_repo.list_active_slot_ids(
                booking_date=TOMORROW, exclude_booking_id=booking.id
            )
        assert booked == {'16:00'}

        # Moving onto the other booking's slot still hits the unique index
        with pytest.raises(SlotNoLongerAvailable):
            async with uow_factory() as uow:
                await uow.booking_command_repo.update_details(
                    booking=booking.apply_edit(edit=BookingEdit(time='16:00'), actor=STAFF)
                )

    @pytest.mark.asyncio
    async def test_guest_migration_is_idempotent(self, uow_factory: UowFactory) -> None:
        # Arrange: two guest bookings made with the customer's phone
        first = make_booking(actor=GUEST)
        second = make_booking(actor=GUEST, request=make_request(time='18:00'))
        async with uow_factory() as uow:
            await uow.booking_command_repo.create(booking=first)
            await uow.booking_command_repo.create(booking=second)
            await uow.commit()

        # Act
        async with uow_factory() as uow:
            migrated = await uow.booking_command_repo.migrate_guest_bookings(
                user_id=CUSTOMER.user_id, phone=GUEST_PHONE
            )
            await uow.commit()
        async with uow_factory() as uow:
            migrated_again = await uow.booking_command_repo.migrate_guest_bookings(
                user_id=CUSTOMER.user_id, phone=GUEST_PHONE
            )
            await uow.commit()

        # Assert
        assert migrated == 2
        assert migrated_again == 0
        async with uow_factory() as uow:
            stored = await uow.booking_command_repo.get_by_id(booking_id=first.id)
        assert stored is not None
        assert stored.customer_kind == CustomerKind.CUSTOMER
        assert stored.customer_id == CUSTOMER.user_id
        assert stored.guest_session_id is None


@pytest.mark.integration
class TestClosedSlotRepo:
    @pytest.mark.asyncio
    async def test_closed_slots_are_compare_and_set(self, uow_factory: UowFactory) -> None:
        async with uow_factory() as uow:
            current = await uow.closed_slot_repo.get(booking_date=TOMORROW)
            assert current.version == 0
            await uow.closed_slot_repo.save(
                config=current.toggle(slot_id='14:00', updated_by=MANAGER_EMAIL),
                expected_version=0,
            )
            await uow.commit()

        # A writer holding the old version loses
        with pytest.raises(ConcurrentModification):
            async with uow_factory() as uow:
                await uow.closed_slot_repo.save(
                    config=current.close_all(updated_by=MANAGER_EMAIL), expected_version=0
                )

        async with uow_factory() as uow:
            stored = await uow.closed_slot_repo.get(booking_date=TOMORROW)
        assert stored.slot_ids == frozenset({'14:00'})
        assert stored.version == 1

    @pytest.mark.asyncio
    async def test_emptied_date_is_deleted(self, uow_factory: UowFactory) -> None:
        config = ClosedSlotConfig.empty(TOMORROW).toggle(slot_id='20:00', updated_by=MANAGER_EMAIL)
        async with uow_factory() as uow:
            await uow.closed_slot_repo.save(config=config, expected_version=0)
            await uow.commit()

        async with uow_factory() as uow:
            await uow.closed_slot_repo.save(
                config=config.open_all(updated_by=MANAGER_EMAIL), expected_version=1
            )
            await uow.commit()

        async with uow_factory() as uow:
            stored = await uow.closed_slot_repo.get(booking_date=TOMORROW)
        # No row left: back to the unsaved default
        assert stored.is_empty
        assert stored.version == 0


@pytest.mark.integration
class TestPricingConfigRepo:
    @pytest.mark.asyncio
    async def test_defaults_without_stored_config(self, uow_factory: UowFactory) -> None:
        async with uow_factory() as uow:
            assert await uow.pricing_config_repo.get_package_catalog() == DEFAULT_PACKAGE_CATALOG
            assert await uow.pricing_config_repo.get_add_on_config() == DEFAULT_ADD_ON_CONFIG

    @pytest.mark.asyncio
    async def test_add_on_config_is_versioned(self, uow_factory: UowFactory) -> None:
        updated = AddOnConfig(
            entries={'exterior_wax': AddOnPrice(price=30)}, version=2, updated_by=MANAGER_EMAIL
        )
        async with uow_factory() as uow:
            await uow.pricing_config_repo.save_add_on_config(config=updated, expected_version=1)
            await uow.commit()

        with pytest.raises(ConcurrentModification):
            async with uow_factory() as uow:
                await uow.pricing_config_repo.save_add_on_config(
                    config=updated, expected_version=1
                )

        async with uow_factory() as uow:
            stored = await uow.pricing_config_repo.get_add_on_config()
        assert stored.version == 2
        assert stored.entries == {'exterior_wax': AddOnPrice(price=30)}
        # Saved without a timestamp: the repository stamps one
        assert stored.updated_at is not None
        assert stored.updated_by == MANAGER_EMAIL

    @pytest.mark.asyncio
    async def test_rejected_write_is_not_reported_as_concurrent_edit(
        self, uow_factory: UowFactory
    ) -> None:
        """
        Given: no stored add-on prices
        When: the first save violates a NOT NULL column
        Then: the store error surfaces instead of ConcurrentModification
        """
        broken = AddOnConfig(
            entries={'exterior_wax': AddOnPrice(price=30)},
            version=None,  # type: ignore[arg-type]
            updated_by=MANAGER_EMAIL,
        )

        with pytest.raises(IntegrityError):
            async with uow_factory() as uow:
                await uow.pricing_config_repo.save_add_on_config(config=broken, expected_version=1)

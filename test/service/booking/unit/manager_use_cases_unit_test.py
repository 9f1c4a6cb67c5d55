"""
Unit tests for the manager console use cases

Test Focus:
1. Only managers close slots, change add-on prices and manage promo codes
2. Closed-slot writes are compare-and-set on the config version
3. A stale add-on version is rejected before anything is written
"""

from unittest.mock import AsyncMock

import pytest
import uuid_utils

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.service.booking.app.command.manage_closed_slots_use_case import ManageClosedSlotsUseCase
from src.service.booking.app.command.manage_promo_code_use_case import ManagePromoCodeUseCase
from src.service.booking.app.command.manage_staff_shift_use_case import ManageStaffShiftUseCase
from src.service.booking.app.command.update_add_on_config_use_case import UpdateAddOnConfigUseCase
from src.service.booking.app.query.get_staffing_signals_use_case import GetStaffingSignalsUseCase
from src.service.booking.domain.booking_errors import (
    ConcurrentModification,
    InvalidAddOn,
    InvalidTimeSlot,
    PromoNotFound,
)
from src.service.booking.domain.entity.closed_slot_config_entity import ClosedSlotConfig
from src.service.booking.domain.enum.booking_enums import AuditAction, DiscountType
from src.service.booking.domain.value_object.pricing_catalog import AddOnPrice
from test.service.booking.fixtures import CUSTOMER, MANAGER, STAFF, TOMORROW, MockUnitOfWork


@pytest.mark.unit
class TestManageClosedSlots:
    @pytest.fixture
    def uow(self) -> MockUnitOfWork:
        uow = MockUnitOfWork()
        uow.closed_slot_repo.save.side_effect = lambda *, config, expected_version: config
        return uow

    @pytest.mark.asyncio
    async def test_staff_cannot_close_slots(self, uow: MockUnitOfWork) -> None:
        with pytest.raises(ForbiddenError):
            await ManageClosedSlotsUseCase(uow=uow).close_all(booking_date=TOMORROW, actor=STAFF)

        uow.closed_slot_repo.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_toggle_on_empty_date_creates_entry(self, uow: MockUnitOfWork) -> None:
        # Act
        saved = await ManageClosedSlotsUseCase(uow=uow).toggle(
            booking_date=TOMORROW, slot_id='14:00', actor=MANAGER
        )

        # Assert
        assert saved.slot_ids == frozenset({'14:00'})
        assert saved.version == 1
        uow.closed_slot_repo.save.assert_awaited_once_with(config=saved, expected_version=0)
        entry = uow.audit_log_repo.add.call_args.kwargs['entry']
        assert entry.action == AuditAction.CLOSED_SLOTS_UPDATED
        assert entry.details == {'operation': 'toggle', 'before': [], 'after': ['14:00']}
        assert uow.commits == 1

    @pytest.mark.asyncio
    async def test_set_slots_rejects_unknown_slot(self, uow: MockUnitOfWork) -> None:
        with pytest.raises(InvalidTimeSlot):
            await ManageClosedSlotsUseCase(uow=uow).set_slots(
                booking_date=TOMORROW, slot_ids=['14:00', '9:00'], actor=MANAGER
            )

    @pytest.mark.asyncio
    async def test_stale_version_propagates(self, uow: MockUnitOfWork) -> None:
        uow.closed_slot_repo.save.side_effect = ConcurrentModification('stale')

        with pytest.raises(ConcurrentModification):
            await ManageClosedSlotsUseCase(uow=uow).open_all(booking_date=TOMORROW, actor=MANAGER)

        assert uow.commits == 0

    @pytest.mark.asyncio
    async def test_open_all_leaves_nothing_closed(self, uow: MockUnitOfWork) -> None:
        uow.closed_slot_repo.get.side_effect = None
        uow.closed_slot_repo.get.return_value = ClosedSlotConfig(
            booking_date=TOMORROW, slot_ids=frozenset({'14:00', '15:00'}), version=2
        )

        saved = await ManageClosedSlotsUseCase(uow=uow).open_all(
            booking_date=TOMORROW, actor=MANAGER
        )

        assert saved.is_empty
        uow.closed_slot_repo.save.assert_awaited_once_with(config=saved, expected_version=2)


@pytest.mark.unit
class TestUpdateAddOnConfig:
    ENTRIES = {'exterior_wax': AddOnPrice(price=30), 'tip': AddOnPrice(price=10, has_custom_amount=True)}

    @pytest.mark.asyncio
    async def test_manager_replaces_prices_and_bumps_version(self) -> None:
        uow = MockUnitOfWork()

        updated = await UpdateAddOnConfigUseCase(uow=uow).execute(
            entries=self.ENTRIES, expected_version=1, actor=MANAGER
        )

        assert updated.version == 2
        assert updated.entries['exterior_wax'].price == 30
        assert updated.updated_by == MANAGER.email
        uow.pricing_config_repo.save_add_on_config.assert_awaited_once_with(
            config=updated, expected_version=1
        )

    @pytest.mark.asyncio
    async def test_stale_version_is_rejected(self) -> None:
        uow = MockUnitOfWork()

        with pytest.raises(ConcurrentModification):
            await UpdateAddOnConfigUseCase(uow=uow).execute(
                entries=self.ENTRIES, expected_version=7, actor=MANAGER
            )

        uow.pricing_config_repo.save_add_on_config.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_negative_price_is_rejected(self) -> None:
        with pytest.raises(InvalidAddOn):
            await UpdateAddOnConfigUseCase(uow=MockUnitOfWork()).execute(
                entries={'tip': AddOnPrice(price=-1)}, expected_version=1, actor=MANAGER
            )

    @pytest.mark.asyncio
    async def test_staff_cannot_change_prices(self) -> None:
        with pytest.raises(ForbiddenError):
            await UpdateAddOnConfigUseCase(uow=MockUnitOfWork()).execute(
                entries=self.ENTRIES, expected_version=1, actor=STAFF
            )


@pytest.mark.unit
class TestManagePromoCode:
    @pytest.mark.asyncio
    async def test_create_normalizes_code_and_audits(self) -> None:
        uow = MockUnitOfWork()

        promo_code = await ManagePromoCodeUseCase(uow=uow).create(
            code=' summer25 ',
            discount_type=DiscountType.PERCENTAGE,
            discount_value=25,
            actor=MANAGER,
        )

        assert promo_code.code == 'SUMMER25'
        assert promo_code.created_by == MANAGER.email
        uow.promo_code_repo.create.assert_awaited_once_with(promo_code=promo_code)
        entry = uow.audit_log_repo.add.call_args.kwargs['entry']
        assert entry.action == AuditAction.PROMO_CODE_CREATED
        assert entry.details['code'] == 'SUMMER25'

    @pytest.mark.asyncio
    async def test_customer_cannot_create(self) -> None:
        with pytest.raises(ForbiddenError):
            await ManagePromoCodeUseCase(uow=MockUnitOfWork()).create(
                code='X', discount_type=DiscountType.FIXED, discount_value=5, actor=CUSTOMER
            )

    @pytest.mark.asyncio
    async def test_toggle_missing_code(self) -> None:
        uow = MockUnitOfWork()
        uow.promo_code_repo.get_by_id.return_value = None

        with pytest.raises(PromoNotFound):
            await ManagePromoCodeUseCase(uow=uow).toggle(
                promo_code_id=uuid_utils.uuid7(), actor=MANAGER
            )


@pytest.mark.unit
class TestStaffShifts:
    @pytest.mark.asyncio
    async def test_removing_unknown_shift_is_not_found(self) -> None:
        uow = MockUnitOfWork()
        uow.staff_shift_repo.remove.return_value = False

        with pytest.raises(NotFoundError):
            await ManageStaffShiftUseCase(uow=uow).remove(
                staff_id=STAFF.staff_id, shift_date=TOMORROW, time_slot='14:00', actor=MANAGER
            )

    @pytest.mark.asyncio
    async def test_signals_combine_bookings_and_shifts(self) -> None:
        booking_query_repo = AsyncMock()
        booking_query_repo.count_active_bookings_by_slot.return_value = {'14:00': 4}
        staff_shift_repo = AsyncMock()
        staff_shift_repo.count_staff_by_slot.return_value = {'14:00': 1}

        signals = await GetStaffingSignalsUseCase(
            booking_query_repo=booking_query_repo,
            staff_shift_repo=staff_shift_repo,
            settings=Settings(),
        ).execute(shift_date=TOMORROW)

        by_slot = {signal.slot_id: signal for signal in signals}
        assert by_slot['14:00'].is_understaffed
        assert not by_slot['15:00'].is_understaffed

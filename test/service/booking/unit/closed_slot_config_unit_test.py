"""
Unit tests for ClosedSlotConfig

Every change bumps the version so the repository can compare-and-set;
an emptied config reports is_empty so its stored entry gets deleted.
"""

import pytest

from src.service.booking.domain.booking_errors import InvalidTimeSlot
from src.service.booking.domain.entity.closed_slot_config_entity import ClosedSlotConfig
from src.service.booking.domain.value_object.time_slot import SLOT_IDS
from test.constants import MANAGER_EMAIL
from test.service.booking.fixtures import TOMORROW


@pytest.mark.unit
class TestClosedSlotConfig:
    @pytest.fixture
    def empty(self) -> ClosedSlotConfig:
        return ClosedSlotConfig.empty(TOMORROW)

    def test_empty_config_has_version_zero(self, empty: ClosedSlotConfig) -> None:
        assert empty.version == 0
        assert empty.is_empty

    def test_set_slots_replaces_set_and_bumps_version(self, empty: ClosedSlotConfig) -> None:
        updated = empty.set_slots(slot_ids=['15:00', '13:00'], updated_by=MANAGER_EMAIL)

        assert updated.slot_ids == frozenset({'13:00', '15:00'})
        assert updated.sorted_slot_ids == ['13:00', '15:00']
        assert updated.version == 1
        assert updated.updated_by == MANAGER_EMAIL

    def test_set_slots_rejects_unknown_ids(self, empty: ClosedSlotConfig) -> None:
        with pytest.raises(InvalidTimeSlot):
            empty.set_slots(slot_ids=['08:00'], updated_by=MANAGER_EMAIL)

    def test_toggle_closes_then_reopens(self, empty: ClosedSlotConfig) -> None:
        closed = empty.toggle(slot_id='20:00', updated_by=MANAGER_EMAIL)
        reopened = closed.toggle(slot_id='20:00', updated_by=MANAGER_EMAIL)

        assert closed.slot_ids == frozenset({'20:00'})
        assert reopened.is_empty
        assert reopened.version == 2

    def test_close_all_and_open_all(self, empty: ClosedSlotConfig) -> None:
        all_closed = empty.close_all(updated_by=MANAGER_EMAIL)

        assert all_closed.sorted_slot_ids == list(SLOT_IDS)
        assert all_closed.open_all(updated_by=MANAGER_EMAIL).is_empty

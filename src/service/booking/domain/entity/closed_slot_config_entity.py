from datetime import date, datetime, timezone
from typing import Optional

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.value_object.time_slot import (
    SLOT_IDS,
    get_time_slot,
    validate_slot_ids,
)


@attrs.define
class ClosedSlotConfig:
    """
    Manually closed slots for one date.

    version 0 means the date has no stored entry yet; an empty set means the
    stored entry must be deleted.
    """

    booking_date: date
    slot_ids: frozenset[str] = attrs.field(factory=frozenset)
    version: int = 0
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    @classmethod
    def empty(cls, booking_date: date) -> 'ClosedSlotConfig':
        return cls(booking_date=booking_date)

    @property
    def is_empty(self) -> bool:
        return not self.slot_ids

    @property
    def sorted_slot_ids(self) -> list[str]:
        return [slot_id for slot_id in SLOT_IDS if slot_id in self.slot_ids]

    def _with_slots(self, slot_ids: frozenset[str], updated_by: str) -> 'ClosedSlotConfig':
        return attrs.evolve(
            self,
            slot_ids=slot_ids,
            version=self.version + 1,
            updated_at=datetime.now(timezone.utc),
            updated_by=updated_by,
        )

    @Logger.io
    def set_slots(self, *, slot_ids: list[str], updated_by: str) -> 'ClosedSlotConfig':
        return self._with_slots(validate_slot_ids(slot_ids), updated_by)

    @Logger.io
    def toggle(self, *, slot_id: str, updated_by: str) -> 'ClosedSlotConfig':
        get_time_slot(slot_id)
        return self._with_slots(self.slot_ids ^ {slot_id}, updated_by)

    @Logger.io
    def close_all(self, *, updated_by: str) -> 'ClosedSlotConfig':
        return self._with_slots(frozenset(SLOT_IDS), updated_by)

    @Logger.io
    def open_all(self, *, updated_by: str) -> 'ClosedSlotConfig':
        return self._with_slots(frozenset(), updated_by)

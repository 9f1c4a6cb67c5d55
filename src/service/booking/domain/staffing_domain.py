from collections.abc import Mapping
import math

import attrs

from src.service.booking.domain.value_object.time_slot import SLOT_CATALOG


@attrs.frozen
class StaffingSignal:
    slot_id: str
    bookings: int
    staff: int
    required_staff: int

    @property
    def is_understaffed(self) -> bool:
        return self.bookings > 0 and self.staff < self.required_staff


def staffing_signals(
    *,
    bookings_per_slot: Mapping[str, int],
    staff_per_slot: Mapping[str, int],
    bookings_per_staff: int = 3,
) -> list[StaffingSignal]:
    """One signal per catalog slot; staffing never affects booking eligibility"""
    return [
        StaffingSignal(
            slot_id=slot.id,
            bookings=bookings_per_slot.get(slot.id, 0),
            staff=staff_per_slot.get(slot.id, 0),
            required_staff=math.ceil(bookings_per_slot.get(slot.id, 0) / bookings_per_staff),
        )
        for slot in SLOT_CATALOG
    ]

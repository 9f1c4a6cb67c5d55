from datetime import date

import attrs

from src.service.booking.domain.value_object.time_slot import get_time_slot


@attrs.frozen
class StaffShift:
    staff_id: str
    shift_date: date
    time_slot: str

    @classmethod
    def create(cls, *, staff_id: str, shift_date: date, time_slot: str) -> 'StaffShift':
        get_time_slot(time_slot)
        return cls(staff_id=staff_id, shift_date=shift_date, time_slot=time_slot)

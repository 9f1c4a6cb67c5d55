import attrs

from src.service.booking.domain.booking_errors import InvalidTimeSlot


FIRST_SLOT_HOUR = 12
LAST_SLOT_HOUR = 24  # midnight


def _format_label(hour: int) -> str:
    """12 -> '12:00 PM', 13 -> '1:00 PM', 24 -> '12:00 AM'"""
    hour_of_day = hour % 24
    suffix = 'AM' if hour_of_day < 12 else 'PM'
    display_hour = hour_of_day % 12 or 12
    return f'{display_hour}:00 {suffix}'


@attrs.frozen
class TimeSlot:
    id: str
    label: str
    hour: int

    @classmethod
    def from_hour(cls, hour: int) -> 'TimeSlot':
        if not FIRST_SLOT_HOUR <= hour <= LAST_SLOT_HOUR:
            raise InvalidTimeSlot(f'Slot hour must be between {FIRST_SLOT_HOUR} and {LAST_SLOT_HOUR}')
        return cls(id=f'{hour}:00', label=_format_label(hour), hour=hour)


SLOT_CATALOG: tuple[TimeSlot, ...] = tuple(
    TimeSlot.from_hour(hour) for hour in range(FIRST_SLOT_HOUR, LAST_SLOT_HOUR + 1)
)

SLOT_IDS: tuple[str, ...] = tuple(slot.id for slot in SLOT_CATALOG)

_SLOTS_BY_ID: dict[str, TimeSlot] = {slot.id: slot for slot in SLOT_CATALOG}


def get_time_slot(slot_id: str) -> TimeSlot:
    try:
        return _SLOTS_BY_ID[slot_id]
    except KeyError:
        raise InvalidTimeSlot(f'Unknown time slot: {slot_id}')


def validate_slot_ids(slot_ids: list[str] | set[str] | tuple[str, ...]) -> frozenset[str]:
    unknown = sorted(set(slot_ids) - _SLOTS_BY_ID.keys())
    if unknown:
        raise InvalidTimeSlot(f'Unknown time slots: {", ".join(unknown)}')
    return frozenset(slot_ids)

"""
Slot Availability Domain
Pure slot filtering logic, no database or clock access: callers pass the
booked set, the closed set and the evaluation instant.
"""

from collections.abc import Collection
from datetime import date, datetime

from src.service.booking.domain.value_object.time_slot import SLOT_CATALOG, TimeSlot


def available_slots(
    *,
    booking_date: date,
    now: datetime,
    booked_slot_ids: Collection[str],
    closed_slot_ids: Collection[str],
) -> list[TimeSlot]:
    """
    Bookable slots for `booking_date`, ascending by hour.

    `now` must already be in the business time zone. On the same calendar day
    only slots whose hour is strictly after the current hour remain. An empty
    list means fully booked / closed, not an error.
    """
    unavailable = set(booked_slot_ids) | set(closed_slot_ids)
    is_today = booking_date == now.date()

    return [
        slot
        for slot in SLOT_CATALOG
        if slot.id not in unavailable and not (is_today and slot.hour <= now.hour)
    ]


def is_slot_available(
    *,
    slot_id: str,
    booking_date: date,
    now: datetime,
    booked_slot_ids: Collection[str],
    closed_slot_ids: Collection[str],
) -> bool:
    return any(
        slot.id == slot_id
        for slot in available_slots(
            booking_date=booking_date,
            now=now,
            booked_slot_ids=booked_slot_ids,
            closed_slot_ids=closed_slot_ids,
        )
    )

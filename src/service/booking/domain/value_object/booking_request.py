from datetime import date
from typing import Optional

import attrs

from src.service.booking.domain.enum.booking_enums import PaymentMethod
from src.service.booking.domain.value_object.location import Location
from src.service.booking.domain.value_object.service_selection import ServiceSelection
from src.service.booking.domain.value_object.time_slot import TimeSlot


@attrs.frozen
class StaffEnteredCustomer:
    """Customer details typed in by staff for an assisted order"""

    name: str
    phone: str


@attrs.frozen
class BookingRequest:
    service: ServiceSelection
    booking_date: date
    time_slot: TimeSlot
    location: Location
    payment_method: PaymentMethod
    notes: Optional[str] = None
    vehicle_id: Optional[str] = None
    staff_entered_customer: Optional[StaffEnteredCustomer] = None

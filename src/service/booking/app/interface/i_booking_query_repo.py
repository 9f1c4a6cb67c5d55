from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

import attrs
from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enums import BookingSource, CustomerKind
from src.service.booking.domain.enum.booking_status import BookingStatus


@attrs.frozen
class BookingFilter:
    customer_kind: Optional[CustomerKind] = None
    customer_id: Optional[str] = None
    guest_session_id: Optional[str] = None
    customer_phone: Optional[str] = None
    booking_date: Optional[date] = None
    status: Optional[BookingStatus] = None
    source: Optional[BookingSource] = None
    active_only: bool = False
    limit: int = 100
    offset: int = 0


class IBookingQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_bookings(self, *, booking_filter: BookingFilter) -> list[Booking]:
        """
        List bookings newest first

        Args:
            booking_filter: Optional owner / date / status / source filters
        """
        pass

    @abstractmethod
    async def list_active_slot_ids(self, *, booking_date: date) -> set[str]:
        pass

    @abstractmethod
    async def count_active_bookings_by_slot(self, *, booking_date: date) -> dict[str, int]:
        pass

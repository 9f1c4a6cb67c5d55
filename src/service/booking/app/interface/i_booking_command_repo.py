"""
Booking Command Repository Interface

Writes run inside the unit of work transaction; the store, not the caller,
enforces at most one active booking per (date, time).
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import BookingStatus


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        pass

    @abstractmethod
    async def get_by_id_for_update(self, *, booking_id: UUID) -> Optional[Booking]:
        """
        Load a booking and lock its row until the transaction ends

        Serializes concurrent transitions and edits of the same booking.
        """
        pass

    @abstractmethod
    async def list_active_slot_ids(
        self, *, booking_date: date, exclude_booking_id: Optional[UUID] = None
    ) -> set[str]:
        """
        Slot ids held by active bookings on a date

        Args:
            booking_date: Calendar date
            exclude_booking_id: Booking whose own slot should not count (edits)
        """
        pass

    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        """
        Insert a new booking

        Raises:
            SlotNoLongerAvailable: another active booking holds (date, time)
        """
        pass

    @abstractmethod
    async def update_status(self, *, booking: Booking, expected_status: BookingStatus) -> Booking:
        """
        Compare-and-set the status and transition timestamps

        Raises:
            ConcurrentModification: the stored status is no longer `expected_status`
        """
        pass

    @abstractmethod
    async def update_details(self, *, booking: Booking) -> Booking:
        """
        Persist an edit (date, time, package, location, price, notes)

        Raises:
            SlotNoLongerAvailable: the new (date, time) is held by another active booking
        """
        pass

    @abstractmethod
    async def migrate_guest_bookings(self, *, user_id: str, phone: str) -> int:
        """
        Re-own guest bookings made with `phone` to `user_id` in one batched update

        Returns:
            Number of bookings migrated (0 when re-run)
        """
        pass

from abc import ABC, abstractmethod
from typing import Optional

from uuid_utils import UUID

from src.service.booking.domain.entity.promo_code_entity import PromoCode


class IPromoCodeRepo(ABC):
    @abstractmethod
    async def get_by_code(self, *, code: str) -> Optional[PromoCode]:
        """Look up by normalized (upper-cased, trimmed) code"""
        pass

    @abstractmethod
    async def get_by_id(self, *, promo_code_id: UUID) -> Optional[PromoCode]:
        pass

    @abstractmethod
    async def list_all(self) -> list[PromoCode]:
        pass

    @abstractmethod
    async def create(self, *, promo_code: PromoCode) -> PromoCode:
        """
        Raises:
            ConflictError: code already exists
        """
        pass

    @abstractmethod
    async def update(self, *, promo_code: PromoCode) -> PromoCode:
        pass

    @abstractmethod
    async def delete(self, *, promo_code_id: UUID) -> bool:
        pass

    @abstractmethod
    async def redeem(self, *, promo_code_id: UUID, booking_id: UUID) -> bool:
        """
        Record one use of a promo code for a booking, exactly once

        The redemption row is keyed by booking id and the use counter is
        incremented with a single conditional update.

        Returns:
            True if this call redeemed, False if the booking was already redeemed

        Raises:
            PromoExhausted: the code has no uses left
        """
        pass

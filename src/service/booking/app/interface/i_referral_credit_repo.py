from abc import ABC, abstractmethod
from typing import Optional

from uuid_utils import UUID

from src.service.booking.domain.entity.referral_credit_entity import ReferralCredit


class IReferralCreditRepo(ABC):
    @abstractmethod
    async def get_by_user_id(self, *, user_id: str) -> Optional[ReferralCredit]:
        pass

    @abstractmethod
    async def get_by_code(self, *, referral_code: str) -> Optional[ReferralCredit]:
        pass

    @abstractmethod
    async def create(self, *, credit: ReferralCredit) -> ReferralCredit:
        pass

    @abstractmethod
    async def save_referee(self, *, credit: ReferralCredit) -> ReferralCredit:
        """Persist the referrer link and the one-time discount of a referred user"""
        pass

    @abstractmethod
    async def increment_pending_referral(self, *, referrer_user_id: str, max_referrals: int) -> bool:
        """
        Atomically add a pending referral to the referrer while under the limit

        Returns:
            False when the referrer already reached `max_referrals`
        """
        pass

    @abstractmethod
    async def consume_referee_discount(self, *, user_id: str, booking_id: UUID) -> bool:
        """
        Flip the one-time discount to used, exactly once

        Returns:
            True if consumed now or already consumed by this same booking

        Raises:
            ReferralCreditConsumed: consumed earlier by a different booking
        """
        pass

    @abstractmethod
    async def record_successful_referral(self, *, referee_user_id: str) -> bool:
        """
        Move the referee's referral from pending to successful on the referrer, once

        Returns:
            True if recorded now, False if there is nothing to record
        """
        pass

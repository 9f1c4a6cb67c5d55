from datetime import datetime, timezone
import secrets
from typing import Optional

import attrs
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.booking_errors import ReferralCodeInvalid
from src.service.booking.domain.enum.booking_enums import DiscountType
from src.service.booking.domain.value_object.discount import Discount


REFERRAL_CODE_PREFIX = '3ON'
_CODE_ALPHABET = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ'


def generate_referral_code(user_id: str) -> str:
    """'3ON' + first 4 chars of the user id + 4 random base36 chars, upper-cased"""
    suffix = ''.join(secrets.choice(_CODE_ALPHABET) for _ in range(4))
    return f'{REFERRAL_CODE_PREFIX}{user_id[:4].upper()}{suffix}'


@attrs.define
class ReferralCredit:
    user_id: str
    referral_code: str
    referred_by: Optional[str] = None
    referred_by_code: Optional[str] = None
    referral_count: int = 0
    successful_referrals: int = 0
    pending_referrals: int = 0
    total_rewards_earned: int = 0
    # One-time discount granted to a referred user
    referee_discount: Optional[Discount] = None
    referee_reward_used: bool = False
    referee_reward_booking_id: Optional[UUID] = None
    referral_completed: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(cls, *, user_id: str) -> 'ReferralCredit':
        now = datetime.now(timezone.utc)
        return cls(
            user_id=user_id,
            referral_code=generate_referral_code(user_id),
            created_at=now,
            updated_at=now,
        )

    @property
    def has_unconsumed_discount(self) -> bool:
        return self.referee_discount is not None and not self.referee_reward_used

    @Logger.io
    def validate_can_apply(self, *, referrer: Optional['ReferralCredit'], max_referrals: int) -> None:
        """
        Raises:
            ReferralCodeInvalid: already referred, own code, unknown code, or referrer at limit
        """
        if self.referred_by is not None:
            raise ReferralCodeInvalid('A referral code has already been applied')
        if referrer is None:
            raise ReferralCodeInvalid('Invalid referral code')
        if referrer.user_id == self.user_id:
            raise ReferralCodeInvalid('You cannot use your own referral code')
        if referrer.referral_count >= max_referrals:
            raise ReferralCodeInvalid('This referral code has reached its limit')

    @Logger.io
    def apply_referrer(self, *, referrer: 'ReferralCredit', discount_percent: int) -> 'ReferralCredit':
        return attrs.evolve(
            self,
            referred_by=referrer.user_id,
            referred_by_code=referrer.referral_code,
            referee_discount=Discount(discount_type=DiscountType.PERCENTAGE, value=discount_percent),
            referee_reward_used=False,
            updated_at=datetime.now(timezone.utc),
        )

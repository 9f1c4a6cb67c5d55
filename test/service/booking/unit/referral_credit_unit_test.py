"""
Unit tests for ReferralCredit

Test Focus:
1. Referral code format: '3ON' + first 4 chars of the user id + 4 random chars
2. Applying a code: own code, unknown code, second code and full referrer are refused
3. The referee discount is a one-time percentage
"""

import re

import pytest

from src.service.booking.domain.booking_errors import ReferralCodeInvalid
from src.service.booking.domain.entity.referral_credit_entity import (
    ReferralCredit,
    generate_referral_code,
)
from src.service.booking.domain.enum.booking_enums import DiscountType
from test.constants import ANOTHER_CUSTOMER_ID, CUSTOMER_ID


@pytest.mark.unit
class TestReferralCredit:
    @pytest.fixture
    def referrer(self) -> ReferralCredit:
        return ReferralCredit.create(user_id=CUSTOMER_ID)

    @pytest.fixture
    def referee(self) -> ReferralCredit:
        return ReferralCredit.create(user_id=ANOTHER_CUSTOMER_ID)

    def test_referral_code_format(self) -> None:
        code = generate_referral_code('abcd-1234')

        assert re.fullmatch(r'3ONABCD[0-9A-Z]{4}', code)

    def test_apply_referrer_grants_one_time_discount(
        self, referrer: ReferralCredit, referee: ReferralCredit
    ) -> None:
        referee.validate_can_apply(referrer=referrer, max_referrals=50)

        updated = referee.apply_referrer(referrer=referrer, discount_percent=15)

        assert updated.referred_by == CUSTOMER_ID
        assert updated.referred_by_code == referrer.referral_code
        assert updated.referee_discount is not None
        assert updated.referee_discount.discount_type == DiscountType.PERCENTAGE
        assert updated.referee_discount.value == 15
        assert updated.has_unconsumed_discount

    def test_own_code_is_refused(self, referrer: ReferralCredit) -> None:
        with pytest.raises(ReferralCodeInvalid, match='own'):
            referrer.validate_can_apply(referrer=referrer, max_referrals=50)

    def test_unknown_code_is_refused(self, referee: ReferralCredit) -> None:
        with pytest.raises(ReferralCodeInvalid):
            referee.validate_can_apply(referrer=None, max_referrals=50)

    def test_second_code_is_refused(
        self, referrer: ReferralCredit, referee: ReferralCredit
    ) -> None:
        already_referred = referee.apply_referrer(referrer=referrer, discount_percent=15)

        with pytest.raises(ReferralCodeInvalid, match='already'):
            already_referred.validate_can_apply(referrer=referrer, max_referrals=50)

    def test_referrer_at_limit_is_refused(
        self, referrer: ReferralCredit, referee: ReferralCredit
    ) -> None:
        referrer.referral_count = 50

        with pytest.raises(ReferralCodeInvalid, match='limit'):
            referee.validate_can_apply(referrer=referrer, max_referrals=50)

    def test_used_discount_is_not_offered_again(
        self, referrer: ReferralCredit, referee: ReferralCredit
    ) -> None:
        updated = referee.apply_referrer(referrer=referrer, discount_percent=15)
        updated.referee_reward_used = True

        assert not updated.has_unconsumed_discount

from typing import Optional

from pydantic import BaseModel


class ApplyReferralCodeRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'referral_code': '3ONA1B2C3D4'}}}

    referral_code: str


class ReferralCreditResponse(BaseModel):
    referral_code: str
    referred_by_code: Optional[str] = None
    referral_count: int
    successful_referrals: int
    pending_referrals: int
    total_rewards_earned: int
    referee_discount_percent: Optional[int] = None
    referee_reward_used: bool

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.apply_referral_code_use_case import (
    ApplyReferralCodeUseCase,
)
from src.service.booking.app.command.get_or_create_referral_credit_use_case import (
    GetOrCreateReferralCreditUseCase,
)
from src.service.booking.domain.entity.referral_credit_entity import ReferralCredit
from src.service.booking.domain.value_object.actor_context import CustomerActor
from src.service.booking.driving_adapter.http_controller.auth.role_auth import require_customer
from src.service.booking.driving_adapter.http_controller.schema.referral_schema import (
    ApplyReferralCodeRequest,
    ReferralCreditResponse,
)


router = APIRouter()


def _to_response(credit: ReferralCredit) -> ReferralCreditResponse:
    return ReferralCreditResponse(
        referral_code=credit.referral_code,
        referred_by_code=credit.referred_by_code,
        referral_count=credit.referral_count,
        successful_referrals=credit.successful_referrals,
        pending_referrals=credit.pending_referrals,
        total_rewards_earned=credit.total_rewards_earned,
        referee_discount_percent=(
            credit.referee_discount.value if credit.has_unconsumed_discount else None
        ),
        referee_reward_used=credit.referee_reward_used,
    )


@router.get('/me')
@Logger.io
async def get_my_referral_credit(
    current_user: CustomerActor = Depends(require_customer),
    use_case: GetOrCreateReferralCreditUseCase = Depends(GetOrCreateReferralCreditUseCase.depends),
) -> ReferralCreditResponse:
    return _to_response(await use_case.execute(user_id=current_user.user_id))


@router.post('/apply')
@Logger.io
async def apply_referral_code(
    request: ApplyReferralCodeRequest,
    current_user: CustomerActor = Depends(require_customer),
    use_case: ApplyReferralCodeUseCase = Depends(ApplyReferralCodeUseCase.depends),
) -> ReferralCreditResponse:
    credit = await use_case.execute(
        user_id=current_user.user_id, referral_code=request.referral_code
    )
    return _to_response(credit)

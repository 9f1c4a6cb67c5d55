"""
Resolve the discounts a selection is entitled to before pricing.

Read-only: a promo is validated, not redeemed, and a referral credit is only
looked up. Redemption happens after the booking is committed.
"""

from datetime import datetime
from typing import Optional

import attrs

from src.service.booking.app.interface.i_promo_code_repo import IPromoCodeRepo
from src.service.booking.app.interface.i_referral_credit_repo import IReferralCreditRepo
from src.service.booking.domain.booking_errors import PromoNotFound
from src.service.booking.domain.entity.promo_code_entity import PromoCode
from src.service.booking.domain.value_object.actor_context import ActorContext, CustomerActor
from src.service.booking.domain.value_object.discount import Discount
from src.service.booking.domain.value_object.service_selection import ServiceSelection


@attrs.frozen
class ResolvedDiscounts:
    promo_code: Optional[PromoCode] = None
    promo_discount: Optional[Discount] = None
    referral_discount: Optional[Discount] = None


async def validate_promo_code(
    *, promo_code_repo: IPromoCodeRepo, code: str, package_id: str, now: datetime
) -> PromoCode:
    """
    Raises:
        PromoNotFound, PromoInactive, PromoExpired, PromoExhausted, PromoNotApplicable
    """
    promo_code = await promo_code_repo.get_by_code(code=code)
    if promo_code is None:
        raise PromoNotFound(f'Promo code {code} not found')
    promo_code.validate(package_id=package_id, now=now)
    return promo_code


async def resolve_discounts(
    *,
    selection: ServiceSelection,
    actor: Optional[ActorContext],
    promo_code_repo: IPromoCodeRepo,
    referral_credit_repo: IReferralCreditRepo,
    now: datetime,
) -> ResolvedDiscounts:
    promo_code = None
    if selection.promo_code:
        promo_code = await validate_promo_code(
            promo_code_repo=promo_code_repo,
            code=selection.promo_code,
            package_id=selection.package_id,
            now=now,
        )

    # Referral credits belong to signed-in customers only
    referral_discount = None
    if isinstance(actor, CustomerActor):
        credit = await referral_credit_repo.get_by_user_id(user_id=actor.user_id)
        if credit is not None and credit.has_unconsumed_discount:
            referral_discount = credit.referee_discount

    return ResolvedDiscounts(
        promo_code=promo_code,
        promo_discount=promo_code.discount if promo_code else None,
        referral_discount=referral_discount,
    )

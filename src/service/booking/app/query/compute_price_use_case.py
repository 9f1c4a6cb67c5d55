from decimal import Decimal
from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.service.booking.app.business_clock import Clock, business_now
from src.service.booking.app.discount_resolver import resolve_discounts
from src.service.booking.app.interface.i_pricing_config_repo import IPricingConfigRepo
from src.service.booking.app.interface.i_promo_code_repo import IPromoCodeRepo
from src.service.booking.app.interface.i_referral_credit_repo import IReferralCreditRepo
from src.service.booking.domain.pricing_domain import compute_price
from src.service.booking.domain.value_object.actor_context import ActorContext
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown
from src.service.booking.domain.value_object.service_selection import ServiceSelection


@attrs.frozen
class PriceQuote:
    breakdown: PriceBreakdown
    monthly_total: Optional[int] = None  # subscriptions only
    promo_code: Optional[str] = None


class ComputePriceUseCase:
    """Price preview for the booking form; the same engine prices the booking itself"""

    def __init__(
        self,
        *,
        pricing_config_repo: IPricingConfigRepo,
        promo_code_repo: IPromoCodeRepo,
        referral_credit_repo: IReferralCreditRepo,
        settings: Settings,
        clock: Optional[Clock] = None,
    ) -> None:
        self.pricing_config_repo = pricing_config_repo
        self.promo_code_repo = promo_code_repo
        self.referral_credit_repo = referral_credit_repo
        self.settings = settings
        self.clock = clock or (lambda: business_now(settings.BUSINESS_TIMEZONE))

    @classmethod
    @inject
    def depends(
        cls,
        pricing_config_repo: IPricingConfigRepo = Depends(
            Provide[Container.pricing_config_query_repo]
        ),
        promo_code_repo: IPromoCodeRepo = Depends(Provide[Container.promo_code_query_repo]),
        referral_credit_repo: IReferralCreditRepo = Depends(
            Provide[Container.referral_credit_query_repo]
        ),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            pricing_config_repo=pricing_config_repo,
            promo_code_repo=promo_code_repo,
            referral_credit_repo=referral_credit_repo,
            settings=settings,
        )

    @Logger.io
    async def execute(
        self, *, selection: ServiceSelection, actor: Optional[ActorContext] = None
    ) -> PriceQuote:
        """Anonymous callers (actor None) are priced without a referral discount"""
        try:
            catalog = await self.pricing_config_repo.get_package_catalog()
            add_on_config = await self.pricing_config_repo.get_add_on_config()
            discounts = await resolve_discounts(
                selection=selection,
                actor=actor,
                promo_code_repo=self.promo_code_repo,
                referral_credit_repo=self.referral_credit_repo,
                now=self.clock(),
            )
            breakdown = compute_price(
                selection=selection,
                catalog=catalog,
                add_on_config=add_on_config,
                promo_discount=discounts.promo_discount,
                referral_discount=discounts.referral_discount,
                subscription_discount_rate=Decimal(str(self.settings.SUBSCRIPTION_DISCOUNT_RATE)),
            )
        except CustomBaseError:
            metrics.record_price_quote(package_id=selection.package_id, result='rejected')
            raise

        metrics.record_price_quote(package_id=selection.package_id, result='ok')
        return PriceQuote(
            breakdown=breakdown,
            monthly_total=(
                breakdown.monthly_total(self.settings.SUBSCRIPTION_WASHES_PER_MONTH)
                if selection.is_subscription
                else None
            ),
            promo_code=discounts.promo_code.code if discounts.promo_code else None,
        )

from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.business_clock import Clock, business_now
from src.service.booking.app.discount_resolver import validate_promo_code
from src.service.booking.app.interface.i_promo_code_repo import IPromoCodeRepo
from src.service.booking.domain.entity.promo_code_entity import PromoCode


class ValidatePromoCodeUseCase:
    def __init__(
        self,
        *,
        promo_code_repo: IPromoCodeRepo,
        settings: Settings,
        clock: Optional[Clock] = None,
    ) -> None:
        self.promo_code_repo = promo_code_repo
        self.clock = clock or (lambda: business_now(settings.BUSINESS_TIMEZONE))

    @classmethod
    @inject
    def depends(
        cls,
        promo_code_repo: IPromoCodeRepo = Depends(Provide[Container.promo_code_query_repo]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(promo_code_repo=promo_code_repo, settings=settings)

    @Logger.io
    async def execute(self, *, code: str, package_id: str) -> PromoCode:
        return await validate_promo_code(
            promo_code_repo=self.promo_code_repo,
            code=code,
            package_id=package_id.strip().lower(),
            now=self.clock(),
        )

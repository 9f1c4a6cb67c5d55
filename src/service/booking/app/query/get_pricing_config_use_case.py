from typing import Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_pricing_config_repo import IPricingConfigRepo
from src.service.booking.domain.value_object.pricing_catalog import AddOnConfig, PackageCatalog


@attrs.frozen
class PricingConfig:
    catalog: PackageCatalog
    add_ons: AddOnConfig


class GetPricingConfigUseCase:
    def __init__(self, *, pricing_config_repo: IPricingConfigRepo) -> None:
        self.pricing_config_repo = pricing_config_repo

    @classmethod
    @inject
    def depends(
        cls,
        pricing_config_repo: IPricingConfigRepo = Depends(
            Provide[Container.pricing_config_query_repo]
        ),
    ) -> Self:
        return cls(pricing_config_repo=pricing_config_repo)

    @Logger.io
    async def execute(self) -> PricingConfig:
        return PricingConfig(
            catalog=await self.pricing_config_repo.get_package_catalog(),
            add_ons=await self.pricing_config_repo.get_add_on_config(),
        )

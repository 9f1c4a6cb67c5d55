from abc import ABC, abstractmethod

from src.service.booking.domain.value_object.pricing_catalog import AddOnConfig, PackageCatalog


class IPricingConfigRepo(ABC):
    @abstractmethod
    async def get_package_catalog(self) -> PackageCatalog:
        """Deployment catalog, or the built-in default when none is stored"""
        pass

    @abstractmethod
    async def get_add_on_config(self) -> AddOnConfig:
        """Current add-on prices, or the built-in default when none is stored"""
        pass

    @abstractmethod
    async def save_add_on_config(self, *, config: AddOnConfig, expected_version: int) -> AddOnConfig:
        """
        Raises:
            ConcurrentModification: stored version differs from `expected_version`
        """
        pass

from datetime import datetime, timezone

import attrs
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError

from src.platform.database.session_repo import SessionRepo
from src.platform.database.store_error import is_unique_violation
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_pricing_config_repo import IPricingConfigRepo
from src.service.booking.domain.booking_errors import ConcurrentModification
from src.service.booking.domain.value_object.pricing_catalog import (
    DEFAULT_ADD_ON_CONFIG,
    DEFAULT_PACKAGE_CATALOG,
    AddOnConfig,
    PackageCatalog,
)
from src.service.booking.driven_adapter.model.pricing_config_model import (
    ADD_ON_CONFIG_KEY,
    PACKAGE_CATALOG_KEY,
    PricingConfigModel,
)


class PricingConfigRepoImpl(SessionRepo, IPricingConfigRepo):
    async def _get_row(self, key: str) -> PricingConfigModel | None:
        async with self._get_session() as session:
            result = await session.execute(
                select(PricingConfigModel).where(PricingConfigModel.key == key)
            )
            return result.scalar_one_or_none()

    @Logger.io
    async def get_package_catalog(self) -> PackageCatalog:
        row = await self._get_row(PACKAGE_CATALOG_KEY)
        if row is None:
            return DEFAULT_PACKAGE_CATALOG
        return PackageCatalog.from_dict(row.document, version=row.version)

    @Logger.io
    async def get_add_on_config(self) -> AddOnConfig:
        row = await self._get_row(ADD_ON_CONFIG_KEY)
        if row is None:
            return DEFAULT_ADD_ON_CONFIG
        return AddOnConfig.from_dict(
            row.document,
            version=row.version,
            updated_at=row.updated_at,
            updated_by=row.updated_by,
        )

    @Logger.io
    async def save_add_on_config(self, *, config: AddOnConfig, expected_version: int) -> AddOnConfig:
        stale = ConcurrentModification('Add-on prices were changed by someone else, refresh and retry')
        if config.updated_at is None:
            config = attrs.evolve(config, updated_at=datetime.now(timezone.utc))
        values = {
            'document': config.to_dict(),
            'version': config.version,
            'updated_at': config.updated_at,
            'updated_by': config.updated_by,
        }
        async with self._get_session() as session:
            existing = await session.execute(
                select(PricingConfigModel.version).where(
                    PricingConfigModel.key == ADD_ON_CONFIG_KEY
                )
            )
            stored_version = existing.scalar_one_or_none()

            if stored_version is None:
                # Built-in defaults count as the stored version
                if expected_version != DEFAULT_ADD_ON_CONFIG.version:
                    raise stale
                try:
                    await session.execute(
                        insert(PricingConfigModel).values(key=ADD_ON_CONFIG_KEY, **values)
                    )
                except IntegrityError as e:
                    # A concurrent first save took the key
                    if is_unique_violation(e):
                        raise stale from e
                    raise
                return config

            result = await session.execute(
                update(PricingConfigModel)
                .where(
                    PricingConfigModel.key == ADD_ON_CONFIG_KEY,
                    PricingConfigModel.version == expected_version,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise stale
            return config

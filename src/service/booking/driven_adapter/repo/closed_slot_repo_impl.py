from datetime import date

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError

from src.platform.database.session_repo import SessionRepo
from src.platform.database.store_error import is_unique_violation
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_closed_slot_repo import IClosedSlotRepo
from src.service.booking.domain.booking_errors import ConcurrentModification
from src.service.booking.domain.entity.closed_slot_config_entity import ClosedSlotConfig
from src.service.booking.driven_adapter.model.closed_slot_config_model import (
    ClosedSlotConfigModel,
)


class ClosedSlotRepoImpl(SessionRepo, IClosedSlotRepo):
    @staticmethod
    def _to_entity(row: ClosedSlotConfigModel) -> ClosedSlotConfig:
        return ClosedSlotConfig(
            booking_date=row.booking_date,
            slot_ids=frozenset(row.slot_ids or []),
            version=row.version,
            updated_at=row.updated_at,
            updated_by=row.updated_by,
        )

    @Logger.io
    async def get(self, *, booking_date: date) -> ClosedSlotConfig:
        async with self._get_session() as session:
            result = await session.execute(
                select(ClosedSlotConfigModel).where(
                    ClosedSlotConfigModel.booking_date == booking_date
                )
            )
            row = result.scalar_one_or_none()
            return self._to_entity(row) if row else ClosedSlotConfig.empty(booking_date)

    @Logger.io
    async def save(self, *, config: ClosedSlotConfig, expected_version: int) -> ClosedSlotConfig:
        stale = ConcurrentModification(
            f'Closed slots for {config.booking_date} were changed by someone else, refresh and retry'
        )
        async with self._get_session() as session:
            same_entry = (ClosedSlotConfigModel.booking_date == config.booking_date) & (
                ClosedSlotConfigModel.version == expected_version
            )

            if config.is_empty:
                # An emptied date has no stored entry
                if expected_version == 0:
                    return config
                result = await session.execute(delete(ClosedSlotConfigModel).where(same_entry))
                if result.rowcount == 0:  # type: ignore[attr-defined]
                    raise stale
                return config

            values = {
                'slot_ids': config.sorted_slot_ids,
                'version': config.version,
                'updated_at': config.updated_at,
                'updated_by': config.updated_by,
            }
            if expected_version == 0:
                try:
                    await session.execute(
                        insert(ClosedSlotConfigModel).values(
                            booking_date=config.booking_date, **values
                        )
                    )
                except IntegrityError as e:
                    if is_unique_violation(e):
                        raise stale from e
                    raise
                return config

            result = await session.execute(
                update(ClosedSlotConfigModel)
                .where(same_entry)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise stale
            return config

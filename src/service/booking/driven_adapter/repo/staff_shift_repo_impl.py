from collections import Counter
from datetime import date

from sqlalchemy import delete, select

from src.platform.database.session_repo import SessionRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_staff_shift_repo import IStaffShiftRepo
from src.service.booking.domain.entity.staff_shift_entity import StaffShift
from src.service.booking.driven_adapter.model.staff_shift_model import StaffShiftModel


class StaffShiftRepoImpl(SessionRepo, IStaffShiftRepo):
    @staticmethod
    def _key(shift: StaffShift) -> tuple[str, date, str]:
        return (shift.staff_id, shift.shift_date, shift.time_slot)

    @Logger.io
    async def add(self, *, shift: StaffShift) -> StaffShift:
        async with self._get_session() as session:
            existing = await session.get(StaffShiftModel, self._key(shift))
            if existing is None:
                session.add(
                    StaffShiftModel(
                        staff_id=shift.staff_id,
                        shift_date=shift.shift_date,
                        time_slot=shift.time_slot,
                    )
                )
                await session.flush()
            return shift

    @Logger.io
    async def remove(self, *, shift: StaffShift) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                delete(StaffShiftModel).where(
                    StaffShiftModel.staff_id == shift.staff_id,
                    StaffShiftModel.shift_date == shift.shift_date,
                    StaffShiftModel.time_slot == shift.time_slot,
                )
            )
            return result.rowcount > 0  # type: ignore[attr-defined]

    @Logger.io
    async def count_staff_by_slot(self, *, shift_date: date) -> dict[str, int]:
        async with self._get_session() as session:
            result = await session.execute(
                select(StaffShiftModel.time_slot).where(StaffShiftModel.shift_date == shift_date)
            )
            return dict(Counter(result.scalars().all()))

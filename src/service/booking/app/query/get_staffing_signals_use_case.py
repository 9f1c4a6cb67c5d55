from datetime import date
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_staff_shift_repo import IStaffShiftRepo
from src.service.booking.domain.staffing_domain import StaffingSignal, staffing_signals


class GetStaffingSignalsUseCase:
    def __init__(
        self,
        *,
        booking_query_repo: IBookingQueryRepo,
        staff_shift_repo: IStaffShiftRepo,
        settings: Settings,
    ) -> None:
        self.booking_query_repo = booking_query_repo
        self.staff_shift_repo = staff_shift_repo
        self.bookings_per_staff = settings.BOOKINGS_PER_STAFF

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        staff_shift_repo: IStaffShiftRepo = Depends(Provide[Container.staff_shift_query_repo]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            booking_query_repo=booking_query_repo,
            staff_shift_repo=staff_shift_repo,
            settings=settings,
        )

    @Logger.io
    async def execute(self, *, shift_date: date) -> list[StaffingSignal]:
        bookings = await self.booking_query_repo.count_active_bookings_by_slot(
            booking_date=shift_date
        )
        staff = await self.staff_shift_repo.count_staff_by_slot(shift_date=shift_date)
        return staffing_signals(
            bookings_per_slot=bookings,
            staff_per_slot=staff,
            bookings_per_staff=self.bookings_per_staff,
        )

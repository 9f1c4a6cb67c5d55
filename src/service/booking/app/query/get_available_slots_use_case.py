from datetime import date
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.business_clock import Clock, business_now
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_closed_slot_repo import IClosedSlotRepo
from src.service.booking.domain.slot_availability_domain import available_slots
from src.service.booking.domain.value_object.time_slot import TimeSlot


class GetAvailableSlotsUseCase:
    def __init__(
        self,
        *,
        booking_query_repo: IBookingQueryRepo,
        closed_slot_repo: IClosedSlotRepo,
        settings: Settings,
        clock: Optional[Clock] = None,
    ) -> None:
        self.booking_query_repo = booking_query_repo
        self.closed_slot_repo = closed_slot_repo
        self.clock = clock or (lambda: business_now(settings.BUSINESS_TIMEZONE))

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        closed_slot_repo: IClosedSlotRepo = Depends(Provide[Container.closed_slot_query_repo]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(
            booking_query_repo=booking_query_repo,
            closed_slot_repo=closed_slot_repo,
            settings=settings,
        )

    @Logger.io
    async def execute(self, *, booking_date: date) -> list[TimeSlot]:
        closed = await self.closed_slot_repo.get(booking_date=booking_date)
        booked = await self.booking_query_repo.list_active_slot_ids(booking_date=booking_date)
        return available_slots(
            booking_date=booking_date,
            now=self.clock(),
            booked_slot_ids=booked,
            closed_slot_ids=closed.slot_ids,
        )

from datetime import date
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_closed_slot_repo import IClosedSlotRepo
from src.service.booking.domain.entity.closed_slot_config_entity import ClosedSlotConfig


class GetClosedSlotsUseCase:
    def __init__(self, *, closed_slot_repo: IClosedSlotRepo) -> None:
        self.closed_slot_repo = closed_slot_repo

    @classmethod
    @inject
    def depends(
        cls,
        closed_slot_repo: IClosedSlotRepo = Depends(Provide[Container.closed_slot_query_repo]),
    ) -> Self:
        return cls(closed_slot_repo=closed_slot_repo)

    @Logger.io
    async def execute(self, *, booking_date: date) -> ClosedSlotConfig:
        return await self.closed_slot_repo.get(booking_date=booking_date)

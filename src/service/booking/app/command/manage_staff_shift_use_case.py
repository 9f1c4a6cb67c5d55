from datetime import date
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.staff_shift_entity import StaffShift
from src.service.booking.domain.value_object.actor_context import ActorContext, StaffActor


class ManageStaffShiftUseCase:
    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @staticmethod
    def _require_manager(actor: ActorContext) -> None:
        if not isinstance(actor, StaffActor) or not actor.is_manager:
            raise ForbiddenError('Only managers can assign shifts')

    @Logger.io
    async def assign(
        self, *, staff_id: str, shift_date: date, time_slot: str, actor: ActorContext
    ) -> StaffShift:
        self._require_manager(actor)
        shift = StaffShift.create(staff_id=staff_id, shift_date=shift_date, time_slot=time_slot)
        async with self.uow:
            await self.uow.staff_shift_repo.add(shift=shift)
            await self.uow.commit()
        return shift

    @Logger.io
    async def remove(
        self, *, staff_id: str, shift_date: date, time_slot: str, actor: ActorContext
    ) -> None:
        self._require_manager(actor)
        shift = StaffShift.create(staff_id=staff_id, shift_date=shift_date, time_slot=time_slot)
        async with self.uow:
            if not await self.uow.staff_shift_repo.remove(shift=shift):
                raise NotFoundError('Shift not found')
            await self.uow.commit()

from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.referral_credit_entity import ReferralCredit


class GetOrCreateReferralCreditUseCase:
    """A user's referral record; the record and its code are created on first access"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, user_id: str) -> ReferralCredit:
        async with self.uow:
            credit = await self.uow.referral_credit_repo.get_by_user_id(user_id=user_id)
            if credit is not None:
                return credit

            credit = ReferralCredit.create(user_id=user_id)
            await self.uow.referral_credit_repo.create(credit=credit)
            await self.uow.commit()

        Logger.base.info(f'🎁 [REFERRAL] Issued code {credit.referral_code} to {user_id}')
        return credit

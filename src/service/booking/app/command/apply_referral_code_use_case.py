from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.booking_errors import ReferralCodeInvalid
from src.service.booking.domain.entity.referral_credit_entity import ReferralCredit


class ApplyReferralCodeUseCase:
    """
    Link a user to the referrer owning `referral_code`.

    The referrer gains a pending referral (bounded by MAX_REFERRALS_PER_USER)
    and the user gains a one-time percentage discount for their next booking.
    """

    def __init__(self, *, uow: AbstractUnitOfWork, settings: Settings) -> None:
        self.uow = uow
        self.max_referrals = settings.MAX_REFERRALS_PER_USER
        self.discount_percent = settings.REFEREE_DISCOUNT_PERCENT

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(uow=uow, settings=settings)

    @Logger.io
    async def execute(self, *, user_id: str, referral_code: str) -> ReferralCredit:
        async with self.uow:
            repo = self.uow.referral_credit_repo
            credit = await repo.get_by_user_id(user_id=user_id)
            if credit is None:
                credit = await repo.create(credit=ReferralCredit.create(user_id=user_id))

            referrer = await repo.get_by_code(referral_code=referral_code)
            credit.validate_can_apply(referrer=referrer, max_referrals=self.max_referrals)
            assert referrer is not None

            if not await repo.increment_pending_referral(
                referrer_user_id=referrer.user_id, max_referrals=self.max_referrals
            ):
                raise ReferralCodeInvalid('This referral code has reached its limit')

            updated = credit.apply_referrer(referrer=referrer, discount_percent=self.discount_percent)
            await repo.save_referee(credit=updated)
            await self.uow.commit()

        Logger.base.info(f'🤝 [REFERRAL] {user_id} referred by {referrer.user_id}')
        return updated

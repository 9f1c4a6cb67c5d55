"""
Referral Credit Repository Implementation

Every counter change is a single conditional UPDATE; the referee discount is
consumed with compare-and-set on `referee_reward_used`.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from uuid_utils import UUID

from src.platform.database.session_repo import SessionRepo
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_referral_credit_repo import IReferralCreditRepo
from src.service.booking.domain.booking_errors import ReferralCreditConsumed
from src.service.booking.domain.entity.referral_credit_entity import ReferralCredit
from src.service.booking.domain.value_object.discount import Discount
from src.service.booking.driven_adapter.model.referral_credit_model import ReferralCreditModel
from src.service.booking.driven_adapter.repo.booking_row_mapper import (
    from_db_uuid,
    to_db_uuid,
)


class ReferralCreditRepoImpl(SessionRepo, IReferralCreditRepo):
    @staticmethod
    def _to_entity(row: ReferralCreditModel) -> ReferralCredit:
        return ReferralCredit(
            user_id=row.user_id,
            referral_code=row.referral_code,
            referred_by=row.referred_by,
            referred_by_code=row.referred_by_code,
            referral_count=row.referral_count,
            successful_referrals=row.successful_referrals,
            pending_referrals=row.pending_referrals,
            total_rewards_earned=row.total_rewards_earned,
            referee_discount=Discount.from_dict(row.referee_discount),
            referee_reward_used=row.referee_reward_used,
            referee_reward_booking_id=from_db_uuid(row.referee_reward_booking_id),
            referral_completed=row.referral_completed,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    async def _get_one(self, *criteria) -> Optional[ReferralCredit]:
        async with self._get_session() as session:
            result = await session.execute(select(ReferralCreditModel).where(*criteria))
            row = result.scalar_one_or_none()
            return self._to_entity(row) if row else None

    @Logger.io
    async def get_by_user_id(self, *, user_id: str) -> Optional[ReferralCredit]:
        return await self._get_one(ReferralCreditModel.user_id == user_id)

    @Logger.io
    async def get_by_code(self, *, referral_code: str) -> Optional[ReferralCredit]:
        return await self._get_one(
            ReferralCreditModel.referral_code == referral_code.strip().upper()
        )

    @Logger.io
    async def create(self, *, credit: ReferralCredit) -> ReferralCredit:
        async with self._get_session() as session:
            session.add(
                ReferralCreditModel(
                    user_id=credit.user_id,
                    referral_code=credit.referral_code,
                    referral_count=credit.referral_count,
                    successful_referrals=credit.successful_referrals,
                    pending_referrals=credit.pending_referrals,
                    total_rewards_earned=credit.total_rewards_earned,
                    referee_reward_used=credit.referee_reward_used,
                    referral_completed=credit.referral_completed,
                    created_at=credit.created_at,
                    updated_at=credit.updated_at,
                )
            )
            try:
                await session.flush()
            except IntegrityError as e:
                raise ConflictError('Referral record already exists, retry') from e
            return credit

    @Logger.io
    async def save_referee(self, *, credit: ReferralCredit) -> ReferralCredit:
        async with self._get_session() as session:
            result = await session.execute(
                update(ReferralCreditModel)
                .where(
                    ReferralCreditModel.user_id == credit.user_id,
                    ReferralCreditModel.referred_by.is_(None),
                )
                .values(
                    referred_by=credit.referred_by,
                    referred_by_code=credit.referred_by_code,
                    referee_discount=(
                        credit.referee_discount.to_dict() if credit.referee_discount else None
                    ),
                    referee_reward_used=credit.referee_reward_used,
                    updated_at=credit.updated_at,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise ConflictError('A referral code has already been applied')
            return credit

    @Logger.io
    async def increment_pending_referral(self, *, referrer_user_id: str, max_referrals: int) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(ReferralCreditModel)
                .where(
                    ReferralCreditModel.user_id == referrer_user_id,
                    ReferralCreditModel.referral_count < max_referrals,
                )
                .values(
                    referral_count=ReferralCreditModel.referral_count + 1,
                    pending_referrals=ReferralCreditModel.pending_referrals + 1,
                    updated_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0  # type: ignore[attr-defined]

    @Logger.io
    async def consume_referee_discount(self, *, user_id: str, booking_id: UUID) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(ReferralCreditModel)
                .where(
                    ReferralCreditModel.user_id == user_id,
                    ReferralCreditModel.referee_discount.is_not(None),
                    ReferralCreditModel.referee_reward_used.is_(False),
                )
                .values(
                    referee_reward_used=True,
                    referee_reward_booking_id=to_db_uuid(booking_id),
                    updated_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount > 0:  # type: ignore[attr-defined]
                return True

            consumed_by = await session.execute(
                select(ReferralCreditModel.referee_reward_booking_id).where(
                    ReferralCreditModel.user_id == user_id,
                    ReferralCreditModel.referee_reward_used.is_(True),
                )
            )
            previous_booking_id = consumed_by.scalar_one_or_none()
            if previous_booking_id is None:
                raise ReferralCreditConsumed(f'User {user_id} has no referral discount to consume')
            if previous_booking_id != to_db_uuid(booking_id):
                raise ReferralCreditConsumed(
                    f'Referral discount was already used by booking {previous_booking_id}'
                )
            return True

    @Logger.io
    async def record_successful_referral(self, *, referee_user_id: str) -> bool:
        async with self._get_session() as session:
            referee = await session.execute(
                update(ReferralCreditModel)
                .where(
                    ReferralCreditModel.user_id == referee_user_id,
                    ReferralCreditModel.referred_by.is_not(None),
                    ReferralCreditModel.referral_completed.is_(False),
                )
                .values(referral_completed=True, updated_at=datetime.now(timezone.utc))
                .returning(ReferralCreditModel.referred_by)
                .execution_options(synchronize_session=False)
            )
            referrer_user_id = referee.scalar_one_or_none()
            if referrer_user_id is None:
                return False

            await session.execute(
                update(ReferralCreditModel)
                .where(ReferralCreditModel.user_id == referrer_user_id)
                .values(
                    successful_referrals=ReferralCreditModel.successful_referrals + 1,
                    pending_referrals=ReferralCreditModel.pending_referrals - 1,
                    total_rewards_earned=ReferralCreditModel.total_rewards_earned + 1,
                    updated_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            Logger.base.info(
                f'🤝 [REFERRAL] {referee_user_id} completed a booking, credited {referrer_user_id}'
            )
            return True

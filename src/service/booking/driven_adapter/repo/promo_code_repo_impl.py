"""
Promo Code Repository Implementation

Redemption is exactly-once per booking: the promo_redemption primary key is the
booking id, and the use counter moves with one conditional UPDATE so it never
passes max_uses under concurrency.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from uuid_utils import UUID

from src.platform.database.session_repo import SessionRepo
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_promo_code_repo import IPromoCodeRepo
from src.service.booking.domain.booking_errors import ConcurrentModification, PromoExhausted
from src.service.booking.domain.entity.promo_code_entity import PromoCode
from src.service.booking.domain.enum.booking_enums import DiscountType
from src.service.booking.domain.value_object.service_selection import normalize_promo_code
from src.service.booking.driven_adapter.model.promo_code_model import PromoCodeModel
from src.service.booking.driven_adapter.model.promo_redemption_model import (
    PromoRedemptionModel,
)
from src.service.booking.driven_adapter.repo.booking_row_mapper import to_db_uuid


class PromoCodeRepoImpl(SessionRepo, IPromoCodeRepo):
    @staticmethod
    def _to_entity(row: PromoCodeModel) -> PromoCode:
        return PromoCode(
            id=UUID(str(row.id)),
            code=row.code,
            discount_type=DiscountType(row.discount_type),
            discount_value=row.discount_value,
            max_uses=row.max_uses,
            current_uses=row.current_uses,
            expires_at=row.expires_at,
            applicable_packages=row.applicable_packages,
            is_active=row.is_active,
            description=row.description,
            created_at=row.created_at,
            created_by=row.created_by,
            updated_at=row.updated_at,
            updated_by=row.updated_by,
        )

    @staticmethod
    def _to_values(promo_code: PromoCode) -> dict[str, object]:
        return {
            'code': promo_code.code,
            'discount_type': promo_code.discount_type.value,
            'discount_value': promo_code.discount_value,
            'max_uses': promo_code.max_uses,
            'expires_at': promo_code.expires_at,
            'applicable_packages': promo_code.applicable_packages,
            'is_active': promo_code.is_active,
            'description': promo_code.description,
            'updated_at': promo_code.updated_at,
            'updated_by': promo_code.updated_by,
        }

    @Logger.io
    async def get_by_code(self, *, code: str) -> Optional[PromoCode]:
        async with self._get_session() as session:
            result = await session.execute(
                select(PromoCodeModel).where(PromoCodeModel.code == normalize_promo_code(code))
            )
            row = result.scalar_one_or_none()
            return self._to_entity(row) if row else None

    @Logger.io
    async def get_by_id(self, *, promo_code_id: UUID) -> Optional[PromoCode]:
        async with self._get_session() as session:
            row = await session.get(PromoCodeModel, to_db_uuid(promo_code_id))
            return self._to_entity(row) if row else None

    @Logger.io
    async def list_all(self) -> list[PromoCode]:
        async with self._get_session() as session:
            result = await session.execute(
                select(PromoCodeModel).order_by(PromoCodeModel.created_at.desc())
            )
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def create(self, *, promo_code: PromoCode) -> PromoCode:
        async with self._get_session() as session:
            session.add(
                PromoCodeModel(
                    id=to_db_uuid(promo_code.id),
                    current_uses=promo_code.current_uses,
                    created_at=promo_code.created_at,
                    created_by=promo_code.created_by,
                    **self._to_values(promo_code),
                )
            )
            try:
                await session.flush()
            except IntegrityError as e:
                raise ConflictError(f'Promo code {promo_code.code} already exists') from e
            return promo_code

    @Logger.io
    async def update(self, *, promo_code: PromoCode) -> PromoCode:
        async with self._get_session() as session:
            try:
                await session.execute(
                    update(PromoCodeModel)
                    .where(PromoCodeModel.id == to_db_uuid(promo_code.id))
                    .values(**self._to_values(promo_code))
                    .execution_options(synchronize_session=False)
                )
            except IntegrityError as e:
                raise ConflictError(f'Promo code {promo_code.code} already exists') from e
            return promo_code

    @Logger.io
    async def delete(self, *, promo_code_id: UUID) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                delete(PromoCodeModel).where(PromoCodeModel.id == to_db_uuid(promo_code_id))
            )
            return result.rowcount > 0  # type: ignore[attr-defined]

    @Logger.io
    async def redeem(self, *, promo_code_id: UUID, booking_id: UUID) -> bool:
        async with self._get_session() as session:
            already = await session.execute(
                select(PromoRedemptionModel.promo_code_id).where(
                    PromoRedemptionModel.booking_id == to_db_uuid(booking_id)
                )
            )
            if already.scalar_one_or_none() is not None:
                Logger.base.info(f'🎟️ [PROMO] Booking {booking_id} already redeemed, skipping')
                return False

            session.add(
                PromoRedemptionModel(
                    booking_id=to_db_uuid(booking_id),
                    promo_code_id=to_db_uuid(promo_code_id),
                    redeemed_at=datetime.now(timezone.utc),
                )
            )
            try:
                await session.flush()
            except IntegrityError as e:
                # A concurrent redemption for the same booking won
                raise ConcurrentModification(
                    f'Booking {booking_id} is being redeemed concurrently'
                ) from e

            result = await session.execute(
                update(PromoCodeModel)
                .where(
                    PromoCodeModel.id == to_db_uuid(promo_code_id),
                    or_(
                        PromoCodeModel.max_uses == 0,
                        PromoCodeModel.current_uses < PromoCodeModel.max_uses,
                    ),
                )
                .values(current_uses=PromoCodeModel.current_uses + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise PromoExhausted('Promo code has reached its usage limit')
            return True

from datetime import datetime
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
import uuid_utils
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.booking_errors import PromoNotFound
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.entity.promo_code_entity import PromoCode
from src.service.booking.domain.enum.booking_enums import AuditAction, DiscountType
from src.service.booking.domain.value_object.actor_context import ActorContext, StaffActor


class ManagePromoCodeUseCase:
    """Manager console for promo codes: create, update, toggle, delete, list"""

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(cls, uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work])) -> Self:
        return cls(uow=uow)

    @staticmethod
    def _require_manager(actor: ActorContext) -> StaffActor:
        if not isinstance(actor, StaffActor) or not actor.is_manager:
            raise ForbiddenError('Only managers can manage promo codes')
        return actor

    async def _get_existing(self, promo_code_id: UUID) -> PromoCode:
        promo_code = await self.uow.promo_code_repo.get_by_id(promo_code_id=promo_code_id)
        if not promo_code:
            raise PromoNotFound('Promo code not found')
        return promo_code

    async def _audit(
        self, *, action: AuditAction, actor: StaffActor, promo_code: PromoCode
    ) -> None:
        await self.uow.audit_log_repo.add(
            entry=AuditLogEntry.record(
                action=action,
                actor=actor,
                target_id=str(promo_code.id),
                details={
                    'code': promo_code.code,
                    'discount_type': promo_code.discount_type.value,
                    'discount_value': promo_code.discount_value,
                    'is_active': promo_code.is_active,
                },
            )
        )

    @Logger.io
    async def list_all(self, *, actor: ActorContext) -> list[PromoCode]:
        self._require_manager(actor)
        async with self.uow:
            return await self.uow.promo_code_repo.list_all()

    @Logger.io
    async def create(
        self,
        *,
        code: str,
        discount_type: DiscountType,
        discount_value: int,
        max_uses: int = 0,
        expires_at: Optional[datetime] = None,
        applicable_packages: Optional[list[str]] = None,
        description: Optional[str] = None,
        actor: ActorContext,
    ) -> PromoCode:
        manager = self._require_manager(actor)
        promo_code = PromoCode.create(
            id=uuid_utils.uuid7(),
            code=code,
            discount_type=discount_type,
            discount_value=discount_value,
            max_uses=max_uses,
            expires_at=expires_at,
            applicable_packages=applicable_packages,
            description=description,
            created_by=manager.actor_id,
        )
        async with self.uow:
            await self.uow.promo_code_repo.create(promo_code=promo_code)
            await self._audit(
                action=AuditAction.PROMO_CODE_CREATED, actor=manager, promo_code=promo_code
            )
            await self.uow.commit()
        return promo_code

    @Logger.io
    async def update(
        self, *, promo_code_id: UUID, actor: ActorContext, **changes: object
    ) -> PromoCode:
        manager = self._require_manager(actor)
        async with self.uow:
            existing = await self._get_existing(promo_code_id)
            updated = existing.update(updated_by=manager.actor_id, **changes)
            await self.uow.promo_code_repo.update(promo_code=updated)
            await self._audit(
                action=AuditAction.PROMO_CODE_UPDATED, actor=manager, promo_code=updated
            )
            await self.uow.commit()
        return updated

    @Logger.io
    async def toggle(self, *, promo_code_id: UUID, actor: ActorContext) -> PromoCode:
        manager = self._require_manager(actor)
        async with self.uow:
            existing = await self._get_existing(promo_code_id)
            updated = existing.toggle(updated_by=manager.actor_id)
            await self.uow.promo_code_repo.update(promo_code=updated)
            await self._audit(
                action=AuditAction.PROMO_CODE_UPDATED, actor=manager, promo_code=updated
            )
            await self.uow.commit()
        return updated

    @Logger.io
    async def delete(self, *, promo_code_id: UUID, actor: ActorContext) -> None:
        manager = self._require_manager(actor)
        async with self.uow:
            existing = await self._get_existing(promo_code_id)
            await self.uow.promo_code_repo.delete(promo_code_id=promo_code_id)
            await self._audit(
                action=AuditAction.PROMO_CODE_DELETED, actor=manager, promo_code=existing
            )
            await self.uow.commit()

"""
Unit of Work - one database transaction shared by several repositories

Architecture:
- UoW opens a session on enter and rolls back anything not committed on exit
- Repositories created by the UoW share its session
- Use cases coordinate multi-repository writes through the UoW

A UoW instance may be entered more than once; each `async with` is a new
transaction on a fresh session.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

from src.platform.database.session_repo import SessionFactory
from src.platform.database.store_error import translate_store_errors


if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from src.service.booking.app.interface.i_audit_log_repo import IAuditLogRepo
    from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
    from src.service.booking.app.interface.i_closed_slot_repo import IClosedSlotRepo
    from src.service.booking.app.interface.i_pricing_config_repo import IPricingConfigRepo
    from src.service.booking.app.interface.i_promo_code_repo import IPromoCodeRepo
    from src.service.booking.app.interface.i_referral_credit_repo import IReferralCreditRepo
    from src.service.booking.app.interface.i_staff_shift_repo import IStaffShiftRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            booking = await uow.booking_command_repo.create(booking=...)
            await uow.commit()
    """

    booking_command_repo: IBookingCommandRepo
    closed_slot_repo: IClosedSlotRepo
    pricing_config_repo: IPricingConfigRepo
    promo_code_repo: IPromoCodeRepo
    referral_credit_repo: IReferralCreditRepo
    staff_shift_repo: IStaffShiftRepo
    audit_log_repo: IAuditLogRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, *, session_factory: SessionFactory) -> None:
        self.session_factory = session_factory
        self.session: AsyncSession | None = None
        self._session_cm: Any = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.booking.driven_adapter.repo.audit_log_repo_impl import AuditLogRepoImpl
        from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
            BookingCommandRepoImpl,
        )
        from src.service.booking.driven_adapter.repo.closed_slot_repo_impl import (
            ClosedSlotRepoImpl,
        )
        from src.service.booking.driven_adapter.repo.pricing_config_repo_impl import (
            PricingConfigRepoImpl,
        )
        from src.service.booking.driven_adapter.repo.promo_code_repo_impl import PromoCodeRepoImpl
        from src.service.booking.driven_adapter.repo.referral_credit_repo_impl import (
            ReferralCreditRepoImpl,
        )
        from src.service.booking.driven_adapter.repo.staff_shift_repo_impl import (
            StaffShiftRepoImpl,
        )

        self._session_cm = self.session_factory()
        async with translate_store_errors('open unit of work'):
            self.session = await self._session_cm.__aenter__()

        # Repositories share this unit of work's session
        repos = {
            'booking_command_repo': BookingCommandRepoImpl(),
            'closed_slot_repo': ClosedSlotRepoImpl(),
            'pricing_config_repo': PricingConfigRepoImpl(),
            'promo_code_repo': PromoCodeRepoImpl(),
            'referral_credit_repo': ReferralCreditRepoImpl(),
            'staff_shift_repo': StaffShiftRepoImpl(),
            'audit_log_repo': AuditLogRepoImpl(),
        }
        for name, repo in repos.items():
            repo.session = self.session
            setattr(self, name, repo)

        return await super().__aenter__()

    async def __aexit__(self, *args: Any) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            session_cm, self._session_cm, self.session = self._session_cm, None, None
            # Exceptions propagate from the caller's `async with`, only close the session here
            await session_cm.__aexit__(None, None, None)

    async def _commit(self) -> None:
        assert self.session is not None, 'UnitOfWork used outside `async with`'
        async with translate_store_errors('commit'):
            await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()

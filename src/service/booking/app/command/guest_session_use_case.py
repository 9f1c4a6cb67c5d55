"""
Guest sessions: a signed, expiring token bound to a verified UAE phone.

Validation never blocks the event loop: the signature check runs in a worker
thread under a timeout, and a timeout is reported as an absent session.
"""

from functools import partial
from typing import Optional, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import Settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_guest_session_signer import IGuestSessionSigner
from src.service.booking.domain.enum.booking_enums import GuestSessionStatus
from src.service.booking.domain.value_object.guest_session import (
    GuestSession,
    GuestSessionValidation,
    normalize_uae_phone,
)


class GuestSessionUseCase:
    def __init__(self, *, signer: IGuestSessionSigner, settings: Settings) -> None:
        self.signer = signer
        self.validation_timeout = settings.GUEST_SESSION_VALIDATION_TIMEOUT_SECONDS

    @classmethod
    @inject
    def depends(
        cls,
        signer: IGuestSessionSigner = Depends(Provide[Container.guest_session_signer]),
        settings: Settings = Depends(Provide[Container.config_service]),
    ) -> Self:
        return cls(signer=signer, settings=settings)

    @Logger.io
    async def issue(self, *, phone: str) -> GuestSession:
        """
        Raises:
            InvalidGuestPhone: not a UAE mobile number
        """
        session = self.signer.issue(phone=normalize_uae_phone(phone))
        Logger.base.info(f'👤 [GUEST] Issued session {session.session_id}')
        return session

    @Logger.io
    async def validate(
        self, *, token: Optional[str], expected_session_id: Optional[str] = None
    ) -> GuestSessionValidation:
        if not token:
            return GuestSessionValidation(status=GuestSessionStatus.ABSENT)

        try:
            with anyio.fail_after(self.validation_timeout):
                return await anyio.to_thread.run_sync(
                    partial(
                        self.signer.verify, token=token, expected_session_id=expected_session_id
                    ),
                    abandon_on_cancel=True,
                )
        except TimeoutError:
            Logger.base.warning(
                f'⏱️ [GUEST] Session validation exceeded {self.validation_timeout}s, treating as absent'
            )
            return GuestSessionValidation(status=GuestSessionStatus.ABSENT)

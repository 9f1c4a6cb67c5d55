"""
Guest Session Signer (PyJWT)

Tokens are HS256 JWTs carrying sid, phone, iat, exp and typ=guest.
Verification is CPU bound and synchronous; callers run it in a worker thread.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import uuid_utils

from src.platform.config.core_setting import settings
from src.service.booking.app.interface.i_guest_session_signer import IGuestSessionSigner
from src.service.booking.domain.enum.booking_enums import GuestSessionStatus
from src.service.booking.domain.value_object.guest_session import (
    GuestSession,
    GuestSessionValidation,
)


GUEST_TOKEN_TYPE = 'guest'


class GuestSessionSignerImpl(IGuestSessionSigner):
    def __init__(
        self,
        *,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        ttl_minutes: Optional[int] = None,
    ) -> None:
        self.secret = secret or settings.SECRET_KEY.get_secret_value()
        self.algorithm = algorithm or settings.ALGORITHM
        self.ttl = timedelta(minutes=ttl_minutes or settings.GUEST_SESSION_TTL_MINUTES)

    def issue(self, *, phone: str) -> GuestSession:
        session_id = str(uuid_utils.uuid7())
        issued_at = datetime.now(timezone.utc)
        expires_at = issued_at + self.ttl
        payload = {
            'sid': session_id,
            'phone': phone,
            'iat': issued_at,
            'exp': expires_at,
            'typ': GUEST_TOKEN_TYPE,
        }
        return GuestSession(
            session_id=session_id,
            phone=phone,
            issued_at=issued_at,
            expires_at=expires_at,
            token=jwt.encode(payload, self.secret, algorithm=self.algorithm),
        )

    def verify(
        self, *, token: str, expected_session_id: Optional[str] = None
    ) -> GuestSessionValidation:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={'require': ['sid', 'phone', 'exp', 'typ']},
            )
        except jwt.ExpiredSignatureError:
            return GuestSessionValidation(status=GuestSessionStatus.EXPIRED)
        except jwt.PyJWTError:
            return GuestSessionValidation(status=GuestSessionStatus.MISMATCHED)

        session_id = payload['sid']
        if payload['typ'] != GUEST_TOKEN_TYPE:
            return GuestSessionValidation(status=GuestSessionStatus.MISMATCHED)
        if expected_session_id is not None and session_id != expected_session_id:
            return GuestSessionValidation(status=GuestSessionStatus.MISMATCHED)

        return GuestSessionValidation(
            status=GuestSessionStatus.VALID,
            session_id=session_id,
            phone=payload['phone'],
        )

from datetime import datetime
import re
from typing import Optional

import attrs

from src.service.booking.domain.booking_errors import InvalidGuestPhone
from src.service.booking.domain.enum.booking_enums import GuestSessionStatus


UAE_COUNTRY_CODE = '+971'
_LOCAL_MOBILE = re.compile(r'^5\d{8}$')


def normalize_uae_phone(phone: str) -> str:
    """
    Accept '5XXXXXXXX', '05XXXXXXXX', '9715XXXXXXXX' or '+9715XXXXXXXX'
    (spaces and dashes ignored) and return '+9715XXXXXXXX'.
    """
    digits = re.sub(r'[\s\-()]', '', phone or '')
    if digits.startswith('+971'):
        digits = digits[4:]
    elif digits.startswith('971'):
        digits = digits[3:]
    elif digits.startswith('0'):
        digits = digits[1:]

    if not _LOCAL_MOBILE.match(digits):
        raise InvalidGuestPhone('Phone must be a UAE mobile number (9 digits starting with 5)')
    return f'{UAE_COUNTRY_CODE}{digits}'


@attrs.frozen
class GuestSession:
    session_id: str
    phone: str
    issued_at: datetime
    expires_at: datetime
    token: str = attrs.field(repr=False)


@attrs.frozen
class GuestSessionValidation:
    status: GuestSessionStatus
    session_id: Optional[str] = None
    phone: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.status == GuestSessionStatus.VALID

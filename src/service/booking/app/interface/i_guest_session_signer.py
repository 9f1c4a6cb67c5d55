from abc import ABC, abstractmethod
from typing import Optional

from src.service.booking.domain.value_object.guest_session import (
    GuestSession,
    GuestSessionValidation,
)


class IGuestSessionSigner(ABC):
    @abstractmethod
    def issue(self, *, phone: str) -> GuestSession:
        """Sign a new guest session for an already normalized phone"""
        pass

    @abstractmethod
    def verify(
        self, *, token: str, expected_session_id: Optional[str] = None
    ) -> GuestSessionValidation:
        """
        Check signature, type and expiry of a token (blocking, CPU bound)

        Returns:
            valid / expired / mismatched; never absent, the caller decides that
        """
        pass

"""
Booking engine error kinds.

- Validation (400): rejected before any write is attempted
- Resource (400/404): promo / referral problems the customer can act on
- Conflict (409): state moved underneath the caller, refresh and retry
Infrastructure failures use the platform InfrastructureError (503).
"""

from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError


# Validation
class InvalidSelection(DomainError):
    pass


class InvalidTimeSlot(DomainError):
    pass


class NoPriceForSelection(DomainError):
    pass


class InvalidAddOn(DomainError):
    pass


class InvalidGuestPhone(DomainError):
    pass


# Resource
class PromoNotFound(NotFoundError):
    pass


class PromoInactive(DomainError):
    pass


class PromoExpired(DomainError):
    pass


class PromoExhausted(DomainError):
    pass


class PromoNotApplicable(DomainError):
    pass


class ReferralCodeInvalid(DomainError):
    pass


# Conflict
class SlotNoLongerAvailable(ConflictError):
    def __init__(self, date: object, time: str) -> None:
        self.date = date
        self.time = time
        super().__init__(f'Time slot {time} on {date} is no longer available')


class IllegalTransition(ConflictError):
    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f'Cannot change booking status from {source} to {target}')


class TerminalState(ConflictError):
    def __init__(self, status: str) -> None:
        self.status = status
        super().__init__(f'Booking is {status} and can no longer change')


class ConcurrentModification(ConflictError):
    pass


class ReferralCreditConsumed(ConflictError):
    pass

"""
Who is calling the engine.

A closed set of variants; path-specific data (guest phone, staff email)
lives on the variant that needs it.
"""

from typing import Optional, Union

import attrs

from src.service.booking.domain.enum.booking_enums import UserRole


@attrs.frozen
class CustomerActor:
    user_id: str
    phone: Optional[str] = None
    name: Optional[str] = None

    @property
    def actor_id(self) -> str:
        return self.user_id

    @property
    def role(self) -> str:
        return UserRole.CUSTOMER.value


@attrs.frozen
class GuestActor:
    session_id: str
    phone: str

    @property
    def actor_id(self) -> str:
        return f'guest:{self.session_id}'

    @property
    def role(self) -> str:
        return 'guest'


@attrs.frozen
class StaffActor:
    staff_id: str
    email: str
    role_name: UserRole = UserRole.STAFF

    @property
    def actor_id(self) -> str:
        return self.email

    @property
    def role(self) -> str:
        return self.role_name.value

    @property
    def is_manager(self) -> bool:
        return self.role_name == UserRole.MANAGER


@attrs.frozen
class SystemActor:
    reason: str

    @property
    def actor_id(self) -> str:
        return 'system'

    @property
    def role(self) -> str:
        return 'system'


ActorContext = Union[CustomerActor, GuestActor, StaffActor, SystemActor]

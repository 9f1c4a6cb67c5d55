"""
Shared builders for booking tests

- Domain objects with sensible defaults (selection, request, booking)
- MockUnitOfWork: AbstractUnitOfWork whose repositories are AsyncMocks
- A fixed business clock so availability never depends on the wall clock
"""

from datetime import date, datetime, timedelta
from typing import Any, Optional
from unittest.mock import AsyncMock
from zoneinfo import ZoneInfo

import uuid_utils

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.closed_slot_config_entity import ClosedSlotConfig
from src.service.booking.domain.enum.booking_enums import PaymentMethod, UserRole
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.domain.pricing_domain import compute_price
from src.service.booking.domain.value_object.actor_context import (
    ActorContext,
    CustomerActor,
    GuestActor,
    StaffActor,
)
from src.service.booking.domain.value_object.booking_request import BookingRequest
from src.service.booking.domain.value_object.location import Location
from src.service.booking.domain.value_object.pricing_catalog import (
    DEFAULT_ADD_ON_CONFIG,
    DEFAULT_PACKAGE_CATALOG,
)
from src.service.booking.domain.value_object.service_selection import (
    AddOnSelection,
    ServiceSelection,
)
from src.service.booking.domain.value_object.time_slot import get_time_slot
from test.constants import (
    CUSTOMER_ID,
    CUSTOMER_NAME,
    CUSTOMER_PHONE,
    GUEST_PHONE,
    MANAGER_EMAIL,
    MANAGER_ID,
    STAFF_EMAIL,
    STAFF_ID,
)


DUBAI = ZoneInfo('Asia/Dubai')

# 09:30 in Dubai: every slot of the day is still in the future
NOW = datetime(2026, 10, 20, 9, 30, tzinfo=DUBAI)
TODAY = NOW.date()
TOMORROW = TODAY + timedelta(days=1)


def fixed_clock(now: datetime = NOW):
    return lambda: now


CUSTOMER = CustomerActor(user_id=CUSTOMER_ID, phone=CUSTOMER_PHONE, name=CUSTOMER_NAME)
GUEST = GuestActor(session_id='guest-session-1', phone=GUEST_PHONE)
STAFF = StaffActor(staff_id=STAFF_ID, email=STAFF_EMAIL)
MANAGER = StaffActor(staff_id=MANAGER_ID, email=MANAGER_EMAIL, role_name=UserRole.MANAGER)


def make_selection(
    *,
    package_id: str = 'platinum',
    vehicle_type: str = 'sedan',
    vehicle_size: Optional[str] = None,
    add_ons: tuple[AddOnSelection, ...] = (),
    is_subscription: bool = False,
    promo_code: Optional[str] = None,
) -> ServiceSelection:
    return ServiceSelection.create(
        package_id=package_id,
        vehicle_type=vehicle_type,
        vehicle_size=vehicle_size,
        add_ons=add_ons,
        is_subscription=is_subscription,
        promo_code=promo_code,
    )


def make_request(
    *,
    selection: Optional[ServiceSelection] = None,
    booking_date: date = TOMORROW,
    time: str = '14:00',
    **overrides: Any,
) -> BookingRequest:
    fields: dict[str, Any] = {
        'service': selection or make_selection(),
        'booking_date': booking_date,
        'time_slot': get_time_slot(time),
        'location': Location.create(area='Al Barsha', villa='12', emirate='Dubai'),
        'payment_method': PaymentMethod.CASH,
    }
    return BookingRequest(**(fields | overrides))


def make_booking(
    *,
    actor: ActorContext = CUSTOMER,
    status: BookingStatus = BookingStatus.PENDING,
    request: Optional[BookingRequest] = None,
) -> Booking:
    request = request or make_request()
    booking = Booking.create(
        id=uuid_utils.uuid7(),
        request=request,
        actor=actor,
        price_breakdown=compute_price(
            selection=request.service,
            catalog=DEFAULT_PACKAGE_CATALOG,
            add_on_config=DEFAULT_ADD_ON_CONFIG,
        ),
    )
    booking.status = status
    return booking


class MockUnitOfWork(AbstractUnitOfWork):
    """Unit of work with AsyncMock repositories and a commit counter"""

    def __init__(self) -> None:
        self.booking_command_repo = AsyncMock()
        self.closed_slot_repo = AsyncMock()
        self.pricing_config_repo = AsyncMock()
        self.promo_code_repo = AsyncMock()
        self.referral_credit_repo = AsyncMock()
        self.staff_shift_repo = AsyncMock()
        self.audit_log_repo = AsyncMock()
        self.commits = 0

        self.closed_slot_repo.get.side_effect = lambda *, booking_date: ClosedSlotConfig.empty(
            booking_date
        )
        self.booking_command_repo.list_active_slot_ids.return_value = set()
        self.pricing_config_repo.get_package_catalog.return_value = DEFAULT_PACKAGE_CATALOG
        self.pricing_config_repo.get_add_on_config.return_value = DEFAULT_ADD_ON_CONFIG
        self.promo_code_repo.get_by_code.return_value = None
        self.referral_credit_repo.get_by_user_id.return_value = None
        self.booking_command_repo.create.side_effect = lambda *, booking: booking
        self.booking_command_repo.update_status.side_effect = (
            lambda *, booking, expected_status: booking
        )
        self.booking_command_repo.update_details.side_effect = lambda *, booking: booking

    async def _commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        pass

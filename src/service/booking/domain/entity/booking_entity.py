from datetime import date, datetime, timezone
import secrets
import time as time_module
from typing import List, Optional

import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.booking_errors import (
    IllegalTransition,
    InvalidSelection,
    TerminalState,
)
from src.service.booking.domain.enum.booking_enums import (
    BookingSource,
    CustomerKind,
    PaymentMethod,
)
from src.service.booking.domain.enum.booking_status import (
    TRANSITION_TIMESTAMP_FIELDS,
    BookingStatus,
    can_transition,
)
from src.service.booking.domain.enum.vehicle_type import VehicleSize, VehicleType
from src.service.booking.domain.value_object.actor_context import (
    ActorContext,
    CustomerActor,
    GuestActor,
    StaffActor,
)
from src.service.booking.domain.value_object.booking_request import BookingRequest
from src.service.booking.domain.value_object.discount import Discount
from src.service.booking.domain.value_object.location import Location
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown
from src.service.booking.domain.value_object.service_selection import (
    AddOnSelection,
    ServiceSelection,
    Vehicle,
)


_BASE36 = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ'


def _to_base36(number: int) -> str:
    digits = ''
    while number:
        number, remainder = divmod(number, 36)
        digits = _BASE36[remainder] + digits
    return digits or '0'


def generate_booking_number() -> str:
    """CW-<base36 epoch millis>-<4 random base36 chars>"""
    timestamp = _to_base36(time_module.time_ns() // 1_000_000)
    suffix = ''.join(secrets.choice(_BASE36) for _ in range(4))
    return f'CW-{timestamp}-{suffix}'


@attrs.define
class BookingEdit:
    """Fields a staff member or manager may change on an active booking"""

    booking_date: Optional[date] = None
    time: Optional[str] = None
    package_id: Optional[str] = None
    location: Optional[Location] = None
    price: Optional[int] = None
    notes: Optional[str] = None

    @property
    def changes_slot(self) -> bool:
        return self.booking_date is not None or self.time is not None

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in attrs.asdict(self, recurse=False).values())


@attrs.define
class Booking:
    id: UUID
    booking_number: str
    customer_kind: CustomerKind
    source: BookingSource
    package_id: str
    vehicle_type: VehicleType
    booking_date: date
    time: str
    location: Location
    payment_method: PaymentMethod
    price: int
    price_breakdown: PriceBreakdown
    vehicle_size: Optional[VehicleSize] = None
    add_ons: List[AddOnSelection] = attrs.field(factory=list)
    is_subscription: bool = False
    customer_id: Optional[str] = None
    guest_session_id: Optional[str] = None
    guest_phone: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    entered_by: Optional[str] = None
    vehicle_id: Optional[str] = None
    promo_code_id: Optional[UUID] = None
    promo_code: Optional[str] = None
    promo_discount: Optional[Discount] = None
    referral_discount: Optional[Discount] = None
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    started_journey_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        request: BookingRequest,
        actor: ActorContext,
        price_breakdown: PriceBreakdown,
        promo_code_id: Optional[UUID] = None,
        promo_discount: Optional[Discount] = None,
        referral_discount: Optional[Discount] = None,
    ) -> 'Booking':
        customer_fields: dict[str, object]
        if isinstance(actor, CustomerActor):
            customer_fields = {
                'customer_kind': CustomerKind.CUSTOMER,
                'customer_id': actor.user_id,
                'customer_name': actor.name,
                'customer_phone': actor.phone,
                'source': BookingSource.CUSTOMER,
            }
        elif isinstance(actor, GuestActor):
            customer_fields = {
                'customer_kind': CustomerKind.GUEST,
                'guest_session_id': actor.session_id,
                'guest_phone': actor.phone,
                'source': BookingSource.CUSTOMER,
            }
        elif isinstance(actor, StaffActor):
            customer = request.staff_entered_customer
            if customer is None:
                raise InvalidSelection('Customer name and phone are required for staff orders')
            customer_fields = {
                'customer_kind': CustomerKind.STAFF_ENTERED,
                'customer_name': customer.name,
                'customer_phone': customer.phone,
                'source': BookingSource.STAFF,
                'entered_by': actor.email,
            }
        else:
            raise ForbiddenError('Only customers, guests and staff can create bookings')

        service = request.service
        now = datetime.now(timezone.utc)
        return cls(
            id=id,
            booking_number=generate_booking_number(),
            package_id=service.package_id,
            vehicle_type=service.vehicle.vehicle_type,
            vehicle_size=service.vehicle.vehicle_size,
            add_ons=list(service.add_ons),
            is_subscription=service.is_subscription,
            promo_code_id=promo_code_id,
            promo_code=service.promo_code if promo_discount else None,
            promo_discount=promo_discount,
            referral_discount=referral_discount,
            booking_date=request.booking_date,
            time=request.time_slot.id,
            location=request.location,
            payment_method=request.payment_method,
            notes=request.notes,
            vehicle_id=request.vehicle_id,
            price=price_breakdown.total,
            price_breakdown=price_breakdown,
            status=BookingStatus.PENDING,
            created_at=now,
            created_by=actor.actor_id,
            updated_at=now,
            updated_by=actor.actor_id,
            **customer_fields,  # type: ignore[arg-type]
        )

    @property
    def selection(self) -> ServiceSelection:
        """The priced selection, rebuilt for re-pricing on package edits"""
        return ServiceSelection(
            package_id=self.package_id,
            vehicle=Vehicle(vehicle_type=self.vehicle_type, vehicle_size=self.vehicle_size),
            add_ons=tuple(self.add_ons),
            is_subscription=self.is_subscription,
            promo_code=self.promo_code,
        )

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def is_owned_by(self, actor: ActorContext) -> bool:
        if isinstance(actor, CustomerActor):
            return self.customer_kind == CustomerKind.CUSTOMER and self.customer_id == actor.user_id
        if isinstance(actor, GuestActor):
            return (
                self.customer_kind == CustomerKind.GUEST
                and self.guest_session_id == actor.session_id
            )
        return False

    def validate_transition(self, target: BookingStatus) -> None:
        if self.status.is_terminal:
            raise TerminalState(self.status.value)
        if not can_transition(self.status, target):
            raise IllegalTransition(self.status.value, target.value)

    @Logger.io
    def transition(
        self, *, target: BookingStatus, actor: ActorContext, now: Optional[datetime] = None
    ) -> 'Booking':
        """
        Move to `target`, stamping its transition timestamp.

        Raises:
            TerminalState: booking is completed or cancelled
            IllegalTransition: target is not reachable from the current status
        """
        self.validate_transition(target)
        now = now or datetime.now(timezone.utc)
        return attrs.evolve(
            self,
            status=target,
            updated_at=now,
            updated_by=actor.actor_id,
            **{TRANSITION_TIMESTAMP_FIELDS[target]: now},
        )

    def validate_editable(self) -> None:
        if not self.status.is_active:
            raise TerminalState(self.status.value)

    @Logger.io
    def apply_edit(
        self,
        *,
        edit: BookingEdit,
        actor: ActorContext,
        price_breakdown: Optional[PriceBreakdown] = None,
        now: Optional[datetime] = None,
    ) -> 'Booking':
        """
        Apply an edit; `price_breakdown` is the re-priced result when the package changed.
        """
        self.validate_editable()
        changes: dict[str, object] = {}
        if edit.booking_date is not None:
            changes['booking_date'] = edit.booking_date
        if edit.time is not None:
            changes['time'] = edit.time
        if edit.location is not None:
            changes['location'] = edit.location
        if edit.notes is not None:
            changes['notes'] = edit.notes
        if edit.package_id is not None:
            if price_breakdown is None:
                raise InvalidSelection('Changing the package requires a new price')
            changes |= {
                'package_id': edit.package_id,
                'price_breakdown': price_breakdown,
                'price': price_breakdown.total,
            }
        elif edit.price is not None:
            if edit.price < 0:
                raise InvalidSelection('Price must not be negative')
            changes |= {
                'price': edit.price,
                'price_breakdown': self.price_breakdown.with_override(edit.price),
            }

        return attrs.evolve(
            self,
            updated_at=now or datetime.now(timezone.utc),
            updated_by=actor.actor_id,
            **changes,  # type: ignore[arg-type]
        )

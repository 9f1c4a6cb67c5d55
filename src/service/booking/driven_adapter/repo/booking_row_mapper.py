"""
Booking <-> BookingModel conversion shared by the command and query repositories

SQLAlchemy with as_uuid=True returns stdlib uuid.UUID, entities carry uuid_utils.UUID.
"""

from typing import Any, Optional
import uuid

from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enums import (
    BookingSource,
    CustomerKind,
    PaymentMethod,
)
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.domain.enum.vehicle_type import VehicleSize, VehicleType
from src.service.booking.domain.value_object.discount import Discount
from src.service.booking.domain.value_object.location import Location
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown
from src.service.booking.domain.value_object.service_selection import AddOnSelection
from src.service.booking.driven_adapter.model.booking_model import BookingModel


def to_db_uuid(value: Any) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


def to_optional_db_uuid(value: Any) -> Optional[uuid.UUID]:
    return None if value is None else to_db_uuid(value)


def from_db_uuid(value: Any) -> Optional[UUID]:
    return None if value is None else UUID(str(value))


def booking_to_row_values(booking: Booking) -> dict[str, Any]:
    """Column values for insert / update, keyed by model attribute name"""
    return {
        'id': to_db_uuid(booking.id),
        'booking_number': booking.booking_number,
        'customer_kind': booking.customer_kind.value,
        'customer_id': booking.customer_id,
        'guest_session_id': booking.guest_session_id,
        'guest_phone': booking.guest_phone,
        'customer_name': booking.customer_name,
        'customer_phone': booking.customer_phone,
        'source': booking.source.value,
        'entered_by': booking.entered_by,
        'package_id': booking.package_id,
        'vehicle_type': booking.vehicle_type.value,
        'vehicle_size': booking.vehicle_size.value if booking.vehicle_size else None,
        'vehicle_id': booking.vehicle_id,
        'add_ons': [add_on.to_dict() for add_on in booking.add_ons],
        'is_subscription': booking.is_subscription,
        'promo_code_id': to_optional_db_uuid(booking.promo_code_id),
        'promo_code': booking.promo_code,
        'promo_discount': booking.promo_discount.to_dict() if booking.promo_discount else None,
        'referral_discount': (
            booking.referral_discount.to_dict() if booking.referral_discount else None
        ),
        'booking_date': booking.booking_date,
        'time': booking.time,
        'location': booking.location.to_dict(),
        'payment_method': booking.payment_method.value,
        'notes': booking.notes,
        'price': booking.price,
        'price_breakdown': booking.price_breakdown.to_dict(),
        'status': booking.status.value,
        'created_at': booking.created_at,
        'created_by': booking.created_by,
        'confirmed_at': booking.confirmed_at,
        'started_journey_at': booking.started_journey_at,
        'started_at': booking.started_at,
        'completed_at': booking.completed_at,
        'cancelled_at': booking.cancelled_at,
        'updated_at': booking.updated_at,
        'updated_by': booking.updated_by,
    }


def row_to_booking(row: BookingModel) -> Booking:
    return Booking(
        id=UUID(str(row.id)),
        booking_number=row.booking_number,
        customer_kind=CustomerKind(row.customer_kind),
        source=BookingSource(row.source),
        package_id=row.package_id,
        vehicle_type=VehicleType(row.vehicle_type),
        vehicle_size=VehicleSize(row.vehicle_size) if row.vehicle_size else None,
        vehicle_id=row.vehicle_id,
        add_ons=[
            AddOnSelection(add_on_id=item['add_on_id'], custom_amount=item.get('custom_amount'))
            for item in row.add_ons or []
        ],
        is_subscription=row.is_subscription,
        customer_id=row.customer_id,
        guest_session_id=row.guest_session_id,
        guest_phone=row.guest_phone,
        customer_name=row.customer_name,
        customer_phone=row.customer_phone,
        entered_by=row.entered_by,
        promo_code_id=from_db_uuid(row.promo_code_id),
        promo_code=row.promo_code,
        promo_discount=Discount.from_dict(row.promo_discount),
        referral_discount=Discount.from_dict(row.referral_discount),
        booking_date=row.booking_date,
        time=row.time,
        location=Location.from_dict(row.location),
        payment_method=PaymentMethod(row.payment_method),
        notes=row.notes,
        price=row.price,
        price_breakdown=PriceBreakdown.from_dict(row.price_breakdown),
        status=BookingStatus(row.status),
        created_at=row.created_at,
        created_by=row.created_by,
        confirmed_at=row.confirmed_at,
        started_journey_at=row.started_journey_at,
        started_at=row.started_at,
        completed_at=row.completed_at,
        cancelled_at=row.cancelled_at,
        updated_at=row.updated_at,
        updated_by=row.updated_by,
    )

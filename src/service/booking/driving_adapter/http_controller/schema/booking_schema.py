from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.booking.domain.enum.booking_enums import PaymentMethod
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.driving_adapter.http_controller.schema.pricing_schema import (
    AddOnSelectionSchema,
    PriceBreakdownResponse,
    ServiceSelectionRequest,
)


class LocationSchema(BaseModel):
    area: str
    villa: Optional[str] = None
    street: Optional[str] = None
    emirate: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    instructions: Optional[str] = None


class StaffEnteredCustomerSchema(BaseModel):
    name: str
    phone: str


class BookingCreateRequest(BaseModel):
    model_config = {
        'populate_by_name': True,
        'json_schema_extra': {
            'example': {
                'service': {
                    'package_id': 'platinum',
                    'vehicle_type': 'sedan',
                    'add_ons': [{'add_on_id': 'exterior_wax'}],
                },
                'date': '2026-10-20',
                'time': '14:00',
                'location': {'area': 'Al Barsha', 'villa': '12', 'emirate': 'Dubai'},
                'payment_method': 'cash',
                'notes': 'Gate code 4411',
            }
        },
    }

    service: ServiceSelectionRequest
    booking_date: date = Field(alias='date')
    time: str
    location: LocationSchema
    payment_method: PaymentMethod
    notes: Optional[str] = None
    vehicle_id: Optional[str] = None
    # Staff orders only
    customer: Optional[StaffEnteredCustomerSchema] = None


class BookingResponse(BaseModel):
    model_config = {
        'populate_by_name': True,
        'json_schema_extra': {
            'example': {
                'id': '01936d8f-5e73-7c4e-a9c5-123456789abc',  # UUID7
                'booking_number': 'CW-MC1Z5K2A-7QX3',
                'status': 'pending',
                'date': '2026-10-20',
                'time': '14:00',
                'price': 94,
            }
        },
    }

    id: UtilsUUID7
    booking_number: str
    status: BookingStatus
    customer_kind: str
    source: str
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    guest_session_id: Optional[str] = None
    entered_by: Optional[str] = None
    package_id: str
    vehicle_type: str
    vehicle_size: Optional[str] = None
    vehicle_id: Optional[str] = None
    add_ons: List[AddOnSelectionSchema]
    is_subscription: bool
    promo_code: Optional[str] = None
    booking_date: date = Field(alias='date')
    time: str
    location: Dict[str, Any]
    payment_method: str
    notes: Optional[str] = None
    price: int
    price_breakdown: PriceBreakdownResponse
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    started_journey_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None


class BookingStatusUpdateRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'status': 'confirmed'}}}

    status: BookingStatus


class BookingEditRequest(BaseModel):
    model_config = {
        'populate_by_name': True,
        'json_schema_extra': {'example': {'date': '2026-10-21', 'time': '16:00'}},
    }

    booking_date: Optional[date] = Field(default=None, alias='date')
    time: Optional[str] = None
    package_id: Optional[str] = None
    location: Optional[LocationSchema] = None
    price: Optional[int] = Field(default=None, ge=0)  # manager override
    notes: Optional[str] = None


class DuplicateCheckResponse(BaseModel):
    has_duplicate: bool
    bookings: List[BookingResponse]

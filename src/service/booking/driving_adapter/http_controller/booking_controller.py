from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.edit_booking_use_case import EditBookingUseCase
from src.service.booking.app.command.update_booking_status_use_case import (
    UpdateBookingStatusUseCase,
)
from src.service.booking.app.interface.i_booking_query_repo import BookingFilter
from src.service.booking.app.query.check_duplicate_booking_use_case import (
    CheckDuplicateBookingUseCase,
)
from src.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from src.service.booking.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.booking.domain.entity.booking_entity import Booking, BookingEdit
from src.service.booking.domain.enum.booking_enums import BookingSource
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.domain.value_object.actor_context import ActorContext, StaffActor
from src.service.booking.domain.value_object.booking_request import (
    BookingRequest,
    StaffEnteredCustomer,
)
from src.service.booking.domain.value_object.guest_session import normalize_uae_phone
from src.service.booking.domain.value_object.location import Location
from src.service.booking.domain.value_object.time_slot import get_time_slot
from src.service.booking.driving_adapter.http_controller.auth.role_auth import (
    get_current_actor,
    require_staff,
)
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingEditRequest,
    BookingResponse,
    BookingStatusUpdateRequest,
    DuplicateCheckResponse,
)
from src.service.booking.driving_adapter.http_controller.schema.pricing_schema import (
    AddOnSelectionSchema,
    PriceBreakdownResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _to_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        booking_number=booking.booking_number,
        status=booking.status,
        customer_kind=booking.customer_kind.value,
        source=booking.source.value,
        customer_id=booking.customer_id,
        customer_name=booking.customer_name,
        customer_phone=booking.customer_phone,
        guest_session_id=booking.guest_session_id,
        entered_by=booking.entered_by,
        package_id=booking.package_id,
        vehicle_type=booking.vehicle_type.value,
        vehicle_size=booking.vehicle_size.value if booking.vehicle_size else None,
        vehicle_id=booking.vehicle_id,
        add_ons=[AddOnSelectionSchema(**add_on.to_dict()) for add_on in booking.add_ons],
        is_subscription=booking.is_subscription,
        promo_code=booking.promo_code,
        booking_date=booking.booking_date,
        time=booking.time,
        location=booking.location.to_dict(),
        payment_method=booking.payment_method.value,
        notes=booking.notes,
        price=booking.price,
        price_breakdown=PriceBreakdownResponse(**booking.price_breakdown.to_dict()),
        created_at=booking.created_at,
        confirmed_at=booking.confirmed_at,
        started_journey_at=booking.started_journey_at,
        started_at=booking.started_at,
        completed_at=booking.completed_at,
        cancelled_at=booking.cancelled_at,
        updated_at=booking.updated_at,
        updated_by=booking.updated_by,
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    actor: ActorContext = Depends(get_current_actor),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('booking.date', request.booking_date.isoformat())
        span.set_attribute('booking.time', request.time)
        span.set_attribute('actor.role', actor.role)

        booking_request = BookingRequest(
            service=request.service.to_selection(),
            booking_date=request.booking_date,
            time_slot=get_time_slot(request.time),
            location=Location.create(**request.location.model_dump()),
            payment_method=request.payment_method,
            notes=request.notes,
            vehicle_id=request.vehicle_id,
            staff_entered_customer=(
                StaffEnteredCustomer(
                    name=request.customer.name,
                    phone=normalize_uae_phone(request.customer.phone),
                )
                if request.customer
                else None
            ),
        )
        booking = await use_case.execute(request=booking_request, actor=actor)

        span.set_attribute('booking.id', str(booking.id))
        return _to_response(booking)


@router.get('')
@Logger.io
async def list_bookings(
    booking_date: Optional[date] = Query(default=None, alias='date'),
    booking_status: Optional[BookingStatus] = Query(default=None, alias='status'),
    source: Optional[BookingSource] = None,
    active_only: bool = False,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    actor: ActorContext = Depends(get_current_actor),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.execute(
        booking_filter=BookingFilter(
            booking_date=booking_date,
            status=booking_status,
            source=source,
            active_only=active_only,
            limit=limit,
            offset=offset,
        ),
        actor=actor,
    )
    return [_to_response(booking) for booking in bookings]


@router.get('/duplicate_check')
@Logger.io
async def check_duplicate_booking(
    booking_date: date = Query(alias='date'),
    customer_phone: Optional[str] = None,
    actor: ActorContext = Depends(get_current_actor),
    use_case: CheckDuplicateBookingUseCase = Depends(CheckDuplicateBookingUseCase.depends),
) -> DuplicateCheckResponse:
    bookings = await use_case.execute(
        booking_date=booking_date, actor=actor, customer_phone=customer_phone
    )
    return DuplicateCheckResponse(
        has_duplicate=bool(bookings), bookings=[_to_response(booking) for booking in bookings]
    )


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: UtilsUUID7,
    actor: ActorContext = Depends(get_current_actor),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    return _to_response(await use_case.execute(booking_id=booking_id, actor=actor))


@router.patch('/{booking_id}/status')
@Logger.io
async def update_booking_status(
    booking_id: UtilsUUID7,
    request: BookingStatusUpdateRequest,
    actor: ActorContext = Depends(get_current_actor),
    use_case: UpdateBookingStatusUseCase = Depends(UpdateBookingStatusUseCase.depends),
) -> BookingResponse:
    # Use case enforces who may move the booking where (Fail Fast)
    booking = await use_case.execute(
        booking_id=booking_id, target_status=request.status, actor=actor
    )
    return _to_response(booking)


@router.post('/{booking_id}/advance')
@Logger.io
async def advance_booking(
    booking_id: UtilsUUID7,
    current_user: StaffActor = Depends(require_staff),
    use_case: UpdateBookingStatusUseCase = Depends(UpdateBookingStatusUseCase.depends),
) -> BookingResponse:
    return _to_response(await use_case.advance(booking_id=booking_id, actor=current_user))


@router.patch('/{booking_id}')
@Logger.io
async def edit_booking(
    booking_id: UtilsUUID7,
    request: BookingEditRequest,
    current_user: StaffActor = Depends(require_staff),
    use_case: EditBookingUseCase = Depends(EditBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.execute(
        booking_id=booking_id,
        edit=BookingEdit(
            booking_date=request.booking_date,
            time=request.time,
            package_id=request.package_id,
            location=(
                Location.create(**request.location.model_dump()) if request.location else None
            ),
            price=request.price,
            notes=request.notes,
        ),
        actor=current_user,
    )
    return _to_response(booking)

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.guest_session_use_case import GuestSessionUseCase
from src.service.booking.app.command.migrate_guest_bookings_use_case import (
    MigrateGuestBookingsUseCase,
)
from src.service.booking.domain.value_object.actor_context import CustomerActor
from src.service.booking.driving_adapter.http_controller.auth.role_auth import require_customer
from src.service.booking.driving_adapter.http_controller.schema.guest_schema import (
    GuestSessionRequest,
    GuestSessionResponse,
    GuestSessionValidateRequest,
    GuestSessionValidateResponse,
    MigrateGuestBookingsRequest,
    MigrateGuestBookingsResponse,
)


router = APIRouter()


@router.post('/session', status_code=status.HTTP_201_CREATED)
@Logger.io
async def issue_guest_session(
    request: GuestSessionRequest,
    use_case: GuestSessionUseCase = Depends(GuestSessionUseCase.depends),
) -> GuestSessionResponse:
    # Phone ownership is verified upstream (OTP) before this is called
    session = await use_case.issue(phone=request.phone)
    return GuestSessionResponse(
        session_id=session.session_id,
        phone=session.phone,
        token=session.token,
        expires_at=session.expires_at,
    )


@router.post('/session/validate')
@Logger.io
async def validate_guest_session(
    request: GuestSessionValidateRequest,
    use_case: GuestSessionUseCase = Depends(GuestSessionUseCase.depends),
) -> GuestSessionValidateResponse:
    validation = await use_case.validate(
        token=request.token, expected_session_id=request.expected_session_id
    )
    return GuestSessionValidateResponse(
        status=validation.status, session_id=validation.session_id, phone=validation.phone
    )


@router.post('/migrate')
@Logger.io
async def migrate_guest_bookings(
    request: MigrateGuestBookingsRequest,
    current_user: CustomerActor = Depends(require_customer),
    use_case: MigrateGuestBookingsUseCase = Depends(MigrateGuestBookingsUseCase.depends),
) -> MigrateGuestBookingsResponse:
    migrated = await use_case.execute(actor=current_user, phone=request.phone)
    return MigrateGuestBookingsResponse(migrated=migrated)

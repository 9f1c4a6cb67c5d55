from datetime import date

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.manage_closed_slots_use_case import (
    ManageClosedSlotsUseCase,
)
from src.service.booking.app.query.get_available_slots_use_case import GetAvailableSlotsUseCase
from src.service.booking.app.query.get_closed_slots_use_case import GetClosedSlotsUseCase
from src.service.booking.domain.entity.closed_slot_config_entity import ClosedSlotConfig
from src.service.booking.domain.value_object.actor_context import StaffActor
from src.service.booking.driving_adapter.http_controller.auth.role_auth import (
    require_manager,
    require_staff,
)
from src.service.booking.driving_adapter.http_controller.schema.slot_schema import (
    AvailableSlotsResponse,
    ClosedSlotsRequest,
    ClosedSlotsResponse,
    TimeSlotResponse,
    ToggleClosedSlotRequest,
)


router = APIRouter()


def _closed_slots_response(config: ClosedSlotConfig) -> ClosedSlotsResponse:
    return ClosedSlotsResponse(
        booking_date=config.booking_date,
        slot_ids=config.sorted_slot_ids,
        version=config.version,
        updated_at=config.updated_at,
        updated_by=config.updated_by,
    )


@router.get('/available')
@Logger.io
async def get_available_slots(
    booking_date: date = Query(alias='date'),
    use_case: GetAvailableSlotsUseCase = Depends(GetAvailableSlotsUseCase.depends),
) -> AvailableSlotsResponse:
    slots = await use_case.execute(booking_date=booking_date)
    return AvailableSlotsResponse(
        booking_date=booking_date,
        slots=[TimeSlotResponse(id=slot.id, label=slot.label, hour=slot.hour) for slot in slots],
    )


@router.get('/closed/{booking_date}')
@Logger.io
async def get_closed_slots(
    booking_date: date,
    current_user: StaffActor = Depends(require_staff),
    use_case: GetClosedSlotsUseCase = Depends(GetClosedSlotsUseCase.depends),
) -> ClosedSlotsResponse:
    return _closed_slots_response(await use_case.execute(booking_date=booking_date))


@router.put('/closed/{booking_date}')
@Logger.io
async def set_closed_slots(
    booking_date: date,
    request: ClosedSlotsRequest,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManageClosedSlotsUseCase = Depends(ManageClosedSlotsUseCase.depends),
) -> ClosedSlotsResponse:
    config = await use_case.set_slots(
        booking_date=booking_date, slot_ids=request.slot_ids, actor=current_user
    )
    return _closed_slots_response(config)


@router.post('/closed/{booking_date}/toggle')
@Logger.io
async def toggle_closed_slot(
    booking_date: date,
    request: ToggleClosedSlotRequest,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManageClosedSlotsUseCase = Depends(ManageClosedSlotsUseCase.depends),
) -> ClosedSlotsResponse:
    config = await use_case.toggle(
        booking_date=booking_date, slot_id=request.slot_id, actor=current_user
    )
    return _closed_slots_response(config)


@router.post('/closed/{booking_date}/close_all')
@Logger.io
async def close_all_slots(
    booking_date: date,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManageClosedSlotsUseCase = Depends(ManageClosedSlotsUseCase.depends),
) -> ClosedSlotsResponse:
    return _closed_slots_response(
        await use_case.close_all(booking_date=booking_date, actor=current_user)
    )


@router.post('/closed/{booking_date}/open_all')
@Logger.io
async def open_all_slots(
    booking_date: date,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManageClosedSlotsUseCase = Depends(ManageClosedSlotsUseCase.depends),
) -> ClosedSlotsResponse:
    return _closed_slots_response(
        await use_case.open_all(booking_date=booking_date, actor=current_user)
    )

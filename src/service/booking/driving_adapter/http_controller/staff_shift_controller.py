from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.manage_staff_shift_use_case import ManageStaffShiftUseCase
from src.service.booking.app.query.get_staffing_signals_use_case import (
    GetStaffingSignalsUseCase,
)
from src.service.booking.domain.value_object.actor_context import StaffActor
from src.service.booking.driving_adapter.http_controller.auth.role_auth import (
    require_manager,
    require_staff,
)
from src.service.booking.driving_adapter.http_controller.schema.staff_shift_schema import (
    StaffingSignalResponse,
    StaffShiftRequest,
    StaffShiftResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def assign_staff_shift(
    request: StaffShiftRequest,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManageStaffShiftUseCase = Depends(ManageStaffShiftUseCase.depends),
) -> StaffShiftResponse:
    shift = await use_case.assign(
        staff_id=request.staff_id,
        shift_date=request.shift_date,
        time_slot=request.time_slot,
        actor=current_user,
    )
    return StaffShiftResponse(
        staff_id=shift.staff_id, shift_date=shift.shift_date, time_slot=shift.time_slot
    )


@router.delete('', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def remove_staff_shift(
    request: StaffShiftRequest,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManageStaffShiftUseCase = Depends(ManageStaffShiftUseCase.depends),
) -> None:
    await use_case.remove(
        staff_id=request.staff_id,
        shift_date=request.shift_date,
        time_slot=request.time_slot,
        actor=current_user,
    )


@router.get('/signals')
@Logger.io
async def get_staffing_signals(
    shift_date: date = Query(alias='date'),
    current_user: StaffActor = Depends(require_staff),
    use_case: GetStaffingSignalsUseCase = Depends(GetStaffingSignalsUseCase.depends),
) -> List[StaffingSignalResponse]:
    signals = await use_case.execute(shift_date=shift_date)
    return [
        StaffingSignalResponse(
            slot_id=signal.slot_id,
            bookings=signal.bookings,
            staff=signal.staff,
            required_staff=signal.required_staff,
            is_understaffed=signal.is_understaffed,
        )
        for signal in signals
    ]

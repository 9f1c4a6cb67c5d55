from datetime import date

from pydantic import BaseModel, Field


class StaffShiftRequest(BaseModel):
    model_config = {
        'populate_by_name': True,
        'json_schema_extra': {
            'example': {'staff_id': 'staff-7', 'date': '2026-10-20', 'time_slot': '14:00'}
        },
    }

    staff_id: str
    shift_date: date = Field(alias='date')
    time_slot: str


class StaffShiftResponse(BaseModel):
    model_config = {'populate_by_name': True}

    staff_id: str
    shift_date: date = Field(alias='date')
    time_slot: str


class StaffingSignalResponse(BaseModel):
    slot_id: str
    bookings: int
    staff: int
    required_staff: int
    is_understaffed: bool

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class TimeSlotResponse(BaseModel):
    id: str
    label: str
    hour: int


class AvailableSlotsResponse(BaseModel):
    model_config = {
        'populate_by_name': True,
        'json_schema_extra': {
            'example': {
                'date': '2026-10-20',
                'slots': [
                    {'id': '14:00', 'label': '2:00 PM', 'hour': 14},
                    {'id': '15:00', 'label': '3:00 PM', 'hour': 15},
                ],
            }
        },
    }

    booking_date: date = Field(alias='date')
    slots: List[TimeSlotResponse]


class ClosedSlotsRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'slot_ids': ['12:00', '13:00']}}}

    slot_ids: List[str]


class ToggleClosedSlotRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'slot_id': '18:00'}}}

    slot_id: str


class ClosedSlotsResponse(BaseModel):
    model_config = {'populate_by_name': True}

    booking_date: date = Field(alias='date')
    slot_ids: List[str]
    version: int
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

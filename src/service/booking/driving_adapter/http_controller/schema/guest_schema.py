from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.service.booking.domain.enum.booking_enums import GuestSessionStatus


class GuestSessionRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'phone': '0501234567'}}}

    phone: str


class GuestSessionResponse(BaseModel):
    session_id: str
    phone: str
    token: str
    expires_at: datetime


class GuestSessionValidateRequest(BaseModel):
    token: Optional[str] = None
    expected_session_id: Optional[str] = None


class GuestSessionValidateResponse(BaseModel):
    status: GuestSessionStatus
    session_id: Optional[str] = None
    phone: Optional[str] = None


class MigrateGuestBookingsRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'phone': '+971501234567'}}}

    phone: str


class MigrateGuestBookingsResponse(BaseModel):
    migrated: int

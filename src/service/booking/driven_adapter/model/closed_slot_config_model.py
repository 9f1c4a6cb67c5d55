from datetime import date, datetime
from typing import Optional

from sqlalchemy import JSON, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


class ClosedSlotConfigModel(Base):
    """One row per date that has at least one manually closed slot"""

    __tablename__ = 'closed_slot_config'

    booking_date: Mapped[date] = mapped_column('date', Date, primary_key=True)
    slot_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

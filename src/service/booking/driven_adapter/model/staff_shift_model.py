from datetime import date

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class StaffShiftModel(Base):
    __tablename__ = 'staff_shift'

    staff_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    shift_date: Mapped[date] = mapped_column(Date, primary_key=True)
    time_slot: Mapped[str] = mapped_column(String(5), primary_key=True)

from abc import ABC, abstractmethod
from datetime import date

from src.service.booking.domain.entity.staff_shift_entity import StaffShift


class IStaffShiftRepo(ABC):
    @abstractmethod
    async def add(self, *, shift: StaffShift) -> StaffShift:
        """Idempotent: assigning the same shift twice keeps one row"""
        pass

    @abstractmethod
    async def remove(self, *, shift: StaffShift) -> bool:
        pass

    @abstractmethod
    async def count_staff_by_slot(self, *, shift_date: date) -> dict[str, int]:
        pass

from abc import ABC, abstractmethod
from datetime import date

from src.service.booking.domain.entity.closed_slot_config_entity import ClosedSlotConfig


class IClosedSlotRepo(ABC):
    @abstractmethod
    async def get(self, *, booking_date: date) -> ClosedSlotConfig:
        """
        Closed slots for a date

        Returns:
            Stored config, or an empty config with version 0 when the date has none
        """
        pass

    @abstractmethod
    async def save(self, *, config: ClosedSlotConfig, expected_version: int) -> ClosedSlotConfig:
        """
        Store the config, deleting the date entry when it is empty

        Raises:
            ConcurrentModification: stored version differs from `expected_version`
        """
        pass

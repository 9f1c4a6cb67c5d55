from abc import ABC, abstractmethod

from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry


class IAuditLogRepo(ABC):
    @abstractmethod
    async def add(self, *, entry: AuditLogEntry) -> None:
        pass

    @abstractmethod
    async def list_for_target(self, *, target_id: str) -> list[AuditLogEntry]:
        pass

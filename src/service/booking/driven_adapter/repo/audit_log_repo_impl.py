import orjson
from sqlalchemy import select
from uuid_utils import UUID

from src.platform.database.session_repo import SessionRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_audit_log_repo import IAuditLogRepo
from src.service.booking.domain.entity.audit_log_entity import AuditLogEntry
from src.service.booking.domain.enum.booking_enums import AuditAction
from src.service.booking.driven_adapter.model.audit_log_model import AuditLogModel
from src.service.booking.driven_adapter.repo.booking_row_mapper import to_db_uuid


class AuditLogRepoImpl(SessionRepo, IAuditLogRepo):
    @Logger.io
    async def add(self, *, entry: AuditLogEntry) -> None:
        async with self._get_session() as session:
            session.add(
                AuditLogModel(
                    id=to_db_uuid(entry.id),
                    action=entry.action.value,
                    performed_by=entry.performed_by,
                    performed_by_role=entry.performed_by_role,
                    target_id=entry.target_id,
                    # Stored details are plain JSON
                    details=orjson.loads(orjson.dumps(entry.details, default=str)),
                    created_at=entry.created_at,
                )
            )
            await session.flush()

    @Logger.io
    async def list_for_target(self, *, target_id: str) -> list[AuditLogEntry]:
        async with self._get_session() as session:
            result = await session.execute(
                select(AuditLogModel)
                .where(AuditLogModel.target_id == target_id)
                .order_by(AuditLogModel.created_at, AuditLogModel.id)
            )
            return [
                AuditLogEntry(
                    id=UUID(str(row.id)),
                    action=AuditAction(row.action),
                    performed_by=row.performed_by,
                    performed_by_role=row.performed_by_role,
                    target_id=row.target_id,
                    details=row.details,
                    created_at=row.created_at,
                )
                for row in result.scalars().all()
            ]

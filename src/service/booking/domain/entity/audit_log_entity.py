from datetime import datetime, timezone
from typing import Any, Optional

import attrs
import uuid_utils
from uuid_utils import UUID

from src.service.booking.domain.enum.booking_enums import AuditAction
from src.service.booking.domain.value_object.actor_context import ActorContext


@attrs.frozen
class AuditLogEntry:
    id: UUID
    action: AuditAction
    performed_by: str
    performed_by_role: str
    target_id: Optional[str]
    details: dict[str, Any]
    created_at: datetime

    @classmethod
    def record(
        cls,
        *,
        action: AuditAction,
        actor: ActorContext,
        target_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> 'AuditLogEntry':
        return cls(
            id=uuid_utils.uuid7(),
            action=action,
            performed_by=actor.actor_id,
            performed_by_role=actor.role,
            target_id=target_id,
            details=details or {},
            created_at=datetime.now(timezone.utc),
        )

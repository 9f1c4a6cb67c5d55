from datetime import datetime
from typing import Any, Optional
import uuid

from sqlalchemy import JSON, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


class AuditLogModel(Base):
    __tablename__ = 'audit_log'

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    performed_by: Mapped[str] = mapped_column(String(255), nullable=False)
    performed_by_role: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


PACKAGE_CATALOG_KEY = 'packages'
ADD_ON_CONFIG_KEY = 'add_ons'


class PricingConfigModel(Base):
    """Versioned pricing documents keyed by name ('packages', 'add_ons')"""

    __tablename__ = 'pricing_config'

    key: Mapped[str] = mapped_column(String(32), primary_key=True)
    document: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

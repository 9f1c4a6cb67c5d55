from datetime import datetime
from typing import Any, Optional
import uuid

from sqlalchemy import JSON, Boolean, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


class ReferralCreditModel(Base):
    __tablename__ = 'referral_credit'

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    referral_code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    referred_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    referred_by_code: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    referral_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    successful_referrals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pending_referrals: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_rewards_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    referee_discount: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    referee_reward_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    referee_reward_booking_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True), nullable=True
    )
    referral_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

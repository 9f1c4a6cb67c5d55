from datetime import datetime
import uuid

from sqlalchemy import ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base


class PromoRedemptionModel(Base):
    """A booking redeems at most one promo code, at most once"""

    __tablename__ = 'promo_redemption'

    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('booking.id', ondelete='CASCADE'), primary_key=True
    )
    promo_code_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey('promo_code.id', ondelete='CASCADE'), nullable=False
    )
    redeemed_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

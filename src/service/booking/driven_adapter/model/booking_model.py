from datetime import date, datetime
from typing import Any, Optional
import uuid

from sqlalchemy import JSON, Boolean, Date, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.column_types import UTCDateTime
from src.platform.database.orm_db_setting import Base
from src.service.booking.domain.enum.booking_status import ACTIVE_STATUSES


ACTIVE_STATUS_PREDICATE = text(
    'status IN ({})'.format(', '.join(f"'{status.value}'" for status in sorted(ACTIVE_STATUSES)))
)


class BookingModel(Base):
    __tablename__ = 'booking'
    __table_args__ = (
        # At most one active booking per slot, enforced by the store
        Index(
            'uq_booking_active_slot',
            'date',
            'time',
            unique=True,
            postgresql_where=ACTIVE_STATUS_PREDICATE,
            sqlite_where=ACTIVE_STATUS_PREDICATE,
        ),
        Index('ix_booking_guest_phone_kind', 'guest_phone', 'customer_kind'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    booking_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)

    # Customer reference
    customer_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    customer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    guest_session_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    guest_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    customer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    source: Mapped[str] = mapped_column(String(10), nullable=False, default='customer')
    entered_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Selection
    package_id: Mapped[str] = mapped_column(String(32), nullable=False)
    vehicle_type: Mapped[str] = mapped_column(String(20), nullable=False)
    vehicle_size: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    vehicle_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    add_ons: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    is_subscription: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    promo_code_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    promo_code: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    promo_discount: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    referral_discount: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # Schedule and place
    booking_date: Mapped[date] = mapped_column('date', Date, nullable=False, index=True)
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    location: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Money
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    price_breakdown: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    # Lifecycle
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='pending', index=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    started_journey_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    started_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    updated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

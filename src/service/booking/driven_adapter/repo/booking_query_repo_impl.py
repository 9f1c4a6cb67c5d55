from collections import Counter
from datetime import date
from typing import Optional

from sqlalchemy import select
from uuid_utils import UUID

from src.platform.database.session_repo import SessionRepo
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import BookingFilter, IBookingQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import ACTIVE_STATUSES
from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.repo.booking_row_mapper import row_to_booking, to_db_uuid


ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_STATUSES]


class BookingQueryRepoImpl(SessionRepo, IBookingQueryRepo):
    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel).where(BookingModel.id == to_db_uuid(booking_id))
            )
            row = result.scalar_one_or_none()
            return row_to_booking(row) if row else None

    @Logger.io
    async def list_bookings(self, *, booking_filter: BookingFilter) -> list[Booking]:
        stmt = select(BookingModel)
        if booking_filter.customer_kind is not None:
            stmt = stmt.where(BookingModel.customer_kind == booking_filter.customer_kind.value)
        if booking_filter.customer_id is not None:
            stmt = stmt.where(BookingModel.customer_id == booking_filter.customer_id)
        if booking_filter.guest_session_id is not None:
            stmt = stmt.where(BookingModel.guest_session_id == booking_filter.guest_session_id)
        if booking_filter.customer_phone is not None:
            stmt = stmt.where(BookingModel.customer_phone == booking_filter.customer_phone)
        if booking_filter.booking_date is not None:
            stmt = stmt.where(BookingModel.booking_date == booking_filter.booking_date)
        if booking_filter.status is not None:
            stmt = stmt.where(BookingModel.status == booking_filter.status.value)
        if booking_filter.source is not None:
            stmt = stmt.where(BookingModel.source == booking_filter.source.value)
        if booking_filter.active_only:
            stmt = stmt.where(BookingModel.status.in_(ACTIVE_STATUS_VALUES))

        stmt = (
            stmt.order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
            .limit(booking_filter.limit)
            .offset(booking_filter.offset)
        )
        async with self._get_session() as session:
            result = await session.execute(stmt)
            return [row_to_booking(row) for row in result.scalars().all()]

    @Logger.io
    async def list_active_slot_ids(self, *, booking_date: date) -> set[str]:
        return set(await self.count_active_bookings_by_slot(booking_date=booking_date))

    @Logger.io
    async def count_active_bookings_by_slot(self, *, booking_date: date) -> dict[str, int]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel.time).where(
                    BookingModel.booking_date == booking_date,
                    BookingModel.status.in_(ACTIVE_STATUS_VALUES),
                )
            )
            return dict(Counter(result.scalars().all()))

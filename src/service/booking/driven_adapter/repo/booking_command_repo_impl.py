"""
Booking Command Repository Implementation

Runs inside the unit of work session. Slot uniqueness is enforced by the
`uq_booking_active_slot` partial unique index; a violation surfaces here as
IntegrityError and is translated to SlotNoLongerAvailable.
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from uuid_utils import UUID

from src.platform.database.session_repo import SessionRepo
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.booking_errors import (
    ConcurrentModification,
    SlotNoLongerAvailable,
)
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enums import CustomerKind
from src.service.booking.domain.enum.booking_status import (
    ACTIVE_STATUSES,
    TRANSITION_TIMESTAMP_FIELDS,
    BookingStatus,
)
from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.repo.booking_row_mapper import (
    booking_to_row_values,
    row_to_booking,
    to_db_uuid,
)


ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_STATUSES]

# Columns an edit may change
EDITABLE_COLUMNS = (
    'booking_date',
    'time',
    'package_id',
    'location',
    'price',
    'price_breakdown',
    'notes',
    'updated_at',
    'updated_by',
)


def _is_booking_number_clash(error: IntegrityError) -> bool:
    return 'booking_number' in str(error.orig)


class BookingCommandRepoImpl(SessionRepo, IBookingCommandRepo):
    @Logger.io
    async def get_by_id(self, *, booking_id: UUID) -> Optional[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel).where(BookingModel.id == to_db_uuid(booking_id))
            )
            row = result.scalar_one_or_none()
            return row_to_booking(row) if row else None

    @Logger.io
    async def get_by_id_for_update(self, *, booking_id: UUID) -> Optional[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel)
                .where(BookingModel.id == to_db_uuid(booking_id))
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            row = result.scalar_one_or_none()
            return row_to_booking(row) if row else None

    @Logger.io
    async def list_active_slot_ids(
        self, *, booking_date: date, exclude_booking_id: Optional[UUID] = None
    ) -> set[str]:
        async with self._get_session() as session:
            stmt = select(BookingModel.time).where(
                BookingModel.booking_date == booking_date,
                BookingModel.status.in_(ACTIVE_STATUS_VALUES),
            )
            if exclude_booking_id is not None:
                stmt = stmt.where(BookingModel.id != to_db_uuid(exclude_booking_id))
            result = await session.execute(stmt)
            return set(result.scalars().all())

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        async with self._get_session() as session:
            session.add(BookingModel(**booking_to_row_values(booking)))
            try:
                await session.flush()
            except IntegrityError as e:
                if _is_booking_number_clash(e):
                    raise ConflictError('Booking number collision, please retry') from e
                Logger.base.warning(
                    f'⚔️ [BOOKING] Slot {booking.booking_date} {booking.time} lost to a concurrent booking'
                )
                raise SlotNoLongerAvailable(booking.booking_date, booking.time) from e

            Logger.base.info(f'📝 [BOOKING] Inserted {booking.booking_number} ({booking.id})')
            return booking

    @Logger.io
    async def update_status(self, *, booking: Booking, expected_status: BookingStatus) -> Booking:
        values: dict[str, object] = {
            'status': booking.status.value,
            'updated_at': booking.updated_at,
            'updated_by': booking.updated_by,
        }
        timestamp_field = TRANSITION_TIMESTAMP_FIELDS.get(booking.status)
        if timestamp_field:
            values[timestamp_field] = getattr(booking, timestamp_field)

        async with self._get_session() as session:
            result = await session.execute(
                update(BookingModel)
                .where(
                    BookingModel.id == to_db_uuid(booking.id),
                    BookingModel.status == expected_status.value,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise ConcurrentModification(
                    f'Booking {booking.id} is no longer {expected_status}, refresh and retry'
                )
            return booking

    @Logger.io
    async def update_details(self, *, booking: Booking) -> Booking:
        row_values = booking_to_row_values(booking)
        values = {column: row_values[column] for column in EDITABLE_COLUMNS}

        async with self._get_session() as session:
            try:
                result = await session.execute(
                    update(BookingModel)
                    .where(
                        BookingModel.id == to_db_uuid(booking.id),
                        BookingModel.status.in_(ACTIVE_STATUS_VALUES),
                    )
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
            except IntegrityError as e:
                raise SlotNoLongerAvailable(booking.booking_date, booking.time) from e

            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise ConcurrentModification(
                    f'Booking {booking.id} changed while being edited, refresh and retry'
                )
            return booking

    @Logger.io
    async def migrate_guest_bookings(self, *, user_id: str, phone: str) -> int:
        async with self._get_session() as session:
            result = await session.execute(
                update(BookingModel)
                .where(
                    BookingModel.customer_kind == CustomerKind.GUEST.value,
                    BookingModel.guest_phone == phone,
                )
                .values(
                    customer_kind=CustomerKind.CUSTOMER.value,
                    customer_id=user_id,
                    guest_phone=None,
                    guest_session_id=None,
                    updated_at=datetime.now(timezone.utc),
                    updated_by=user_id,
                )
                .execution_options(synchronize_session=False)
            )
            migrated = result.rowcount  # type: ignore[attr-defined]
            Logger.base.info(f'🔁 [GUEST] Migrated {migrated} guest bookings to user {user_id}')
            return migrated

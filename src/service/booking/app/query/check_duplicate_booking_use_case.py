from datetime import date
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import (
    BookingFilter,
    IBookingQueryRepo,
)
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_enums import CustomerKind
from src.service.booking.domain.value_object.actor_context import (
    ActorContext,
    CustomerActor,
    GuestActor,
    StaffActor,
)
from src.service.booking.domain.value_object.guest_session import normalize_uae_phone


class CheckDuplicateBookingUseCase:
    """Active bookings the same customer already holds on a date (advisory only)"""

    def __init__(self, *, booking_query_repo: IBookingQueryRepo) -> None:
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @Logger.io
    async def execute(
        self,
        *,
        booking_date: date,
        actor: ActorContext,
        customer_phone: Optional[str] = None,
    ) -> list[Booking]:
        match actor:
            case CustomerActor(user_id=user_id):
                booking_filter = BookingFilter(
                    customer_kind=CustomerKind.CUSTOMER,
                    customer_id=user_id,
                    booking_date=booking_date,
                    active_only=True,
                )
            case GuestActor(session_id=session_id):
                booking_filter = BookingFilter(
                    customer_kind=CustomerKind.GUEST,
                    guest_session_id=session_id,
                    booking_date=booking_date,
                    active_only=True,
                )
            case StaffActor():
                if not customer_phone:
                    return []
                booking_filter = BookingFilter(
                    customer_phone=normalize_uae_phone(customer_phone),
                    booking_date=booking_date,
                    active_only=True,
                )
            case _:
                raise ForbiddenError('Not allowed to check bookings')

        return await self.booking_query_repo.list_bookings(booking_filter=booking_filter)

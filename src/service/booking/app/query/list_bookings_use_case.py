from typing import Self

import attrs
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


class ListBookingsUseCase:
    """
    Customers and guests only ever see their own bookings; the owner part of
    the filter is replaced from the actor. Staff may filter freely.
    """

    def __init__(self, *, booking_query_repo: IBookingQueryRepo) -> None:
        self.booking_query_repo = booking_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo)

    @staticmethod
    def _scope(booking_filter: BookingFilter, actor: ActorContext) -> BookingFilter:
        match actor:
            case CustomerActor(user_id=user_id):
                return attrs.evolve(
                    booking_filter,
                    customer_kind=CustomerKind.CUSTOMER,
                    customer_id=user_id,
                    guest_session_id=None,
                    customer_phone=None,
                )
            case GuestActor(session_id=session_id):
                return attrs.evolve(
                    booking_filter,
                    customer_kind=CustomerKind.GUEST,
                    customer_id=None,
                    guest_session_id=session_id,
                    customer_phone=None,
                )
            case StaffActor():
                return booking_filter
            case _:
                raise ForbiddenError('Not allowed to list bookings')

    @Logger.io
    async def execute(self, *, booking_filter: BookingFilter, actor: ActorContext) -> list[Booking]:
        return await self.booking_query_repo.list_bookings(
            booking_filter=self._scope(booking_filter, actor)
        )

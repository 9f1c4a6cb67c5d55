from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends, Header
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import AuthenticationError, ForbiddenError
from src.service.booking.app.command.guest_session_use_case import GuestSessionUseCase
from src.service.booking.domain.enum.booking_enums import GuestSessionStatus
from src.service.booking.domain.value_object.actor_context import (
    ActorContext,
    CustomerActor,
    GuestActor,
    StaffActor,
)
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


GUEST_SESSION_HEADER = 'X-Guest-Session'


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, credentials = authorization.partition(' ')
    if scheme.lower() != 'bearer' or not credentials:
        raise AuthenticationError('Invalid authorization header')
    return credentials.strip()


@inject
async def get_optional_actor(
    authorization: Optional[str] = Header(None),
    access_token: Optional[str] = Cookie(None),
    guest_session: Optional[str] = Header(None, alias=GUEST_SESSION_HEADER),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    guest_session_use_case: GuestSessionUseCase = Depends(GuestSessionUseCase.depends),
) -> Optional[ActorContext]:
    """
    Resolve the caller: a JWT (bearer header first, then cookie) wins over a
    guest session header. Returns None for anonymous callers.
    """
    token = _bearer_token(authorization) or access_token
    if token:
        return jwt_auth.get_actor_from_jwt(token)

    validation = await guest_session_use_case.validate(token=guest_session)
    if validation.status == GuestSessionStatus.ABSENT:
        return None
    if validation.status == GuestSessionStatus.EXPIRED:
        raise AuthenticationError('Guest session expired')
    if not validation.is_valid or not validation.session_id or not validation.phone:
        raise AuthenticationError('Invalid guest session')
    return GuestActor(session_id=validation.session_id, phone=validation.phone)


async def get_current_actor(
    actor: Optional[ActorContext] = Depends(get_optional_actor),
) -> ActorContext:
    if actor is None:
        raise AuthenticationError('Not authenticated')
    return actor


async def require_customer(actor: ActorContext = Depends(get_current_actor)) -> CustomerActor:
    if not isinstance(actor, CustomerActor):
        raise ForbiddenError('Only signed-in customers can perform this action')
    return actor


async def require_staff(actor: ActorContext = Depends(get_current_actor)) -> StaffActor:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span('auth.require_staff', attributes={'actor.role': actor.role}):
        if not isinstance(actor, StaffActor):
            raise ForbiddenError('Only staff can perform this action')
        return actor


async def require_manager(actor: StaffActor = Depends(require_staff)) -> StaffActor:
    if not actor.is_manager:
        raise ForbiddenError('Only managers can perform this action')
    return actor

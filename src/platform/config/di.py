"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.booking.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.booking.driven_adapter.repo.closed_slot_repo_impl import ClosedSlotRepoImpl
from src.service.booking.driven_adapter.repo.pricing_config_repo_impl import (
    PricingConfigRepoImpl,
)
from src.service.booking.driven_adapter.repo.promo_code_repo_impl import PromoCodeRepoImpl
from src.service.booking.driven_adapter.repo.referral_credit_repo_impl import (
    ReferralCreditRepoImpl,
)
from src.service.booking.driven_adapter.repo.staff_shift_repo_impl import StaffShiftRepoImpl
from src.service.booking.driven_adapter.state.guest_session_signer_impl import (
    GuestSessionSignerImpl,
)
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager unless an engine is given)
    database = providers.Singleton(Database)

    # Unit of work (new instance per use case, one transaction per `async with`)
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.session
    )

    # Read-side repositories (stateless - use session_factory per call)
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, session_factory=database.provided.session
    )
    closed_slot_query_repo = providers.Singleton(
        ClosedSlotRepoImpl, session_factory=database.provided.session
    )
    pricing_config_query_repo = providers.Singleton(
        PricingConfigRepoImpl, session_factory=database.provided.session
    )
    promo_code_query_repo = providers.Singleton(
        PromoCodeRepoImpl, session_factory=database.provided.session
    )
    referral_credit_query_repo = providers.Singleton(
        ReferralCreditRepoImpl, session_factory=database.provided.session
    )
    staff_shift_query_repo = providers.Singleton(
        StaffShiftRepoImpl, session_factory=database.provided.session
    )

    # Auth
    jwt_auth = providers.Singleton(JwtAuth)
    guest_session_signer = providers.Singleton(GuestSessionSignerImpl)


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()

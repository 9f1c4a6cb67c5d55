from typing import Optional

from fastapi import APIRouter, Depends
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.update_add_on_config_use_case import (
    UpdateAddOnConfigUseCase,
)
from src.service.booking.app.query.compute_price_use_case import ComputePriceUseCase
from src.service.booking.app.query.get_pricing_config_use_case import GetPricingConfigUseCase
from src.service.booking.domain.value_object.actor_context import ActorContext, StaffActor
from src.service.booking.domain.value_object.pricing_catalog import AddOnConfig, AddOnPrice
from src.service.booking.driving_adapter.http_controller.auth.role_auth import (
    get_optional_actor,
    require_manager,
)
from src.service.booking.driving_adapter.http_controller.schema.pricing_schema import (
    AddOnConfigResponse,
    AddOnConfigUpdateRequest,
    AddOnEntrySchema,
    PackageCatalogResponse,
    PackageResponse,
    PriceBreakdownResponse,
    PriceQuoteResponse,
    ServiceSelectionRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _add_on_config_response(config: AddOnConfig) -> AddOnConfigResponse:
    return AddOnConfigResponse(
        version=config.version,
        entries={
            add_on_id: AddOnEntrySchema(
                price=entry.price, enabled=entry.enabled, has_custom_amount=entry.has_custom_amount
            )
            for add_on_id, entry in config.entries.items()
        },
        updated_at=config.updated_at,
        updated_by=config.updated_by,
    )


@router.post('/quote')
@Logger.io
async def quote_price(
    request: ServiceSelectionRequest,
    actor: Optional[ActorContext] = Depends(get_optional_actor),
    use_case: ComputePriceUseCase = Depends(ComputePriceUseCase.depends),
) -> PriceQuoteResponse:
    with tracer.start_as_current_span('controller.quote_price') as span:
        span.set_attribute('package_id', request.package_id)
        span.set_attribute('vehicle_type', request.vehicle_type)

        quote = await use_case.execute(selection=request.to_selection(), actor=actor)
        return PriceQuoteResponse(
            breakdown=PriceBreakdownResponse(**quote.breakdown.to_dict()),
            monthly_total=quote.monthly_total,
            promo_code=quote.promo_code,
        )


@router.get('/packages')
@Logger.io
async def get_package_catalog(
    use_case: GetPricingConfigUseCase = Depends(GetPricingConfigUseCase.depends),
) -> PackageCatalogResponse:
    config = await use_case.execute()
    return PackageCatalogResponse(
        version=config.catalog.version,
        packages=[
            PackageResponse(
                package_id=package.package_id,
                name=package.name,
                available=package.available,
                prices=dict(package.prices),
            )
            for package in config.catalog.packages.values()
        ],
    )


@router.get('/add_ons')
@Logger.io
async def get_add_on_config(
    use_case: GetPricingConfigUseCase = Depends(GetPricingConfigUseCase.depends),
) -> AddOnConfigResponse:
    config = await use_case.execute()
    return _add_on_config_response(config.add_ons)


@router.put('/add_ons')
@Logger.io
async def update_add_on_config(
    request: AddOnConfigUpdateRequest,
    current_user: StaffActor = Depends(require_manager),
    use_case: UpdateAddOnConfigUseCase = Depends(UpdateAddOnConfigUseCase.depends),
) -> AddOnConfigResponse:
    config = await use_case.execute(
        entries={
            add_on_id: AddOnPrice(
                price=entry.price, enabled=entry.enabled, has_custom_amount=entry.has_custom_amount
            )
            for add_on_id, entry in request.entries.items()
        },
        expected_version=request.expected_version,
        actor=current_user,
    )
    return _add_on_config_response(config)

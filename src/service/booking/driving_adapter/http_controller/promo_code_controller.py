from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.booking.app.command.manage_promo_code_use_case import ManagePromoCodeUseCase
from src.service.booking.app.command.redeem_promo_code_use_case import RedeemPromoCodeUseCase
from src.service.booking.app.query.validate_promo_code_use_case import ValidatePromoCodeUseCase
from src.service.booking.domain.entity.promo_code_entity import PromoCode
from src.service.booking.domain.value_object.actor_context import StaffActor
from src.service.booking.driving_adapter.http_controller.auth.role_auth import (
    require_manager,
    require_staff,
)
from src.service.booking.driving_adapter.http_controller.schema.promo_code_schema import (
    PromoCodeCreateRequest,
    PromoCodeResponse,
    PromoCodeUpdateRequest,
    PromoCodeValidateRequest,
    PromoCodeValidateResponse,
    RedeemPromoCodeRequest,
    RedeemPromoCodeResponse,
)


router = APIRouter()


def _to_response(promo_code: PromoCode) -> PromoCodeResponse:
    return PromoCodeResponse(
        id=promo_code.id,
        code=promo_code.code,
        discount_type=promo_code.discount_type,
        discount_value=promo_code.discount_value,
        max_uses=promo_code.max_uses,
        current_uses=promo_code.current_uses,
        expires_at=promo_code.expires_at,
        applicable_packages=promo_code.applicable_packages,
        is_active=promo_code.is_active,
        description=promo_code.description,
        created_at=promo_code.created_at,
        updated_at=promo_code.updated_at,
    )


@router.post('/validate')
@Logger.io
async def validate_promo_code(
    request: PromoCodeValidateRequest,
    use_case: ValidatePromoCodeUseCase = Depends(ValidatePromoCodeUseCase.depends),
) -> PromoCodeValidateResponse:
    # Invalid codes surface as 4xx errors from the use case
    promo_code = await use_case.execute(code=request.code, package_id=request.package_id)
    return PromoCodeValidateResponse(
        code=promo_code.code,
        discount_type=promo_code.discount_type,
        discount_value=promo_code.discount_value,
        description=promo_code.description,
    )


@router.post('/{promo_code_id}/redeem')
@Logger.io
async def redeem_promo_code(
    promo_code_id: UtilsUUID7,
    request: RedeemPromoCodeRequest,
    current_user: StaffActor = Depends(require_staff),
    use_case: RedeemPromoCodeUseCase = Depends(RedeemPromoCodeUseCase.depends),
) -> RedeemPromoCodeResponse:
    redeemed = await use_case.execute(
        promo_code_id=promo_code_id, booking_id=request.booking_id, actor=current_user
    )
    return RedeemPromoCodeResponse(redeemed=redeemed)


@router.get('')
@Logger.io
async def list_promo_codes(
    current_user: StaffActor = Depends(require_manager),
    use_case: ManagePromoCodeUseCase = Depends(ManagePromoCodeUseCase.depends),
) -> List[PromoCodeResponse]:
    return [_to_response(promo_code) for promo_code in await use_case.list_all(actor=current_user)]


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_promo_code(
    request: PromoCodeCreateRequest,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManagePromoCodeUseCase = Depends(ManagePromoCodeUseCase.depends),
) -> PromoCodeResponse:
    promo_code = await use_case.create(
        code=request.code,
        discount_type=request.discount_type,
        discount_value=request.discount_value,
        max_uses=request.max_uses,
        expires_at=request.expires_at,
        applicable_packages=request.applicable_packages,
        description=request.description,
        actor=current_user,
    )
    return _to_response(promo_code)


@router.patch('/{promo_code_id}')
@Logger.io
async def update_promo_code(
    promo_code_id: UtilsUUID7,
    request: PromoCodeUpdateRequest,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManagePromoCodeUseCase = Depends(ManagePromoCodeUseCase.depends),
) -> PromoCodeResponse:
    promo_code = await use_case.update(
        promo_code_id=promo_code_id,
        actor=current_user,
        **request.model_dump(exclude_unset=True),
    )
    return _to_response(promo_code)


@router.post('/{promo_code_id}/toggle')
@Logger.io
async def toggle_promo_code(
    promo_code_id: UtilsUUID7,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManagePromoCodeUseCase = Depends(ManagePromoCodeUseCase.depends),
) -> PromoCodeResponse:
    return _to_response(await use_case.toggle(promo_code_id=promo_code_id, actor=current_user))


@router.delete('/{promo_code_id}', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def delete_promo_code(
    promo_code_id: UtilsUUID7,
    current_user: StaffActor = Depends(require_manager),
    use_case: ManagePromoCodeUseCase = Depends(ManagePromoCodeUseCase.depends),
) -> None:
    await use_case.delete(promo_code_id=promo_code_id, actor=current_user)

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.booking.domain.enum.booking_enums import DiscountType


class PromoCodeValidateRequest(BaseModel):
    model_config = {'json_schema_extra': {'example': {'code': 'save10', 'package_id': 'platinum'}}}

    code: str
    package_id: str


class PromoCodeValidateResponse(BaseModel):
    valid: bool = True
    code: str
    discount_type: DiscountType
    discount_value: int
    description: Optional[str] = None


class PromoCodeCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'code': 'SAVE10',
                'discount_type': 'percentage',
                'discount_value': 10,
                'max_uses': 100,
                'expires_at': '2026-12-31T23:59:59+04:00',
                'applicable_packages': ['platinum', 'titanium'],
            }
        }
    }

    code: str
    discount_type: DiscountType
    discount_value: int = Field(gt=0)
    max_uses: int = Field(default=0, ge=0)  # 0 means unlimited
    expires_at: Optional[datetime] = None
    applicable_packages: Optional[List[str]] = None
    description: Optional[str] = None


class PromoCodeUpdateRequest(BaseModel):
    code: Optional[str] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[int] = Field(default=None, gt=0)
    max_uses: Optional[int] = Field(default=None, ge=0)
    expires_at: Optional[datetime] = None
    applicable_packages: Optional[List[str]] = None
    description: Optional[str] = None


class PromoCodeResponse(BaseModel):
    id: UtilsUUID7
    code: str
    discount_type: DiscountType
    discount_value: int
    max_uses: int
    current_uses: int
    expires_at: Optional[datetime] = None
    applicable_packages: Optional[List[str]] = None
    is_active: bool
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RedeemPromoCodeRequest(BaseModel):
    booking_id: UtilsUUID7


class RedeemPromoCodeResponse(BaseModel):
    model_config = {'json_schema_extra': {'example': {'redeemed': True}}}

    redeemed: bool

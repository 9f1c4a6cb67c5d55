from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from src.service.booking.domain.value_object.service_selection import (
    AddOnSelection,
    ServiceSelection,
)


class AddOnSelectionSchema(BaseModel):
    add_on_id: str
    custom_amount: Optional[int] = Field(default=None, ge=0)  # tip only


class ServiceSelectionRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'examples': [
                {
                    'package_id': 'platinum',
                    'vehicle_type': 'suv',
                    'add_ons': [{'add_on_id': 'exterior_wax'}, {'add_on_id': 'tip', 'custom_amount': 20}],
                    'is_subscription': False,
                    'promo_code': 'SAVE10',
                },
                {
                    'package_id': 'titanium',
                    'vehicle_type': 'caravan',
                    'vehicle_size': 'large',
                    'is_subscription': True,
                },
            ]
        }
    }

    package_id: str
    vehicle_type: str
    vehicle_size: Optional[str] = None
    add_ons: List[AddOnSelectionSchema] = []
    is_subscription: bool = False
    promo_code: Optional[str] = None

    def to_selection(self) -> ServiceSelection:
        return ServiceSelection.create(
            package_id=self.package_id,
            vehicle_type=self.vehicle_type,
            vehicle_size=self.vehicle_size,
            add_ons=[
                AddOnSelection(add_on_id=add_on.add_on_id, custom_amount=add_on.custom_amount)
                for add_on in self.add_ons
            ],
            is_subscription=self.is_subscription,
            promo_code=self.promo_code,
        )


class PriceBreakdownResponse(BaseModel):
    base_price: int
    subscription_discount: int
    base: int
    add_ons_total: int
    promo_discount: int
    referral_discount: int
    discount_amount: int
    total: int
    manual_adjustment: int = 0


class PriceQuoteResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'breakdown': {
                    'base_price': 50,
                    'subscription_discount': 0,
                    'base': 50,
                    'add_ons_total': 45,
                    'promo_discount': 0,
                    'referral_discount': 0,
                    'discount_amount': 0,
                    'total': 95,
                },
                'monthly_total': None,
                'promo_code': None,
            }
        }
    }

    breakdown: PriceBreakdownResponse
    monthly_total: Optional[int] = None
    promo_code: Optional[str] = None


class PackageResponse(BaseModel):
    package_id: str
    name: str
    available: bool
    prices: Dict[str, Optional[int]]


class PackageCatalogResponse(BaseModel):
    version: int
    packages: List[PackageResponse]


class AddOnEntrySchema(BaseModel):
    price: int
    enabled: bool = True
    has_custom_amount: bool = False


class AddOnConfigResponse(BaseModel):
    version: int
    entries: Dict[str, AddOnEntrySchema]
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None


class AddOnConfigUpdateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'expected_version': 1,
                'entries': {
                    'tip': {'price': 10, 'enabled': True, 'has_custom_amount': True},
                    'exterior_wax': {'price': 30, 'enabled': True},
                },
            }
        }
    }

    entries: Dict[str, AddOnEntrySchema]
    expected_version: int

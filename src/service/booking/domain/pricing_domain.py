"""
Pricing Domain
Pure price computation. Catalog, add-on config and already-validated
discounts are parameters, so identical inputs always give identical output.

Order:
1. base price from the package catalog
2. add-ons total
3. subscription discount on the base only (round half up)
4. promo discount on base + add-ons
5. referral discount on the price left after the promo
6. total, floored at 0
"""

from decimal import Decimal
from typing import Optional

from src.service.booking.domain.booking_errors import InvalidAddOn, NoPriceForSelection
from src.service.booking.domain.value_object.discount import Discount, round_half_up
from src.service.booking.domain.value_object.price_breakdown import PriceBreakdown
from src.service.booking.domain.value_object.pricing_catalog import AddOnConfig, PackageCatalog
from src.service.booking.domain.value_object.service_selection import (
    AddOnSelection,
    ServiceSelection,
)


DEFAULT_SUBSCRIPTION_DISCOUNT_RATE = Decimal('0.075')


def base_price_for(selection: ServiceSelection, catalog: PackageCatalog) -> int:
    package = catalog.get(selection.package_id)
    if package is None or not package.available:
        raise NoPriceForSelection(f'Package {selection.package_id} is not available')

    price = package.price_for(selection.vehicle.price_key)
    if price is None:
        raise NoPriceForSelection(
            f'Package {selection.package_id} has no price for {selection.vehicle.price_key}'
        )
    return price


def add_on_price(add_on: AddOnSelection, add_on_config: AddOnConfig) -> int:
    entry = add_on_config.get(add_on.add_on_id)
    if entry is None or not entry.enabled:
        raise InvalidAddOn(f'Add-on {add_on.add_on_id} is not available')

    if add_on.custom_amount is None:
        return entry.price
    if not entry.has_custom_amount:
        raise InvalidAddOn(f'Add-on {add_on.add_on_id} does not accept a custom amount')
    if add_on.custom_amount <= 0:
        raise InvalidAddOn(f'Custom amount for {add_on.add_on_id} must be positive')
    return add_on.custom_amount


def apply_subscription_discount(base_price: int, rate: Decimal) -> int:
    return round_half_up(Decimal(base_price) * (Decimal(1) - rate))


def compute_price(
    *,
    selection: ServiceSelection,
    catalog: PackageCatalog,
    add_on_config: AddOnConfig,
    promo_discount: Optional[Discount] = None,
    referral_discount: Optional[Discount] = None,
    subscription_discount_rate: Decimal = DEFAULT_SUBSCRIPTION_DISCOUNT_RATE,
) -> PriceBreakdown:
    base_price = base_price_for(selection, catalog)
    add_ons_total = sum(add_on_price(add_on, add_on_config) for add_on in selection.add_ons)

    base = (
        apply_subscription_discount(base_price, subscription_discount_rate)
        if selection.is_subscription
        else base_price
    )

    price_so_far = base + add_ons_total
    promo_amount = promo_discount.amount_for(price_so_far) if promo_discount else 0
    price_so_far -= promo_amount

    referral_amount = referral_discount.amount_for(price_so_far) if referral_discount else 0
    price_so_far -= referral_amount

    return PriceBreakdown(
        base_price=base_price,
        subscription_discount=base_price - base,
        base=base,
        add_ons_total=add_ons_total,
        promo_discount=promo_amount,
        referral_discount=referral_amount,
        total=max(0, price_so_far),
    )

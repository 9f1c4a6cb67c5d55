from typing import Any

import attrs


DEFAULT_WASHES_PER_MONTH = 4


@attrs.frozen
class PriceBreakdown:
    """
    Result of the pricing engine, all amounts in integer currency units.

    base is the package price after the subscription discount;
    discount_amount = promo_discount + referral_discount.
    manual_adjustment is set only by a manager price override, so that
    total always equals the booking price.
    """

    base_price: int
    subscription_discount: int
    base: int
    add_ons_total: int
    promo_discount: int
    referral_discount: int
    total: int
    manual_adjustment: int = 0

    @property
    def discount_amount(self) -> int:
        return self.promo_discount + self.referral_discount

    @property
    def computed_total(self) -> int:
        """Total before any manual adjustment"""
        return self.total - self.manual_adjustment

    def with_override(self, price: int) -> 'PriceBreakdown':
        return attrs.evolve(
            self, total=price, manual_adjustment=price - self.computed_total
        )

    def monthly_total(self, washes_per_month: int = DEFAULT_WASHES_PER_MONTH) -> int:
        return self.total * washes_per_month

    def to_dict(self) -> dict[str, Any]:
        return attrs.asdict(self) | {'discount_amount': self.discount_amount}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'PriceBreakdown':
        # Rows written before overrides were tracked carry no adjustment
        return cls(
            **{
                field.name: int(data.get(field.name, field.default))
                for field in attrs.fields(cls)
                if field.name in data or field.default is not attrs.NOTHING
            }
        )

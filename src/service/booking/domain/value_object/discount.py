from decimal import ROUND_HALF_UP, Decimal

import attrs

from src.service.booking.domain.enum.booking_enums import DiscountType


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


@attrs.frozen
class Discount:
    """A percentage or fixed amount taken off the running price"""

    discount_type: DiscountType = attrs.field(converter=DiscountType)
    value: int = attrs.field()

    @value.validator
    def _check_value(self, attribute: attrs.Attribute, value: int) -> None:
        if value < 0:
            raise ValueError('discount value must not be negative')
        if self.discount_type == DiscountType.PERCENTAGE and value > 100:
            raise ValueError('percentage discount must not exceed 100')

    def amount_for(self, price: int) -> int:
        if price <= 0:
            return 0
        if self.discount_type == DiscountType.PERCENTAGE:
            amount = round_half_up(Decimal(price) * Decimal(self.value) / Decimal(100))
        else:
            amount = self.value
        return min(amount, price)

    def to_dict(self) -> dict[str, object]:
        return {'discount_type': self.discount_type.value, 'value': self.value}

    @classmethod
    def from_dict(cls, data: dict | None) -> 'Discount | None':
        if not data:
            return None
        return cls(discount_type=data['discount_type'], value=int(data['value']))

from datetime import datetime, timezone
from typing import Optional

import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.booking_errors import (
    PromoExhausted,
    PromoExpired,
    PromoInactive,
    PromoNotApplicable,
)
from src.service.booking.domain.enum.booking_enums import DiscountType
from src.service.booking.domain.value_object.discount import Discount
from src.service.booking.domain.value_object.service_selection import normalize_promo_code


@attrs.define
class PromoCode:
    id: UUID
    code: str
    discount_type: DiscountType
    discount_value: int
    max_uses: int = 0  # 0 means unlimited
    current_uses: int = 0
    expires_at: Optional[datetime] = None
    applicable_packages: Optional[list[str]] = None
    is_active: bool = True
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        code: str,
        discount_type: DiscountType,
        discount_value: int,
        max_uses: int = 0,
        expires_at: Optional[datetime] = None,
        applicable_packages: Optional[list[str]] = None,
        description: Optional[str] = None,
        created_by: str,
    ) -> 'PromoCode':
        normalized = normalize_promo_code(code)
        if not normalized:
            raise DomainError('Promo code is required')
        if max_uses < 0:
            raise DomainError('max_uses must not be negative')
        cls._validate_discount(discount_type, discount_value)

        now = datetime.now(timezone.utc)
        return cls(
            id=id,
            code=normalized,
            discount_type=discount_type,
            discount_value=discount_value,
            max_uses=max_uses,
            expires_at=expires_at,
            applicable_packages=applicable_packages or None,
            description=description,
            created_at=now,
            created_by=created_by,
            updated_at=now,
            updated_by=created_by,
        )

    @staticmethod
    def _validate_discount(discount_type: DiscountType, discount_value: int) -> None:
        if discount_value <= 0:
            raise DomainError('Discount value must be positive')
        if discount_type == DiscountType.PERCENTAGE and discount_value > 100:
            raise DomainError('Percentage discount must not exceed 100')

    @property
    def discount(self) -> Discount:
        return Discount(discount_type=self.discount_type, value=self.discount_value)

    @property
    def is_exhausted(self) -> bool:
        return self.max_uses > 0 and self.current_uses >= self.max_uses

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now > self.expires_at

    @Logger.io
    def validate(self, *, package_id: str, now: datetime) -> Discount:
        """
        Read-only validation against a package at `now`.

        Raises:
            PromoInactive, PromoExpired, PromoExhausted, PromoNotApplicable
        """
        if not self.is_active:
            raise PromoInactive(f'Promo code {self.code} is not active')
        if self.is_expired(now):
            raise PromoExpired(f'Promo code {self.code} has expired')
        if self.is_exhausted:
            raise PromoExhausted(f'Promo code {self.code} has reached its usage limit')
        if self.applicable_packages and package_id not in self.applicable_packages:
            raise PromoNotApplicable(f'Promo code {self.code} does not apply to {package_id}')
        return self.discount

    @Logger.io
    def update(self, *, updated_by: str, **changes: object) -> 'PromoCode':
        changes = {k: v for k, v in changes.items() if v is not None}
        discount_type = changes.get('discount_type', self.discount_type)
        discount_value = changes.get('discount_value', self.discount_value)
        self._validate_discount(discount_type, discount_value)  # type: ignore[arg-type]
        if 'code' in changes:
            changes['code'] = normalize_promo_code(str(changes['code']))
        return attrs.evolve(
            self,
            updated_at=datetime.now(timezone.utc),
            updated_by=updated_by,
            **changes,  # type: ignore[arg-type]
        )

    @Logger.io
    def toggle(self, *, updated_by: str) -> 'PromoCode':
        return attrs.evolve(
            self,
            is_active=not self.is_active,
            updated_at=datetime.now(timezone.utc),
            updated_by=updated_by,
        )

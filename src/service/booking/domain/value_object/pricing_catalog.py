"""
Pricing configuration passed into the pricing engine.

Both aggregates carry a version so a manager update can be applied as an
optimistic compare-and-set against the stored copy.
"""

from datetime import datetime
from typing import Any, Optional

import attrs


@attrs.frozen
class PackagePricing:
    package_id: str
    name: str
    available: bool
    prices: dict[str, Optional[int]]  # price key ('sedan', 'boat_large') -> price

    def price_for(self, price_key: str) -> Optional[int]:
        return self.prices.get(price_key)


@attrs.frozen
class PackageCatalog:
    packages: dict[str, PackagePricing]
    version: int = 1

    def get(self, package_id: str) -> Optional[PackagePricing]:
        return self.packages.get(package_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            package_id: {
                'name': package.name,
                'available': package.available,
                'prices': dict(package.prices),
            }
            for package_id, package in self.packages.items()
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, version: int = 1) -> 'PackageCatalog':
        return cls(
            packages={
                package_id: PackagePricing(
                    package_id=package_id,
                    name=entry.get('name', package_id.title()),
                    available=bool(entry.get('available', True)),
                    prices=dict(entry['prices']),
                )
                for package_id, entry in data.items()
            },
            version=version,
        )


@attrs.frozen
class AddOnPrice:
    price: int
    enabled: bool = True
    has_custom_amount: bool = False


@attrs.frozen
class AddOnConfig:
    entries: dict[str, AddOnPrice]
    version: int = 1
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None

    def get(self, add_on_id: str) -> Optional[AddOnPrice]:
        return self.entries.get(add_on_id)

    def to_dict(self) -> dict[str, Any]:
        return {add_on_id: attrs.asdict(entry) for add_on_id, entry in self.entries.items()}

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        version: int = 1,
        updated_at: Optional[datetime] = None,
        updated_by: Optional[str] = None,
    ) -> 'AddOnConfig':
        return cls(
            entries={add_on_id: AddOnPrice(**entry) for add_on_id, entry in data.items()},
            version=version,
            updated_at=updated_at,
            updated_by=updated_by,
        )


def _sized(small: Optional[int], medium: Optional[int], large: Optional[int]) -> dict:
    return {'small': small, 'medium': medium, 'large': large}


def _package_prices(
    *,
    sedan: Optional[int],
    suv: Optional[int],
    motorcycle: Optional[int],
    caravan: dict[str, Optional[int]],
    boat: dict[str, Optional[int]],
) -> dict[str, Optional[int]]:
    prices: dict[str, Optional[int]] = {'sedan': sedan, 'suv': suv, 'motorcycle': motorcycle}
    prices |= {f'caravan_{size}': price for size, price in caravan.items()}
    prices |= {f'boat_{size}': price for size, price in boat.items()}
    return prices


DEFAULT_PACKAGE_CATALOG = PackageCatalog(
    packages={
        'platinum': PackagePricing(
            package_id='platinum',
            name='Platinum',
            available=True,
            prices=_package_prices(
                sedan=45,
                suv=50,
                motorcycle=30,
                caravan=_sized(60, 80, 120),
                boat=_sized(80, 120, 180),
            ),
        ),
        'titanium': PackagePricing(
            package_id='titanium',
            name='Titanium',
            available=True,
            prices=_package_prices(
                sedan=75,
                suv=80,
                motorcycle=50,
                caravan=_sized(100, 130, 180),
                boat=_sized(120, 180, 280),
            ),
        ),
        'diamond': PackagePricing(
            package_id='diamond',
            name='Diamond',
            available=True,
            prices=_package_prices(
                sedan=110,
                suv=120,
                motorcycle=None,
                caravan=_sized(None, None, None),
                boat=_sized(None, None, None),
            ),
        ),
    }
)

DEFAULT_ADD_ON_CONFIG = AddOnConfig(
    entries={
        'tip': AddOnPrice(price=10, has_custom_amount=True),
        'exterior_wax': AddOnPrice(price=25),
        'plastic_seats': AddOnPrice(price=15),
        'tissue_box': AddOnPrice(price=10),
    }
)

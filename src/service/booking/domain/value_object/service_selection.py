"""
Service selection, validated once at the boundary.

Vehicle size is required for vehicle types that come in sizes (caravan, boat)
and rejected for every other type, so the price key is always well formed.
"""

from typing import Any, Iterable, Optional

import attrs

from src.service.booking.domain.booking_errors import InvalidSelection
from src.service.booking.domain.enum.vehicle_type import VehicleSize, VehicleType


def normalize_promo_code(code: str) -> str:
    return code.strip().upper()


@attrs.frozen
class Vehicle:
    vehicle_type: VehicleType
    vehicle_size: Optional[VehicleSize] = None

    @classmethod
    def create(cls, *, vehicle_type: str, vehicle_size: Optional[str] = None) -> 'Vehicle':
        try:
            parsed_type = VehicleType(vehicle_type)
        except ValueError:
            raise InvalidSelection(f'Unknown vehicle type: {vehicle_type}')

        if not parsed_type.has_size:
            if vehicle_size:
                raise InvalidSelection(f'Vehicle type {parsed_type} does not take a size')
            return cls(vehicle_type=parsed_type)

        if not vehicle_size:
            raise InvalidSelection(f'Vehicle size is required for {parsed_type}')
        try:
            parsed_size = VehicleSize(vehicle_size)
        except ValueError:
            raise InvalidSelection(f'Unknown vehicle size: {vehicle_size}')
        return cls(vehicle_type=parsed_type, vehicle_size=parsed_size)

    @property
    def price_key(self) -> str:
        if self.vehicle_size is None:
            return self.vehicle_type.value
        return f'{self.vehicle_type.value}_{self.vehicle_size.value}'


@attrs.frozen
class AddOnSelection:
    add_on_id: str
    custom_amount: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {'add_on_id': self.add_on_id, 'custom_amount': self.custom_amount}


@attrs.frozen
class ServiceSelection:
    package_id: str
    vehicle: Vehicle
    add_ons: tuple[AddOnSelection, ...] = ()
    is_subscription: bool = False
    promo_code: Optional[str] = None

    @classmethod
    def create(
        cls,
        *,
        package_id: str,
        vehicle_type: str,
        vehicle_size: Optional[str] = None,
        add_ons: Iterable[AddOnSelection] = (),
        is_subscription: bool = False,
        promo_code: Optional[str] = None,
    ) -> 'ServiceSelection':
        package_id = package_id.strip().lower()
        if not package_id:
            raise InvalidSelection('Package is required')

        add_on_list = tuple(add_ons)
        seen: set[str] = set()
        for add_on in add_on_list:
            if add_on.add_on_id in seen:
                raise InvalidSelection(f'Add-on selected twice: {add_on.add_on_id}')
            seen.add(add_on.add_on_id)

        normalized_promo = normalize_promo_code(promo_code) if promo_code else None
        return cls(
            package_id=package_id,
            vehicle=Vehicle.create(vehicle_type=vehicle_type, vehicle_size=vehicle_size),
            add_ons=add_on_list,
            is_subscription=is_subscription,
            promo_code=normalized_promo or None,
        )

    def with_package(self, package_id: str) -> 'ServiceSelection':
        return attrs.evolve(self, package_id=package_id.strip().lower())

from enum import StrEnum


class VehicleType(StrEnum):
    SEDAN = 'sedan'
    SUV = 'suv'
    MOTORCYCLE = 'motorcycle'
    CARAVAN = 'caravan'
    BOAT = 'boat'

    @property
    def has_size(self) -> bool:
        return self in SIZED_VEHICLE_TYPES


class VehicleSize(StrEnum):
    SMALL = 'small'
    MEDIUM = 'medium'
    LARGE = 'large'


SIZED_VEHICLE_TYPES: frozenset[VehicleType] = frozenset({VehicleType.CARAVAN, VehicleType.BOAT})

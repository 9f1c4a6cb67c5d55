from typing import Any, Optional

import attrs

from src.service.booking.domain.booking_errors import InvalidSelection


@attrs.frozen
class Location:
    area: str
    villa: Optional[str] = None
    street: Optional[str] = None
    emirate: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    instructions: Optional[str] = None

    @classmethod
    def create(cls, **fields: Any) -> 'Location':
        area = (fields.get('area') or '').strip()
        if not area:
            raise InvalidSelection('Location area is required')
        latitude, longitude = fields.get('latitude'), fields.get('longitude')
        if (latitude is None) != (longitude is None):
            raise InvalidSelection('Latitude and longitude must be given together')
        if latitude is not None and not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise InvalidSelection('Coordinates are out of range')
        return cls(**(fields | {'area': area}))

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in attrs.asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Location':
        return cls(**{field.name: data.get(field.name) for field in attrs.fields(cls)})

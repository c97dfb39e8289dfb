"""Records stored by the booking service and their JSON shapes."""

from dataclasses import dataclass, field, fields
from typing import Any, Mapping


def _json_key(f) -> str:
    return f.metadata.get("json", f.name)


def _check_value(record: str, key: str, expected: type, value: Any) -> Any:
    if expected is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise ValueError(
            f"cannot decode {type(value).__name__} into field {record}.{key} "
            f"of type {expected.__name__}"
        )
    return value


def _encode(record: Any) -> dict:
    return {_json_key(f): getattr(record, f.name) for f in fields(record)}


def _decode(cls: type, data: Mapping[str, Any]) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"cannot decode {type(data).__name__} into {cls.__name__}")
    values = {}
    for f in fields(cls):
        key = _json_key(f)
        value = data.get(key)
        if value is None:
            continue
        values[f.name] = _check_value(cls.__name__, key, f.type, value)
    return cls(**values)


@dataclass
class Hotel:
    """A hotel."""

    id: int = 0
    country: str = ""
    city: str = ""
    hotel_name: str = ""
    stars: int = 0

    def to_dict(self) -> dict:
        """Return the hotel as a dict keyed by its JSON field names."""
        return _encode(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Hotel":
        """Build a hotel from decoded JSON; wrong value types raise ValueError."""
        return _decode(cls, data)


@dataclass
class HotelRoom:
    """A room belonging to a hotel."""

    id: int = 0
    hotel_id: int = field(default=0, metadata={"json": "hotels_id"})
    rooms: int = 0
    meals: bool = False
    bar: bool = False
    services: bool = False
    busy: bool = False

    def to_dict(self) -> dict:
        """Return the room as a dict keyed by its JSON field names."""
        return _encode(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HotelRoom":
        """Build a room from decoded JSON; wrong value types raise ValueError."""
        return _decode(cls, data)


@dataclass
class Visitor:
    """A guest staying in a hotel room."""

    id: int = field(default=0, metadata={"json": "visitor_id"})
    hotel_id: int = 0
    hotel_room: int = field(default=0, metadata={"json": "hotel_room_id"})
    first_name: str = ""
    last_name: str = ""
    age: int = 0

    def to_dict(self) -> dict:
        """Return the visitor as a dict keyed by its JSON field names."""
        return _encode(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Visitor":
        """Build a visitor from decoded JSON; wrong value types raise ValueError."""
        return _decode(cls, data)
"""Domain model types for reported items.

These dataclasses describe the lost and found items the engine compares. They
carry no persistence logic; stores hand already-fetched items to the engine.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any, FrozenSet, Iterable


class ItemType(str, Enum):
    LOST = "LOST"
    FOUND = "FOUND"


class ItemStatus(str, Enum):
    OPEN = "OPEN"
    PENDING_CLAIM = "PENDING_CLAIM"
    VERIFIED = "VERIFIED"
    CLAIMED = "CLAIMED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"

    @property
    def is_open(self) -> bool:
        """Open for matching in batch reports (OPEN or PENDING_CLAIM)."""
        return self in (ItemStatus.OPEN, ItemStatus.PENDING_CLAIM)


class ItemCategory(str, Enum):
    """Well-known categories. Items may also carry free-form category strings."""
    ELECTRONICS = "ELECTRONICS"
    BOOKS = "BOOKS"
    CLOTHING = "CLOTHING"
    IDS_CARDS = "IDS_CARDS"
    KEYS = "KEYS"
    BAGS = "BAGS"
    JEWELRY = "JEWELRY"
    SPORTS = "SPORTS"
    UMBRELLAS = "UMBRELLAS"
    BOTTLES = "BOTTLES"
    OTHER = "OTHER"


@dataclass(frozen=True)
class Location:
    """Where an item was lost or found."""
    building: Optional[str] = None
    room: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def distance_km(self, other: Location) -> Optional[float]:
        """Approximate planar distance in km (degrees scaled by 111 km).

        Returns 0.0 for the same building and None when either side lacks
        coordinates.
        """
        if self.building and self.building == other.building:
            return 0.0
        if not (self.has_coordinates and other.has_coordinates):
            return None
        lat_diff = abs(self.latitude - other.latitude)  # type: ignore[operator]
        lon_diff = abs(self.longitude - other.longitude)  # type: ignore[operator]
        return (lat_diff ** 2 + lon_diff ** 2) ** 0.5 * 111.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> Optional[Location]:
        if not data:
            return None
        return cls(
            building=data.get("building"),
            room=data.get("room") or data.get("room_number") or data.get("roomNumber"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )


@dataclass
class Item:
    """A reported lost or found object.

    Only ``item_id`` and ``item_type`` are mandatory for a source item; every
    other attribute may be missing and simply contributes nothing to scoring.
    """
    item_id: Optional[str]
    item_type: Optional[ItemType]
    status: ItemStatus = ItemStatus.OPEN
    category: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: FrozenSet[str] = field(default_factory=frozenset)
    location: Optional[Location] = None
    reported_date: Optional[datetime] = None
    brand: Optional[str] = None
    primary_color: Optional[str] = None
    estimated_value: float = 0.0
    organization_id: Optional[str] = None
    enterprise_id: Optional[str] = None
    reporter_id: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.item_type, str) and not isinstance(self.item_type, ItemType):
            self.item_type = ItemType(self.item_type.upper())
        if isinstance(self.status, str) and not isinstance(self.status, ItemStatus):
            self.status = ItemStatus(self.status.upper())
        if isinstance(self.category, ItemCategory):
            self.category = self.category.value
        if not isinstance(self.keywords, frozenset):
            self.keywords = frozenset(self.keywords or ())

    @property
    def is_open(self) -> bool:
        return self.status is not None and self.status.is_open

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (JSON friendly)."""
        data = asdict(self)
        data["item_type"] = self.item_type.value if self.item_type else None
        data["status"] = self.status.value if self.status else None
        data["keywords"] = sorted(self.keywords)
        data["reported_date"] = self.reported_date.isoformat() if self.reported_date else None
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Item:
        """Build an Item from a plain mapping.

        Accepts snake_case keys and the camelCase names used by the service
        layer (``itemId``, ``type``, ``reportedDate``...).
        """
        def pick(*keys: str) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return None

        reported = pick("reported_date", "reportedDate")
        if isinstance(reported, str):
            reported = datetime.fromisoformat(reported)

        location = pick("location")
        if isinstance(location, dict):
            location = Location.from_dict(location)

        raw_type = pick("item_type", "itemType", "type")
        raw_status = pick("status")
        value = pick("estimated_value", "estimatedValue")

        return cls(
            item_id=_as_optional_str(pick("item_id", "itemId", "id")),
            item_type=ItemType(str(raw_type).upper()) if raw_type else None,
            status=ItemStatus(str(raw_status).upper()) if raw_status else ItemStatus.OPEN,
            category=pick("category"),
            title=pick("title"),
            description=pick("description"),
            keywords=frozenset(_iter_strings(pick("keywords"))),
            location=location,
            reported_date=reported,
            brand=pick("brand"),
            primary_color=pick("primary_color", "primaryColor"),
            estimated_value=float(value) if value is not None else 0.0,
            organization_id=_as_optional_str(pick("organization_id", "organizationId")),
            enterprise_id=_as_optional_str(pick("enterprise_id", "enterpriseId")),
            reporter_id=_as_optional_str(pick("reporter_id", "reporterId")),
        )


def _as_optional_str(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


def _iter_strings(values: Iterable[Any] | None) -> Iterable[str]:
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return (str(v) for v in values if v is not None)


__all__ = ["Item", "ItemType", "ItemStatus", "ItemCategory", "Location"]

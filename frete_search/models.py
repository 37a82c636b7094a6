"""
Data models for the freight listing search engine.

This module defines the core data structures used throughout the application:
shipment listings, the administrative state registry records, coordinates and
the filter criteria snapshot handed to every filtering pass.
"""

from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Union

from frete_search.text_matching import parse_search_text


LOCATION_SEPARATOR = " - "


class CargoType(str, Enum):
    """Cargo type selector values as published by the listings API."""
    ALL = "todos"
    COMPLETE = "completa"
    PARTIAL = "complemento"


class WeightUnit(str, Enum):
    """Weight units used by listings."""
    TONS = "toneladas"
    KILOGRAMS = "quilos"


@dataclass(frozen=True)
class LocationParts:
    """A location string split into its city, state and country segments."""
    city: str = ""
    state: str = ""
    country: str = ""


def parse_location(text: Optional[str]) -> LocationParts:
    """Split a ``"City - StateCode - Country"`` string.

    Missing segments come back as empty strings and extra segments are
    ignored, so malformed input never raises.
    """
    segments = [s.strip() for s in (text or "").split(LOCATION_SEPARATOR)]
    segments += [""] * (3 - len(segments))
    return LocationParts(city=segments[0], state=segments[1], country=segments[2])


@dataclass(frozen=True)
class Coordinate:
    """Latitude/longitude pair in decimal degrees."""
    lat: float
    lon: float


@dataclass(frozen=True)
class Region:
    """Macro-region owning a group of states."""
    id: int
    code: str
    name: str


@dataclass(frozen=True)
class State:
    """Administrative state record from the geographic registry.

    Attributes:
        id: Registry numeric identifier
        code: Two-letter state code (unique within a loaded set)
        name: Full state name
        region: Owning macro-region
    """
    id: int
    code: str
    name: str
    region: Region


@dataclass
class Carrier:
    """Optional carrier metadata attached to a listing."""
    name: Optional[str] = None
    phone: Optional[str] = None
    logo_url: Optional[str] = None


@dataclass
class Listing:
    """Represents a shipment listing ("frete").

    Attributes:
        id: Listing identifier
        origin: Pickup location encoded as ``"City - StateCode - Country"``
        destination: Delivery location, same encoding
        product: Cargo product name
        cargo_type: ``completa``, ``complemento`` or free text
        total_weight: Total weight in ``weight_unit``
        weight_unit: ``toneladas`` or ``quilos``
        freight_value: Price; ``None`` or negative means negotiable
        pays_toll: Whether the toll is included
        vehicles: Accepted vehicle categories
        bodies: Accepted body/box categories
        created_at: Creation timestamp
        carrier: Optional carrier metadata
    """
    id: str
    origin: str = ""
    destination: str = ""
    product: str = ""
    cargo_type: str = ""
    total_weight: Optional[float] = None
    weight_unit: str = ""
    freight_value: Optional[float] = None
    pays_toll: Optional[bool] = None
    vehicles: List[str] = field(default_factory=list)
    bodies: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    carrier: Optional[Carrier] = None

    @property
    def origin_parts(self) -> LocationParts:
        return parse_location(self.origin)

    @property
    def destination_parts(self) -> LocationParts:
        return parse_location(self.destination)

    @property
    def is_negotiable(self) -> bool:
        """True when the price is absent or the negative sentinel."""
        return self.freight_value is None or self.freight_value < 0

    def get_price_value(self) -> Optional[float]:
        """Return the price, or None for negotiable listings."""
        if self.is_negotiable:
            return None
        return self.freight_value

    def to_dict(self) -> dict:
        """Convert listing to dictionary for JSON serialization.

        Returns:
            Dictionary representation with datetime converted to ISO format
        """
        data = asdict(self)
        data['created_at'] = self.created_at.isoformat() if self.created_at else None
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Listing':
        """Create Listing instance from a dictionary produced by ``to_dict``.

        Args:
            data: Dictionary containing listing data

        Returns:
            Listing instance
        """
        data = data.copy()
        if isinstance(data.get('created_at'), str):
            data['created_at'] = parse_timestamp(data['created_at'])
        if isinstance(data.get('carrier'), dict):
            data['carrier'] = Carrier(**data['carrier'])
        return cls(**data)


def parse_timestamp(value: Union[str, int, float, None]) -> Optional[datetime]:
    """Parse an ISO-8601 string or a Unix epoch into an aware UTC datetime.

    Epoch values above 1e11 are read as milliseconds. Returns None for empty
    or unparsable values.
    """
    if not value or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        seconds = value / 1000 if abs(value) > 1e11 else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _tags(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    return frozenset(v for v in (values or ()) if v)


@dataclass(frozen=True)
class FilterCriteria:
    """User-chosen search criteria, treated as an immutable snapshot.

    Every field defaults to "no filter", so ``FilterCriteria()`` leaves any
    listing collection untouched. ``search_text`` holds the free-text search
    (``"Cidade"`` or ``"Cidade, UF"``) which overrides the structured origin
    city and state when present.
    """
    origin_country: str = ""
    origin_region: str = ""
    origin_state: str = ""
    origin_city: str = ""
    search_text: str = ""
    destination_country: str = ""
    destination_region: str = ""
    destination_state: str = ""
    destination_city: str = ""
    cargo_type: str = CargoType.ALL.value
    vehicles: FrozenSet[str] = frozenset()
    bodies: FrozenSet[str] = frozenset()
    radius_km: Optional[float] = None

    def __post_init__(self):
        """Coerce tag collections to frozensets."""
        object.__setattr__(self, 'vehicles', _tags(self.vehicles))
        object.__setattr__(self, 'bodies', _tags(self.bodies))
        if isinstance(self.cargo_type, CargoType):
            object.__setattr__(self, 'cargo_type', self.cargo_type.value)

    @classmethod
    def cleared(cls, home_country: str = "Brasil") -> 'FilterCriteria':
        """Criteria after the user clears every filter."""
        return cls(origin_country=home_country)

    @property
    def origin_city_query(self) -> str:
        """City to match at origin: free text first, then structured choice."""
        return parse_search_text(self.search_text).city or self.origin_city.strip()

    @property
    def origin_state_query(self) -> str:
        """State to match at origin: free-text code first, then structured choice."""
        return parse_search_text(self.search_text).state or self.origin_state.strip()

    @property
    def cargo_type_selected(self) -> bool:
        return bool(self.cargo_type) and self.cargo_type.lower() not in (CargoType.ALL.value, "all")

    def has_active_filters(self, home_country: str = "Brasil") -> bool:
        """True when anything differs from the cleared default."""
        return self != self.cleared(home_country)

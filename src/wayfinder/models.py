# models.py
# Shared data structures and enums used across all modules.

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate."""
    lat: float
    lon: float


# ---------------------------------------------------------------------------
# Map geometry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MapRect:
    """Axis-aligned rectangle in map-point space (x east, y south)."""
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @staticmethod
    def from_bounds(bounds) -> "MapRect":
        """Build from a shapely (minx, miny, maxx, maxy) tuple."""
        min_x, min_y, max_x, max_y = bounds
        return MapRect(min_x, min_y, max_x - min_x, max_y - min_y)


@dataclass(frozen=True)
class CoordRegion:
    """Visible map area expressed as a centre and a span in degrees."""
    center: Coord
    lat_delta: float
    lon_delta: float


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

@dataclass
class RouteStep:
    """A single navigation instruction in a route."""
    step_id: int
    instruction: str
    distance_m: float
    extent: BaseGeometry          # envelope of the step polyline, map points
    polyline: List[Coord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "step_id": self.step_id,
            "instruction": self.instruction,
            "distance_m": self.distance_m,
            "extent": mapping(self.extent),
            "polyline": [{"lat": c.lat, "lon": c.lon} for c in self.polyline],
        }

    @staticmethod
    def from_dict(d: dict) -> "RouteStep":
        return RouteStep(
            step_id=d["step_id"],
            instruction=d.get("instruction", ""),
            distance_m=d["distance_m"],
            extent=shape(d["extent"]),
            polyline=[Coord(p["lat"], p["lon"]) for p in d.get("polyline", [])],
        )


@dataclass
class Route:
    """Ordered steps plus the full route geometry."""
    steps: List[RouteStep]
    distance_m: float
    geometry: List[Coord] = field(default_factory=list)
    expected_travel_time_s: Optional[float] = None
    name: Optional[str] = None

    def bounding_rect(self) -> Optional[MapRect]:
        """Map rect covering the route geometry, or the step extents if none."""
        # Imported here: geo_utils depends on this module.
        from .geo_utils import bounding_map_rect

        if self.geometry:
            return bounding_map_rect(self.geometry)
        if self.steps:
            return MapRect.from_bounds(unary_union([s.extent for s in self.steps]).bounds)
        return None


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

class UnitSystem(Enum):
    METRIC   = "metric"
    IMPERIAL = "imperial"


# ---------------------------------------------------------------------------
# Session status
# ---------------------------------------------------------------------------

class SessionState(Enum):
    NO_DESTINATION  = "no_destination"
    ROUTE_REQUESTED = "route_requested"
    ROUTE_ACTIVE    = "route_active"


class StepStyle(Enum):
    REGULAR = "regular"
    BOLD    = "bold"


@dataclass(frozen=True)
class StepDisplay:
    """One row of the visible instruction list."""
    index: int                   # position in the unfiltered step sequence
    instruction: str
    distance_text: str
    style: StepStyle = StepStyle.REGULAR


@dataclass
class ProgressResult:
    """Returned by NavigationSession.on_position_update() every GPS update."""
    state: SessionState
    step_index: int
    changed: bool = False
    current_step: Optional[RouteStep] = None
    distance_to_destination: Optional[float] = None   # metres, straight line


# ---------------------------------------------------------------------------
# Provider records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Suggestion:
    """Address completion result."""
    title: str
    subtitle: str = ""

    def __str__(self) -> str:
        return f"{self.title}, {self.subtitle}" if self.subtitle else self.title


class AuthorizationStatus(Enum):
    NOT_DETERMINED         = "not_determined"
    DENIED                 = "denied"
    AUTHORIZED_WHEN_IN_USE = "authorized_when_in_use"
    AUTHORIZED_ALWAYS      = "authorized_always"

    @property
    def is_authorized(self) -> bool:
        return self in (AuthorizationStatus.AUTHORIZED_WHEN_IN_USE,
                        AuthorizationStatus.AUTHORIZED_ALWAYS)


@dataclass(frozen=True)
class LocationEvent:
    """A single fix from the location provider."""
    coord: Coord
    timestamp: Optional[float] = None
    accuracy: Optional[float] = None

"""wayfinder - turn-by-turn route progress tracking."""

from .address_resolver import AddressResolver
from .dispatch import ImmediateDispatcher, ThreadedDispatcher
from .errors import (
    InvalidDistance,
    NavigationError,
    NoMatch,
    NotFound,
    ProviderUnavailable,
    RouteUnavailable,
    StaleResponse,
)
from .location import LocationFeed, TracePlayback
from .models import (
    AuthorizationStatus,
    Coord,
    CoordRegion,
    LocationEvent,
    MapRect,
    ProgressResult,
    Route,
    RouteStep,
    SessionState,
    StepDisplay,
    StepStyle,
    Suggestion,
    UnitSystem,
)
from .nav_config import NavConfig
from .navigation_session import NavigationSession, step_style
from .route_projector import project, project_route
from .step_tracker import StepTracker, locate_step
from .unit_converter import format_distance

__all__ = [
    "AddressResolver",
    "ImmediateDispatcher",
    "ThreadedDispatcher",
    "InvalidDistance",
    "NavigationError",
    "NoMatch",
    "NotFound",
    "ProviderUnavailable",
    "RouteUnavailable",
    "StaleResponse",
    "LocationFeed",
    "TracePlayback",
    "AuthorizationStatus",
    "Coord",
    "CoordRegion",
    "LocationEvent",
    "MapRect",
    "ProgressResult",
    "Route",
    "RouteStep",
    "SessionState",
    "StepDisplay",
    "StepStyle",
    "Suggestion",
    "UnitSystem",
    "NavConfig",
    "NavigationSession",
    "step_style",
    "project",
    "project_route",
    "StepTracker",
    "locate_step",
    "format_distance",
]

# osrm.py
# Routing provider backed by an OSRM /route endpoint.
# Converts the first OSRM route into Route / RouteStep objects.

import logging
from typing import List, Optional

import requests

from ..errors import ProviderUnavailable, RouteUnavailable
from ..geo_utils import polyline_extent
from ..models import Coord, Route, RouteStep
from ..nav_config import NavConfig
from .base import RoutingProvider

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Instruction text
# ---------------------------------------------------------------------------

def maneuver_instruction(maneuver: dict, road_name: str = "") -> str:
    """
    Human-readable instruction for an OSRM maneuver.

    The departure maneuver yields an empty string: the traveller is already
    on the first road and no instruction is shown for it.

    Args:
        maneuver:  OSRM maneuver object (type, modifier, exit).
        road_name: Name of the road the step follows.

    Returns:
        Instruction string.
    """
    kind = maneuver.get("type", "")
    modifier = maneuver.get("modifier", "")
    onto = f" onto {road_name}" if road_name else ""

    if kind == "depart":
        return ""
    if kind == "arrive":
        return "Arrive at destination"
    if kind in ("roundabout", "rotary"):
        exit_number = maneuver.get("exit")
        if exit_number:
            return f"Enter the roundabout and take exit {exit_number}{onto}"
        return f"Enter the roundabout{onto}"
    if kind == "exit roundabout":
        return f"Exit the roundabout{onto}"
    if modifier == "uturn":
        return f"Make a U-turn{onto}"
    if kind in ("continue", "new name") or modifier == "straight":
        return f"Continue{onto}" if onto else "Continue straight"
    if kind == "fork":
        return f"Keep {modifier}{onto}" if modifier else f"Keep on{onto}"
    if kind == "merge":
        return " ".join(p for p in ("Merge", modifier) if p) + onto
    if kind == "on ramp":
        return f"Take the ramp{onto}"
    if kind == "off ramp":
        return f"Take the exit{onto}"
    if modifier:
        return f"Turn {modifier}{onto}"
    return f"Continue{onto}" if onto else "Continue straight"


def _coords(geometry: dict) -> List[Coord]:
    return [Coord(lat, lon) for lon, lat in geometry.get("coordinates", [])]


def parse_route(data: dict) -> Route:
    """
    Convert an OSRM JSON response into a Route (first route only).

    Raises:
        RouteUnavailable: code is not "Ok" or no route was returned.
    """
    if data.get("code") != "Ok":
        raise RouteUnavailable(f"OSRM error: {data.get('message', data.get('code', 'Unknown error'))}")
    routes = data.get("routes") or []
    if not routes:
        raise RouteUnavailable("OSRM returned no routes.")

    best = routes[0]
    steps: List[RouteStep] = []
    for leg in best.get("legs", []):
        for raw in leg.get("steps", []):
            polyline = _coords(raw.get("geometry", {}))
            if not polyline:
                location = raw.get("maneuver", {}).get("location")
                if not location:
                    continue
                polyline = [Coord(location[1], location[0])]
            steps.append(RouteStep(
                step_id=len(steps),
                instruction=maneuver_instruction(raw.get("maneuver", {}), raw.get("name", "")),
                distance_m=float(raw.get("distance", 0.0)),
                extent=polyline_extent(polyline),
                polyline=polyline,
            ))

    return Route(
        steps=steps,
        distance_m=float(best.get("distance", 0.0)),
        geometry=_coords(best.get("geometry", {})),
        expected_travel_time_s=best.get("duration"),
        name=(best.get("legs") or [{}])[0].get("summary") or None,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class OSRMRoutingProvider(RoutingProvider):
    """
    OSRM HTTP adapter.

    Args:
        config:  NavConfig with base URL, timeout and user agent.
        session: Optional requests.Session (connection reuse, tests).
    """

    profile = "driving"

    def __init__(self, config: Optional[NavConfig] = None,
                 session: Optional[requests.Session] = None) -> None:
        self.config = config or NavConfig()
        self._http = session or requests.Session()
        self._http.headers.update({"User-Agent": self.config.user_agent})

    def route(self, origin: Coord, destination: Coord) -> Route:
        coords = f"{origin.lon},{origin.lat};{destination.lon},{destination.lat}"
        url = f"{self.config.osrm_base_url.rstrip('/')}/route/v1/{self.profile}/{coords}"
        logger.info(f"Requesting route {origin} → {destination}")
        try:
            response = self._http.get(
                url,
                params={"steps": "true", "geometries": "geojson", "overview": "full"},
                timeout=self.config.request_timeout_s,
            )
            data = response.json()
        except requests.RequestException as e:
            raise ProviderUnavailable(f"OSRM request failed: {e}") from e
        except ValueError as e:
            raise ProviderUnavailable(f"OSRM returned invalid JSON: {e}") from e

        # OSRM answers NoRoute / InvalidQuery with a 400 and a "code"; any
        # other error status is the server itself failing.
        if response.status_code >= 400 and not (isinstance(data, dict) and "code" in data):
            message = data.get("message") if isinstance(data, dict) else None
            raise ProviderUnavailable(
                f"OSRM HTTP {response.status_code}: {message or response.reason}"
            )

        route = parse_route(data)
        logger.info(f"Route received: {len(route.steps)} steps, {route.distance_m:.0f} m.")
        return route

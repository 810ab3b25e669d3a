# navigation_session.py
# Public entry point for turn-by-turn guidance.
# Owns all session state; delegates geometry and formatting to specialist modules.

import dataclasses
import logging
from typing import Callable, List, Optional, Tuple, Union

from .address_resolver import AddressResolver
from .dispatch import ImmediateDispatcher
from .errors import NavigationError, ProviderUnavailable
from .geo_utils import haversine_distance, region_around
from .location import LocationFeed
from .models import (
    AuthorizationStatus,
    Coord,
    CoordRegion,
    LocationEvent,
    MapRect,
    ProgressResult,
    Route,
    SessionState,
    StepDisplay,
    StepStyle,
    Suggestion,
    UnitSystem,
)
from .nav_config import NavConfig
from .providers.base import RoutingProvider
from .route_projector import project_route
from .step_tracker import StepTracker
from .unit_converter import format_distance

logger = logging.getLogger(__name__)

SessionListener = Callable[[str, dict], None]


def step_style(index: int, current_index: int) -> StepStyle:
    """Bold for the step being travelled, regular otherwise."""
    return StepStyle.BOLD if index == current_index else StepStyle.REGULAR


class NavigationSession:
    """
    Single owner of navigation state.

    Typical lifecycle:
        session = NavigationSession(OSRMRoutingProvider(config), config=config)
        session.attach(feed)                      # or call on_position_update()
        session.set_destination(Coord(39.921, 32.852))

        # GPS loop:
        result = session.on_position_update(Coord(lat, lon))

    All mutation happens on the thread that calls these methods. Provider
    work goes through the dispatcher; with a ThreadedDispatcher the owner
    applies finished requests by calling process_pending().

    Args:
        routing:    RoutingProvider used for every destination.
        config:     Optional NavConfig; defaults to NavConfig().
        dispatcher: Where route requests run; inline by default.
        resolver:   Optional AddressResolver for navigate_to_address().
    """

    def __init__(
        self,
        routing: RoutingProvider,
        config: Optional[NavConfig] = None,
        dispatcher=None,
        resolver: Optional[AddressResolver] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._routing = routing
        self._dispatcher = dispatcher or ImmediateDispatcher()
        self._resolver = resolver
        self._tracker = StepTracker()
        self._listeners: List[SessionListener] = []
        self._request_seq: int = 0

        self.state: SessionState = SessionState.NO_DESTINATION
        self.destination: Optional[Coord] = None
        self.route: Optional[Route] = None
        self.unit_system: UnitSystem = self.config.unit_system
        self.selected_step_index: Optional[int] = None
        self.viewport: Optional[MapRect] = None
        self.position_region: Optional[CoordRegion] = None
        self.last_position: Optional[Coord] = None
        self.authorization: Optional[AuthorizationStatus] = None
        self.last_error: Optional[NavigationError] = None
        self._rows: List[StepDisplay] = []

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: SessionListener) -> None:
        """Register a callback receiving (event_name, payload)."""
        self._listeners.append(listener)

    def _emit(self, event: str, **payload) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, payload)
            except Exception:
                logger.exception(f"Listener failed on {event!r}; continuing.")

    def attach(self, feed: LocationFeed) -> None:
        """Consume fixes and authorization changes from a location feed."""
        feed.subscribe(self.on_position_update, self.on_authorization_changed)

    # ------------------------------------------------------------------
    # Destination control
    # ------------------------------------------------------------------

    def set_destination(self, destination: Coord) -> int:
        """
        Start routing to a new destination.

        Drops the current route, resets progress and selection, and issues a
        route request from the last known position.

        Returns:
            Sequence number of the route request.
        """
        self._request_seq += 1
        seq = self._request_seq

        self.state = SessionState.ROUTE_REQUESTED
        self.destination = destination
        self._clear_route()
        self.last_error = None
        logger.info(f"Destination set: {destination} (request #{seq})")
        self._emit("destination_set", destination=destination, request=seq)

        origin = self.last_position
        if origin is None:
            self._on_route_response(seq, None, ProviderUnavailable("No position fix to route from."))
            return seq

        self._dispatcher.submit(
            lambda: self._routing.route(origin, destination),
            lambda route, error: self._on_route_response(seq, route, error),
        )
        return seq

    def navigate_to_address(self, text: str,
                            suggestion: Optional[Suggestion] = None) -> Tuple[bool, str]:
        """
        Resolve typed text (or a picked suggestion) and route to it.

        Returns:
            (success, message)
        """
        if self._resolver is None:
            raise RuntimeError("navigate_to_address() needs an AddressResolver.")
        try:
            coord = self._resolver.resolve(text, suggestion)
        except NavigationError as e:
            logger.warning(f"Could not resolve destination: {e.message}")
            self.last_error = e
            return False, e.message
        self.set_destination(coord)
        if self.state is SessionState.ROUTE_ACTIVE:
            return True, f"Route ready. {len(self.route.steps)} steps."
        if self.last_error is not None:
            return False, self.last_error.message
        return True, "Route requested."

    def cancel_navigation(self) -> None:
        """End the current navigation and ignore any pending route response."""
        self._request_seq += 1
        self.state = SessionState.NO_DESTINATION
        self.destination = None
        self._clear_route()
        self.last_error = None
        logger.info("Navigation cancelled by user.")
        self._emit("navigation_cancelled")

    def process_pending(self) -> int:
        """Apply provider completions queued by a threaded dispatcher."""
        return self._dispatcher.process_pending()

    def _clear_route(self) -> None:
        self.route = None
        self._rows = []
        self.viewport = None
        self.selected_step_index = None
        self._tracker.reset()

    # ------------------------------------------------------------------
    # Route responses
    # ------------------------------------------------------------------

    def _on_route_response(self, seq: int, route: Optional[Route],
                           error: Optional[Exception]) -> None:
        if seq != self._request_seq:
            logger.debug(f"Discarding stale route response #{seq} (latest #{self._request_seq}).")
            return

        if error is not None:
            if not isinstance(error, NavigationError):
                error = ProviderUnavailable(f"Routing failed: {error}")
            self.last_error = error
            logger.warning(f"Route request #{seq} failed: {error.message}")
            self._emit("route_failed", error=error, request=seq)
            return

        self.route = route
        self.state = SessionState.ROUTE_ACTIVE
        self.viewport = project_route(route, self.config.viewport_padding_ratio)
        self._tracker.load_route(route.steps)
        self._derive_rows()
        logger.info(f"Route ready: {len(route.steps)} steps, {self.total_distance_text}.")
        self._emit("route_ready", route=route, request=seq)

    def _derive_rows(self) -> None:
        self._rows = [
            StepDisplay(
                index=i,
                instruction=step.instruction,
                distance_text=format_distance(step.distance_m, self.unit_system),
            )
            for i, step in enumerate(self.route.steps)
            if step.instruction.strip()
        ]

    # ------------------------------------------------------------------
    # GPS update: call this on every position fix
    # ------------------------------------------------------------------

    def on_position_update(self, position: Union[Coord, LocationEvent]) -> ProgressResult:
        """
        Process a new position.

        The live-position region always follows the fix; the step index is
        re-evaluated only while a route is active.

        Args:
            position: Coordinate or LocationEvent from the location feed.

        Returns:
            ProgressResult with state, step index and whether it changed.
        """
        coord = position.coord if isinstance(position, LocationEvent) else position

        if self.authorization is not None and not self.authorization.is_authorized:
            return ProgressResult(state=self.state, step_index=self.step_index,
                                  current_step=self._tracker.current_step)

        self.last_position = coord
        self.position_region = region_around(coord, self.config.position_span_m)

        if self.state is not SessionState.ROUTE_ACTIVE:
            return ProgressResult(state=self.state, step_index=self.step_index)

        previous = self._tracker.step_index
        current = self._tracker.update(coord)
        changed = current != previous
        if changed:
            self._emit("step_changed", previous=previous, current=current,
                       step=self._tracker.current_step)
        return ProgressResult(
            state=self.state,
            step_index=current,
            changed=changed,
            current_step=self._tracker.current_step,
            distance_to_destination=self._distance_to_destination(coord),
        )

    def _distance_to_destination(self, coord: Coord) -> Optional[float]:
        if self.destination is None:
            return None
        return haversine_distance(coord.lat, coord.lon,
                                  self.destination.lat, self.destination.lon)

    def on_authorization_changed(self, status: AuthorizationStatus) -> None:
        """Record location permission; denial keeps the last display state."""
        self.authorization = status
        if status is AuthorizationStatus.DENIED:
            self.last_error = ProviderUnavailable("Location access denied.")
            logger.warning("Location access denied; keeping last known state.")
        self._emit("authorization_changed", status=status)

    # ------------------------------------------------------------------
    # Display preferences
    # ------------------------------------------------------------------

    def set_unit_preference(self, system: UnitSystem) -> None:
        """Switch units; re-formats stored distances without refetching."""
        if system is self.unit_system:
            return
        self.unit_system = system
        if self.route is not None:
            self._derive_rows()
        self._emit("units_changed", unit_system=system)

    def set_imperial(self, imperial: bool) -> None:
        self.set_unit_preference(UnitSystem.IMPERIAL if imperial else UnitSystem.METRIC)

    def select_step(self, index: int) -> bool:
        """Highlight a step; out-of-range indexes are ignored."""
        if self.route is None or not 0 <= index < len(self.route.steps):
            return False
        self.selected_step_index = index
        return True

    # ------------------------------------------------------------------
    # Convenience read-only properties
    # ------------------------------------------------------------------

    @property
    def step_index(self) -> int:
        return self._tracker.step_index

    @property
    def current_step(self):
        return self._tracker.current_step

    @property
    def request_seq(self) -> int:
        return self._request_seq

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ROUTE_ACTIVE

    @property
    def total_distance_text(self) -> Optional[str]:
        if self.route is None:
            return None
        return format_distance(self.route.distance_m, self.unit_system)

    def display_steps(self) -> List[StepDisplay]:
        """Visible instruction rows with the current step in bold."""
        current = self.step_index
        return [dataclasses.replace(row, style=step_style(row.index, current)) for row in self._rows]

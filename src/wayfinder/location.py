# location.py
# Location provider contract and GPS trace playback.
# The feed only emits events; subscribers own whatever state they mutate.

import json
import logging
import time
from typing import Callable, List, Optional, Sequence

from .models import AuthorizationStatus, Coord, LocationEvent

logger = logging.getLogger(__name__)

LocationListener = Callable[[LocationEvent], None]
AuthorizationListener = Callable[[AuthorizationStatus], None]


class LocationFeed:
    """
    Fan-out of position fixes and authorization changes.

    Fixes pushed while not authorized are dropped.
    """

    def __init__(self, status: AuthorizationStatus = AuthorizationStatus.NOT_DETERMINED) -> None:
        self._status = status
        self._location_listeners: List[LocationListener] = []
        self._auth_listeners: List[AuthorizationListener] = []
        self.last_event: Optional[LocationEvent] = None

    @property
    def authorization(self) -> AuthorizationStatus:
        return self._status

    def subscribe(self, on_location: LocationListener,
                  on_authorization: Optional[AuthorizationListener] = None) -> None:
        self._location_listeners.append(on_location)
        if on_authorization:
            self._auth_listeners.append(on_authorization)
            on_authorization(self._status)

    def set_authorization(self, status: AuthorizationStatus) -> None:
        if status == self._status:
            return
        logger.info(f"Location authorization: {self._status.value} -> {status.value}")
        self._status = status
        for listener in list(self._auth_listeners):
            listener(status)

    def push(self, event: LocationEvent) -> bool:
        """
        Deliver a fix to all subscribers.

        Returns:
            False if the fix was dropped because the feed is not authorized.
        """
        if not self._status.is_authorized:
            logger.debug(f"Dropping fix {event.coord}: not authorized.")
            return False
        self.last_event = event
        for listener in list(self._location_listeners):
            listener(event)
        return True


class TracePlayback:
    """
    Replays a recorded GPS trace into a LocationFeed.

    Trace file format:
        {"trace": [{"lat": 39.92, "lon": 32.85, "elapsed": 0.0}, ...]}

    Args:
        feed:   Target feed.
        points: Trace entries (dicts with lat/lon and optional elapsed).
        speed:  Playback speed multiplier for step_all(realtime=True).
    """

    def __init__(self, feed: LocationFeed, points: Sequence[dict], speed: float = 1.0) -> None:
        self.feed = feed
        self.points = list(points)
        self.speed = speed
        self.index = 0

    @classmethod
    def from_file(cls, feed: LocationFeed, path: str, speed: float = 1.0) -> "TracePlayback":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        points = [p for p in data["trace"] if p.get("lat") is not None]
        logger.info(f"Loaded GPS trace from {path} ({len(points)} entries).")
        return cls(feed, points, speed)

    @classmethod
    def from_coords(cls, feed: LocationFeed, coords: Sequence[Coord]) -> "TracePlayback":
        return cls(feed, [{"lat": c.lat, "lon": c.lon} for c in coords])

    def is_finished(self) -> bool:
        return self.index >= len(self.points)

    def step(self) -> Optional[LocationEvent]:
        """Push the next trace entry; None once the trace is exhausted."""
        if self.is_finished():
            return None
        entry = self.points[self.index]
        self.index += 1
        event = LocationEvent(
            coord=Coord(float(entry["lat"]), float(entry["lon"])),
            timestamp=time.time(),
            accuracy=entry.get("accuracy"),
        )
        self.feed.push(event)
        return event

    def poll_interval(self) -> float:
        """Seconds until the next entry based on trace timing and speed."""
        if self.index <= 0 or self.index >= len(self.points):
            return 0.0
        delta = self.points[self.index].get("elapsed", 0) - self.points[self.index - 1].get("elapsed", 0)
        return max(0.0, min(delta / self.speed, 5.0))

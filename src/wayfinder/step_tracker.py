# step_tracker.py
# Tracks which route step the traveller occupies.
# Call load_route() once per route, then update() on every GPS fix.

import logging
from typing import List, Optional, Sequence

from shapely.geometry import Point
from shapely.prepared import prep

from .geo_utils import map_point
from .models import Coord, RouteStep

logger = logging.getLogger(__name__)


def locate_step(steps: Sequence[RouteStep], position: Coord) -> Optional[int]:
    """
    Index of the first step whose extent covers the position.

    Steps are scanned in route order, so overlapping extents resolve to the
    lowest index. Extent boundaries count as inside.

    Args:
        steps:    Unfiltered step sequence of the route.
        position: Current geographic position.

    Returns:
        Step index, or None if no extent covers the position.
    """
    point = map_point(position)
    for index, step in enumerate(steps):
        if step.extent.covers(point):
            return index
    return None


class StepTracker:
    """
    Stateful step locator for a single route.

    Usage:
        tracker = StepTracker()
        tracker.load_route(route.steps)

        # Inside GPS loop:
        index = tracker.update(current_coord)

    A miss keeps the last matched index.
    """

    def __init__(self) -> None:
        self._steps: List[RouteStep] = []
        self._prepared: list = []
        self._step_index: int = 0

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def load_route(self, steps: Sequence[RouteStep]) -> None:
        """Load a new step sequence and reset to the first step."""
        self._steps = list(steps)
        self._prepared = [prep(s.extent) for s in self._steps]
        self._step_index = 0

    def reset(self) -> None:
        self._steps = []
        self._prepared = []
        self._step_index = 0

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def steps(self) -> List[RouteStep]:
        return self._steps

    @property
    def step_index(self) -> int:
        return self._step_index

    @property
    def current_step(self) -> Optional[RouteStep]:
        if 0 <= self._step_index < len(self._steps):
            return self._steps[self._step_index]
        return None

    # ------------------------------------------------------------------
    # Core method: call on every GPS update
    # ------------------------------------------------------------------

    def locate(self, position: Coord) -> Optional[int]:
        """locate_step() against the prepared extents of the loaded route."""
        point: Point = map_point(position)
        for index, extent in enumerate(self._prepared):
            if extent.covers(point):
                return index
        return None

    def update(self, position: Coord) -> int:
        """
        Re-evaluate the active step for a new position.

        Returns:
            The tracked step index; unchanged when no extent matches.
        """
        index = self.locate(position)
        if index is None:
            logger.debug(f"No step contains {position}; keeping step {self._step_index}.")
            return self._step_index
        if index != self._step_index:
            logger.info(f"Step {self._step_index} -> {index}: {self._steps[index].instruction!r}")
            self._step_index = index
        return self._step_index

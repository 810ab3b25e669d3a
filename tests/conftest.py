"""Shared fixtures and in-process fakes for the navigation tests."""

from typing import Dict, List, Optional

import pytest

from wayfinder.errors import NotFound, RouteUnavailable
from wayfinder.geo_utils import polyline_extent
from wayfinder.models import Coord, Route, RouteStep, Suggestion
from wayfinder.providers.base import CompletionProvider, Geocoder, RoutingProvider


def make_step(step_id: int, instruction: str, distance_m: float,
              south_west: Coord, north_east: Coord) -> RouteStep:
    polyline = [south_west, north_east]
    return RouteStep(
        step_id=step_id,
        instruction=instruction,
        distance_m=distance_m,
        extent=polyline_extent(polyline),
        polyline=polyline,
    )


# Three boxes stacked north along a meridian: R1, R2, R3.
R1 = (Coord(40.000, -74.000), Coord(40.010, -73.990))
R2 = (Coord(40.010, -74.000), Coord(40.020, -73.990))
R3 = (Coord(40.020, -74.000), Coord(40.030, -73.990))

INSIDE_R1 = Coord(40.004, -73.995)
INSIDE_R2 = Coord(40.015, -73.995)
INSIDE_R3 = Coord(40.026, -73.995)
OUTSIDE = Coord(41.000, -73.000)


def abc_route() -> Route:
    """A (100 m), B (150 m, no instruction), C (150 m)."""
    steps = [
        make_step(0, "Head north on Main St", 100.0, *R1),
        make_step(1, "", 150.0, *R2),
        make_step(2, "Turn right onto Oak Ave", 150.0, *R3),
    ]
    return Route(steps=steps, distance_m=400.0, geometry=[R1[0], R3[1]])


def single_step_route(distance_m: float = 5000.0) -> Route:
    step = make_step(0, "Drive to destination", distance_m, *R1)
    return Route(steps=[step], distance_m=distance_m, geometry=list(R1))


@pytest.fixture
def route() -> Route:
    return abc_route()


class FakeRouting(RoutingProvider):
    """
    Returns queued routes (or raises queued errors) in call order, or the
    outcome registered for the requested destination.
    """

    def __init__(self, *outcomes, by_destination: Optional[dict] = None) -> None:
        self.outcomes = list(outcomes)
        self.by_destination = by_destination or {}
        self.calls: List[tuple] = []

    def route(self, origin: Coord, destination: Coord) -> Route:
        self.calls.append((origin, destination))
        if destination in self.by_destination:
            outcome = self.by_destination[destination]
        elif self.outcomes:
            outcome = self.outcomes.pop(0)
        else:
            raise RouteUnavailable("no route queued")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakePlaces(CompletionProvider, Geocoder):
    def __init__(self, completions: Optional[Dict[str, List[Suggestion]]] = None,
                 lookups: Optional[Dict[Suggestion, List[Coord]]] = None,
                 geocodes: Optional[Dict[str, Coord]] = None) -> None:
        self.completions = completions or {}
        self.lookups = lookups or {}
        self.geocodes = geocodes or {}
        self.queries: List[str] = []

    def complete(self, fragment: str) -> List[Suggestion]:
        self.queries.append(fragment)
        return self.completions.get(fragment, [])

    def lookup(self, suggestion: Suggestion) -> List[Coord]:
        return self.lookups.get(suggestion, [])

    def geocode(self, text: str) -> Coord:
        if text not in self.geocodes:
            raise NotFound(f"No location found for '{text}'.")
        return self.geocodes[text]


class ManualDispatcher:
    """Holds submitted work until a test resolves it, in any order."""

    def __init__(self) -> None:
        self.jobs: List[tuple] = []

    def submit(self, work, on_done) -> None:
        self.jobs.append((work, on_done))

    def resolve(self, index: int) -> None:
        work, on_done = self.jobs[index]
        try:
            result = work()
        except Exception as e:
            on_done(None, e)
            return
        on_done(result, None)

    def process_pending(self) -> int:
        return 0


@pytest.fixture
def dispatcher() -> ManualDispatcher:
    return ManualDispatcher()

# base.py
# Contracts for the external collaborators the core depends on.
# Implementations block; the dispatcher decides where they run.

from abc import ABC, abstractmethod
from typing import List

from ..models import Coord, Route, Suggestion


class RoutingProvider(ABC):
    """Driving directions between two coordinates."""

    @abstractmethod
    def route(self, origin: Coord, destination: Coord) -> Route:
        """
        Raises:
            RouteUnavailable:    No route between the points.
            ProviderUnavailable: Provider unreachable.
        """


class CompletionProvider(ABC):
    """Address autocompletion for partial text."""

    @abstractmethod
    def complete(self, fragment: str) -> List[Suggestion]:
        """Ordered suggestions for a text fragment."""

    @abstractmethod
    def lookup(self, suggestion: Suggestion) -> List[Coord]:
        """Coordinates matching a chosen suggestion, best first."""


class Geocoder(ABC):
    """Free-text to coordinate."""

    @abstractmethod
    def geocode(self, text: str) -> Coord:
        """
        Raises:
            NotFound:            Nothing matched.
            ProviderUnavailable: Provider unreachable.
        """

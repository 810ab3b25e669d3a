"""External provider contracts and HTTP adapters."""

from .base import CompletionProvider, Geocoder, RoutingProvider
from .nominatim import NominatimProvider
from .osrm import OSRMRoutingProvider

__all__ = [
    "CompletionProvider",
    "Geocoder",
    "RoutingProvider",
    "NominatimProvider",
    "OSRMRoutingProvider",
]

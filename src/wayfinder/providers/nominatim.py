# nominatim.py
# Address completion and geocoding backed by a Nominatim /search endpoint.

import logging
from typing import List, Optional

import requests

from ..errors import NotFound, ProviderUnavailable
from ..models import Coord, Suggestion
from ..nav_config import NavConfig
from .base import CompletionProvider, Geocoder

logger = logging.getLogger(__name__)


def _suggestion(place: dict) -> Suggestion:
    """Split a display name into title (first part) and subtitle (the rest)."""
    title, _, subtitle = place.get("display_name", "").partition(",")
    return Suggestion(title=title.strip(), subtitle=subtitle.strip())


class NominatimProvider(CompletionProvider, Geocoder):
    """
    Nominatim HTTP adapter serving both completion and geocoding.

    Args:
        config:  NavConfig with base URL, timeout, user agent, suggestion limit.
        session: Optional requests.Session (connection reuse, tests).
    """

    def __init__(self, config: Optional[NavConfig] = None,
                 session: Optional[requests.Session] = None) -> None:
        self.config = config or NavConfig()
        self._http = session or requests.Session()
        self._http.headers.update({"User-Agent": self.config.user_agent})

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def complete(self, fragment: str) -> List[Suggestion]:
        places = self._search(fragment, limit=self.config.max_suggestions)
        return [_suggestion(p) for p in places]

    def lookup(self, suggestion: Suggestion) -> List[Coord]:
        places = self._search(str(suggestion), limit=1)
        return [Coord(float(p["lat"]), float(p["lon"])) for p in places]

    def geocode(self, text: str) -> Coord:
        places = self._search(text, limit=1)
        if not places:
            raise NotFound(f"No location found for '{text}'.")
        return Coord(float(places[0]["lat"]), float(places[0]["lon"]))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _search(self, query: str, limit: int) -> List[dict]:
        url = f"{self.config.nominatim_base_url.rstrip('/')}/search"
        logger.debug(f"Nominatim search: {query!r}")
        try:
            response = self._http.get(
                url,
                params={"q": query, "format": "jsonv2", "limit": limit},
                timeout=self.config.request_timeout_s,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise ProviderUnavailable(f"Nominatim request failed: {e}") from e
        except ValueError as e:
            raise ProviderUnavailable(f"Nominatim returned invalid JSON: {e}") from e

# address_resolver.py
# Facade over the completion and geocoding providers.
# Turns typed text or a picked suggestion into a destination coordinate.

import logging
from typing import Callable, List, Optional

from .dispatch import ImmediateDispatcher
from .errors import NavigationError, NoMatch, NotFound, ProviderUnavailable
from .models import Coord, Suggestion
from .nav_config import NavConfig
from .providers.base import CompletionProvider, Geocoder

logger = logging.getLogger(__name__)


class AddressResolver:
    """
    Query-as-you-type address search.

    Every edit issues a new completion query. Results are applied only if
    they belong to the most recent query; anything older is dropped.

    Usage:
        resolver = AddressResolver(provider, provider, on_suggestions=show)
        resolver.on_query_changed("1 Infinite")
        coord = resolver.on_suggestion_selected(resolver.suggestions[0])

    Args:
        completer:      CompletionProvider for suggestions and lookups.
        geocoder:       Geocoder used when no suggestion was picked.
        config:         Optional NavConfig; defaults to NavConfig().
        dispatcher:     Where completion queries run; inline by default.
        on_suggestions: Called with the new suggestion list.
        on_error:       Called with a NavigationError when a query fails.
    """

    def __init__(
        self,
        completer: CompletionProvider,
        geocoder: Geocoder,
        config: Optional[NavConfig] = None,
        dispatcher=None,
        on_suggestions: Optional[Callable[[List[Suggestion]], None]] = None,
        on_error: Optional[Callable[[NavigationError], None]] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._completer = completer
        self._geocoder = geocoder
        self._dispatcher = dispatcher or ImmediateDispatcher()
        self._on_suggestions = on_suggestions
        self._on_error = on_error

        self._query_seq: int = 0
        self.query: str = ""
        self.suggestions: List[Suggestion] = []

    # ------------------------------------------------------------------
    # Typing
    # ------------------------------------------------------------------

    @property
    def latest_query_seq(self) -> int:
        return self._query_seq

    def on_query_changed(self, text: str) -> int:
        """
        Forward the latest text fragment to the completion provider.

        Returns:
            Sequence number of the issued query.
        """
        self._query_seq += 1
        seq = self._query_seq
        self.query = text

        if len(text.strip()) < max(1, self.config.min_query_length):
            self._apply_suggestions([])
            return seq

        fragment = text.strip()
        self._dispatcher.submit(
            lambda: self._completer.complete(fragment),
            lambda result, error: self._on_completion(seq, result, error),
        )
        return seq

    def _on_completion(self, seq: int, result, error: Optional[Exception]) -> None:
        if seq != self._query_seq:
            logger.debug(f"Discarding stale completion #{seq} (latest #{self._query_seq}).")
            return
        if error is not None:
            self._report(error)
            return
        self._apply_suggestions(list(result)[: self.config.max_suggestions])

    def _apply_suggestions(self, suggestions: List[Suggestion]) -> None:
        self.suggestions = suggestions
        if self._on_suggestions:
            self._on_suggestions(suggestions)

    def _report(self, error: Exception) -> None:
        if not isinstance(error, NavigationError):
            error = ProviderUnavailable(f"Completion failed: {error}")
        logger.warning(f"Address completion failed: {error.message}")
        if self._on_error:
            self._on_error(error)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def on_suggestion_selected(self, suggestion: Suggestion) -> Coord:
        """
        Resolve a picked suggestion to a single coordinate.

        Raises:
            NoMatch:             The provider found nothing for it.
            ProviderUnavailable: Provider unreachable.
        """
        matches = self._completer.lookup(suggestion)
        if not matches:
            raise NoMatch(f"No location found for '{suggestion}'.")
        logger.info(f"Suggestion '{suggestion}' resolved to {matches[0]}")
        return matches[0]

    def on_free_text_submitted(self, text: str) -> Coord:
        """
        Geocode text typed without picking a suggestion.

        Raises:
            NotFound:            Blank text or nothing matched.
            ProviderUnavailable: Provider unreachable.
        """
        text = text.strip()
        if not text:
            raise NotFound("Empty destination.")
        coord = self._geocoder.geocode(text)
        logger.info(f"'{text}' geocoded to {coord}")
        return coord

    def resolve(self, text: str, suggestion: Optional[Suggestion] = None) -> Coord:
        """Suggestion lookup when one was picked, geocoding otherwise."""
        if suggestion is not None:
            return self.on_suggestion_selected(suggestion)
        return self.on_free_text_submitted(text)

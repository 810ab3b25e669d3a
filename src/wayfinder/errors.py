# errors.py
# Failure taxonomy shared by providers, the resolver and the session.


class NavigationError(Exception):
    """Base class for all recoverable navigation failures."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ProviderUnavailable(NavigationError):
    """Location authorization denied or a provider could not be reached."""


class NoMatch(NavigationError):
    """A suggestion lookup or geocode returned no results."""


class NotFound(NoMatch):
    """Free-text geocoding found nothing."""


class RouteUnavailable(NavigationError):
    """The routing provider returned no route."""


class StaleResponse(NavigationError):
    """A response arrived for a request that has since been superseded."""


class InvalidDistance(ValueError):
    """Distance is negative, NaN or infinite."""

# unit_converter.py
# Metre distances rendered as kilometre or mile strings.

import math

from .errors import InvalidDistance
from .models import UnitSystem
from .nav_config import METERS_PER_KILOMETER, METERS_PER_MILE


_DIVISORS = {
    UnitSystem.METRIC: METERS_PER_KILOMETER,
    UnitSystem.IMPERIAL: METERS_PER_MILE,
}

_LABELS = {
    UnitSystem.METRIC: "km",
    UnitSystem.IMPERIAL: "mi",
}


def unit_label(system: UnitSystem) -> str:
    return _LABELS[system]


def convert_distance(distance_m: float, system: UnitSystem) -> float:
    """
    Convert metres into kilometres or miles.

    Raises:
        InvalidDistance: distance_m is negative, NaN or infinite.
    """
    if math.isnan(distance_m) or math.isinf(distance_m) or distance_m < 0:
        raise InvalidDistance(f"Invalid distance: {distance_m!r}")
    return distance_m / _DIVISORS[system]


def format_distance(distance_m: float, system: UnitSystem) -> str:
    """
    Distance string with exactly two fractional digits.

    Example:
        format_distance(5000, UnitSystem.IMPERIAL) -> "3.11 mi"
    """
    return f"{convert_distance(distance_m, system):.2f} {unit_label(system)}"

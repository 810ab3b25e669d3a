# route_projector.py
# Viewport derivation: route bounds plus padding.

from typing import Optional

from .models import MapRect, Route

DEFAULT_PADDING_RATIO = 0.2


def project(bounds: MapRect, padding_ratio: float = DEFAULT_PADDING_RATIO) -> MapRect:
    """
    Grow a bounding rect so the whole route stays visible with a margin.

    The rect is scaled by (1 + padding_ratio) on both axes and the origin
    moves back by half the padding of the scaled size. With the default
    ratio: width' = 1.2w, x' = x - width'/10 (same for height and y).

    Args:
        bounds:        Route bounding rect in map points.
        padding_ratio: Fraction of the original size added to each axis.

    Returns:
        The padded viewport rect.
    """
    scale = 1.0 + padding_ratio
    width = bounds.width * scale
    height = bounds.height * scale
    return MapRect(
        x=bounds.x - width * padding_ratio / 2,
        y=bounds.y - height * padding_ratio / 2,
        width=width,
        height=height,
    )


def project_route(route: Route, padding_ratio: float = DEFAULT_PADDING_RATIO) -> Optional[MapRect]:
    """Viewport for a route, or None when the route has no geometry at all."""
    bounds = route.bounding_rect()
    if bounds is None:
        return None
    return project(bounds, padding_ratio)

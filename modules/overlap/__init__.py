from .core import (
    IntersectionPolygon,
    MarkerPolygon,
    intersect_pair,
    marker_polygon,
    pairwise_intersections,
)
from .resolver import MarkerSetResolver, MarkerSetResult, StaleMarkerSet

__all__ = [
    "IntersectionPolygon",
    "MarkerPolygon",
    "MarkerSetResolver",
    "MarkerSetResult",
    "StaleMarkerSet",
    "intersect_pair",
    "marker_polygon",
    "pairwise_intersections",
]

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Any, Dict, List, Sequence, Tuple

from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon, Polygon, mapping
from shapely.geometry.base import BaseGeometry

from core.exceptions import GeometryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerPolygon:
    """Single-ring reachability polygon owned by a marker."""
    marker_id: str
    ring: Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class IntersectionPolygon:
    """Overlap of two marker polygons, identified by the marker id pair."""
    marker_ids: Tuple[str, str]
    geometry: BaseGeometry

    @property
    def key(self) -> str:
        return f"intersection-{self.marker_ids[0]}-{self.marker_ids[1]}"

    def to_feature(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "geometry": mapping(self.geometry),
            "properties": {
                "key": self.key,
                "markers": list(self.marker_ids),
                "area": self.geometry.area,
            },
        }


def marker_polygon(marker_id: str, ring: Sequence[Sequence[float]]) -> MarkerPolygon:
    return MarkerPolygon(marker_id, tuple((float(pt[0]), float(pt[1])) for pt in ring))


def _ring_to_polygon(item: MarkerPolygon) -> Polygon:
    coords = list(item.ring)
    if coords and coords[0] != coords[-1]:
        coords.append(coords[0])
    if len(coords) < 4:
        raise GeometryError(f"ring of marker {item.marker_id!r} has fewer than 3 vertices", [item.marker_id])

    polygon = Polygon(coords)
    if not polygon.is_valid:
        # self-touching rings are repaired, anything else is rejected
        repaired = polygon.buffer(0)
        if isinstance(repaired, Polygon) and not repaired.is_empty:
            return repaired
        raise GeometryError(f"ring of marker {item.marker_id!r} is not a valid polygon", [item.marker_id])
    return polygon


def _polygonal_part(geometry: BaseGeometry) -> BaseGeometry:
    """
    Drop line/point debris from an intersection (shared edges, touching vertices).
    """
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry
    parts = [g for g in getattr(geometry, "geoms", []) if isinstance(g, Polygon) and not g.is_empty]
    if not parts:
        return Polygon()
    if len(parts) == 1:
        return parts[0]
    return MultiPolygon(parts)


def intersect_pair(a: MarkerPolygon, b: MarkerPolygon) -> BaseGeometry:
    """
    Planar intersection of two marker polygons; empty geometry when they do not overlap.

    Raises:
        GeometryError: either ring is malformed or GEOS fails.
    """
    poly_a = _ring_to_polygon(a)
    poly_b = _ring_to_polygon(b)
    try:
        result = poly_a.intersection(poly_b)
    except GEOSException as exc:
        raise GeometryError(f"intersection failed: {exc}", [a.marker_id, b.marker_id])
    return _polygonal_part(result)


def pairwise_intersections(polygons: Sequence[MarkerPolygon]) -> List[IntersectionPolygon]:
    """
    Intersect every unordered pair (i < j) of marker polygons.

    Pairs without an overlapping area produce nothing. A pair whose
    geometry cannot be processed is logged and omitted; the remaining
    pairs are still returned.
    """
    results: List[IntersectionPolygon] = []
    for a, b in combinations(polygons, 2):
        try:
            overlap = intersect_pair(a, b)
        except GeometryError as exc:
            logger.warning("Skipping pair %s/%s: %s", a.marker_id, b.marker_id, exc.message)
            continue
        if overlap.is_empty or overlap.area <= 0:
            continue
        results.append(IntersectionPolygon((a.marker_id, b.marker_id), overlap))
    return results

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from modules.isochrone import IsochroneService

from .core import IntersectionPolygon, MarkerPolygon, marker_polygon, pairwise_intersections
from .schemas import Marker

logger = logging.getLogger(__name__)


class StaleMarkerSet(Exception):
    """
    A newer marker set was submitted before this one finished resolving.
    """
    def __init__(self, generation: int, current: int):
        self.generation = generation
        self.current = current
        super().__init__(f"marker set generation {generation} superseded by {current}")


@dataclass
class MarkerSetResult:
    generation: int
    isochrones: List[Dict[str, Any]] = field(default_factory=list)
    intersections: List[IntersectionPolygon] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isochrones": {"type": "FeatureCollection", "features": self.isochrones},
            "intersections": {
                "type": "FeatureCollection",
                "features": [item.to_feature() for item in self.intersections],
            },
            "failed": self.failed,
        }


class MarkerSetResolver:
    """
    Fetches one isochrone per marker and computes their pairwise overlaps.

    The overlap pass only runs once every request for the marker set has
    settled. Markers whose request failed keep no polygon and are left out
    of the overlap pass. Each ``resolve`` call starts a new generation; a
    call that finishes after a newer one has started raises
    ``StaleMarkerSet`` and its results are dropped.
    """

    def __init__(self, service: IsochroneService):
        self.service = service
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def _fetch(self, marker: Marker) -> Dict[str, Any]:
        return await asyncio.to_thread(
            self.service.compute,
            marker.transport,
            [marker.location],
            [marker.range],
            marker.id,
        )

    async def resolve(self, markers: Sequence[Marker]) -> MarkerSetResult:
        self._generation += 1
        generation = self._generation

        outcomes = await asyncio.gather(
            *(self._fetch(marker) for marker in markers),
            return_exceptions=True,
        )

        if generation != self._generation:
            logger.info("Discarding stale marker set: generation %d, current %d", generation, self._generation)
            raise StaleMarkerSet(generation, self._generation)

        result = MarkerSetResult(generation=generation)
        polygons: List[MarkerPolygon] = []
        for marker, outcome in zip(markers, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning("Isochrone request failed for marker %s: %s", marker.id, outcome)
                result.failed.append(marker.id)
                continue

            features = outcome.get("features") or []
            if not features:
                logger.warning("Isochrone response for marker %s has no features", marker.id)
                result.failed.append(marker.id)
                continue

            feature = features[0]
            result.isochrones.append({
                "type": "Feature",
                "geometry": feature["geometry"],
                "properties": {
                    **feature["properties"],
                    "marker_id": marker.id,
                    "transport": marker.transport.value,
                },
            })
            polygons.append(marker_polygon(marker.id, feature["geometry"]["coordinates"][0]))

        result.intersections = pairwise_intersections(polygons)
        logger.info(
            "Marker set resolved: %d markers, %d failed, %d intersections",
            len(markers), len(result.failed), len(result.intersections),
        )
        return result

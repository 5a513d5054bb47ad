import logging
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from core.config import settings
from core.exceptions import IsochroneInputError, SynthesisError
from store import RequestCache

from .schemas import IsochroneRequest, TransportMode
from .synthesizer import PolygonSynthesizer

logger = logging.getLogger(__name__)

WORLD_BBOX = [-180, -90, 180, 90]


def clean_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Keep only the JSON-safe parts of pydantic error dicts (inputs may hold NaN).
    """
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in errors
    ]


class IsochroneService:
    """
    Resolves isochrone requests from the request cache or by fresh synthesis.

    Responses are GeoJSON FeatureCollection dicts. A cached response is
    returned unchanged, including its original ``metadata.timestamp``;
    callers must treat it as read-only.
    """

    def __init__(
        self,
        synthesizer: Optional[PolygonSynthesizer] = None,
        cache: Optional[RequestCache] = None,
        clock: Callable[[], float] = time.time,
        attribution: Optional[str] = None,
        engine: Optional[Dict[str, str]] = None,
    ):
        self.synthesizer = synthesizer or PolygonSynthesizer(
            vertices=settings.isochrone_polygon_vertices,
            noise_scale=settings.isochrone_noise_scale,
            km_per_degree=settings.isochrone_km_per_degree,
        )
        self.cache = cache if cache is not None else RequestCache(
            ttl_s=settings.isochrone_cache_ttl_s,
            max_entries=settings.isochrone_cache_max_entries,
            clock=clock,
        )
        self._clock = clock
        self.attribution = attribution or settings.isochrone_attribution
        self.engine = engine or {
            "version": settings.engine_version,
            "build_date": settings.engine_build_date,
            "graph_date": settings.engine_graph_date,
            "osm_date": settings.engine_osm_date,
        }

    @staticmethod
    def validate(
        transport: Any,
        locations: Any,
        ranges: Any,
        request_id: Optional[str] = None,
    ) -> Tuple[TransportMode, IsochroneRequest]:
        try:
            mode = TransportMode(transport)
        except ValueError:
            raise IsochroneInputError(
                f"Unsupported transport: {transport!r}",
                [{"loc": ["transport"], "msg": "unsupported transport", "type": "enum"}],
            )
        try:
            request = IsochroneRequest.model_validate(
                {"locations": locations, "range": ranges, "id": request_id}
            )
        except ValidationError as exc:
            raise IsochroneInputError("Invalid isochrone request", clean_validation_errors(exc.errors()))
        return mode, request

    def compute(
        self,
        transport: Any,
        locations: Sequence[Sequence[float]],
        ranges: Sequence[float],
        request_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Get the isochrone FeatureCollection for every (location, range) pair.

        Raises:
            IsochroneInputError: malformed input, nothing is synthesized or cached.
            SynthesisError: unexpected failure while generating polygons.
        """
        mode, request = self.validate(transport, locations, ranges, request_id)

        cache_key = self.cache.key(mode.value, request.locations, request.range)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug("Isochrone cache hit: %s", cache_key)
            return cached

        logger.info(
            "Synthesizing isochrones | Mode: %s | Locations: %d | Ranges: %s",
            mode.value, len(request.locations), request.range,
        )
        try:
            result = self._build_response(mode, request)
        except (ValueError, ArithmeticError) as exc:
            logger.error("Isochrone synthesis failed: %s", exc, exc_info=True)
            raise SynthesisError("Isochrone synthesis failed", str(exc))

        self.cache.put(cache_key, result)
        return result

    def driving_car(self, locations, ranges, request_id=None) -> Dict[str, Any]:
        return self.compute(TransportMode.DRIVING_CAR, locations, ranges, request_id)

    def cycling_regular(self, locations, ranges, request_id=None) -> Dict[str, Any]:
        return self.compute(TransportMode.CYCLING_REGULAR, locations, ranges, request_id)

    def foot_walking(self, locations, ranges, request_id=None) -> Dict[str, Any]:
        return self.compute(TransportMode.FOOT_WALKING, locations, ranges, request_id)

    def _build_response(self, mode: TransportMode, request: IsochroneRequest) -> Dict[str, Any]:
        features = []
        # location-major, range-minor
        for loc_index, location in enumerate(request.locations):
            for range_value in request.range:
                ring = self.synthesizer.synthesize(location, range_value)
                features.append({
                    "type": "Feature",
                    "geometry": {"type": "Polygon", "coordinates": [ring]},
                    "properties": {
                        "group_index": loc_index,
                        "value": range_value,
                        "center": list(location),
                    },
                })

        query: Dict[str, Any] = {
            "locations": [list(location) for location in request.locations],
            "range": list(request.range),
            "transport": mode.value,
        }
        metadata: Dict[str, Any] = {
            "attribution": self.attribution,
            "service": "isochrones",
            "timestamp": int(self._clock() * 1000),
            "query": query,
            "engine": dict(self.engine),
        }
        # An absent id is omitted rather than serialized as null
        if request.id is not None:
            query["id"] = request.id
            metadata["id"] = request.id

        return {
            "type": "FeatureCollection",
            "bbox": list(WORLD_BBOX),
            "features": features,
            "metadata": metadata,
        }

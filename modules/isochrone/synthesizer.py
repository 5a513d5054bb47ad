import logging
import math
import random
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

Ring = List[List[float]]

# cos(lat) below this (|lat| > ~89.94 deg) stretches longitudes without bound
MIN_LNG_SCALE = 1e-3


class PolygonSynthesizer:
    """
    Stand-in for a routing engine: builds a noisy N-gon around a center point.

    The radius in degrees is ``range_m / 1000 / km_per_degree`` (rough
    equirectangular conversion). Longitude offsets are divided by
    ``cos(lat)`` to partially correct for meridian convergence. Each vertex
    radius is scaled by an independent factor drawn uniformly from
    ``[1 - noise_scale, 1 + noise_scale]``.

    Pass a seeded ``random.Random`` for reproducible output.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        vertices: int = 12,
        noise_scale: float = 0.15,
        km_per_degree: float = 50.0,
    ):
        if vertices < 3:
            raise ValueError("a polygon needs at least 3 vertices")
        self.rng = rng or random.Random()
        self.vertices = vertices
        self.noise_scale = noise_scale
        self.km_per_degree = km_per_degree

    def synthesize(self, center: Sequence[float], range_m: float) -> Ring:
        """
        Returns a closed ring ([[lng, lat], ...], first == last) with
        ``vertices + 1`` coordinates.
        """
        lng, lat = float(center[0]), float(center[1])
        if not (math.isfinite(lng) and math.isfinite(lat) and math.isfinite(range_m)):
            raise ValueError(f"non-finite synthesis input: center={center!r} range={range_m!r}")

        radius_deg = range_m / 1000 / self.km_per_degree
        lng_scale = math.cos(math.radians(lat))
        if abs(lng_scale) < MIN_LNG_SCALE:
            raise ValueError(f"latitude {lat} too close to a pole")

        points: Ring = []
        for i in range(self.vertices):
            angle = (i / self.vertices) * math.pi * 2
            noise = (self.rng.random() - 0.5) * 2 * self.noise_scale
            noisy_radius = radius_deg * (1 + noise)
            x = lng + noisy_radius * math.cos(angle) / lng_scale
            y = lat + noisy_radius * math.sin(angle)
            if not (math.isfinite(x) and math.isfinite(y)):
                raise ValueError(f"degenerate vertex at lat={lat}")
            points.append([x, y])

        # Close the ring
        points.append(list(points[0]))
        return points

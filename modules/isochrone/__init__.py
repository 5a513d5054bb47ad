from .core import IsochroneService, WORLD_BBOX
from .schemas import IsochroneRequest, IsochroneResponse, TransportMode
from .synthesizer import PolygonSynthesizer

__all__ = [
    "IsochroneRequest",
    "IsochroneResponse",
    "IsochroneService",
    "PolygonSynthesizer",
    "TransportMode",
    "WORLD_BBOX",
]

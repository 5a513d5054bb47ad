import math
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator

# JSON numbers only: strings and booleans are not coerced
Number = Union[StrictInt, StrictFloat]


def check_location(lng, lat) -> None:
    """
    Raise ValueError unless (lng, lat) is a finite WGS84 point off the poles.
    """
    if not (math.isfinite(lng) and math.isfinite(lat)):
        raise ValueError("location must contain finite numbers")
    # longitude spacing is undefined at the poles
    if not (-180 <= lng <= 180 and -90 < lat < 90):
        raise ValueError("location out of WGS84 bounds")


class TransportMode(str, Enum):
    DRIVING_CAR = "driving-car"
    CYCLING_REGULAR = "cycling-regular"
    FOOT_WALKING = "foot-walking"


class IsochroneRequest(BaseModel):
    """
    Isochrone request body, one per transport endpoint.
    Coordinates are WGS84 [lng, lat]; range values are meters.
    """

    model_config = ConfigDict(extra="ignore")

    locations: List[List[Number]] = Field(
        ...,
        min_length=1,
        description="Center points ([[lng, lat], ...])",
    )
    range: List[Number] = Field(
        ...,
        min_length=1,
        description="Reachability ranges in meters, each > 0",
    )
    id: Optional[str] = Field(None, description="Caller supplied request id")

    @field_validator("locations")
    @classmethod
    def _validate_locations(cls, value):
        normalized = []
        for item in value:
            if len(item) != 2:
                raise ValueError("location must be a [lng, lat] pair")
            lng, lat = item
            check_location(lng, lat)
            normalized.append([lng, lat])
        return normalized

    @field_validator("range")
    @classmethod
    def _validate_range(cls, value):
        for item in value:
            if not math.isfinite(item) or item <= 0:
                raise ValueError("range values must be finite and > 0")
        return value


class FeatureProperties(BaseModel):
    group_index: int
    value: Number
    center: List[Number]


class PolygonGeometry(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]


class IsochroneFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: PolygonGeometry
    properties: FeatureProperties


class EngineInfo(BaseModel):
    version: str
    build_date: str
    graph_date: str
    osm_date: str


class QueryMetadata(BaseModel):
    id: Optional[str] = None
    locations: List[List[Number]]
    range: List[Number]
    transport: TransportMode


class Metadata(BaseModel):
    id: Optional[str] = None
    attribution: str
    service: str = "isochrones"
    timestamp: int = Field(..., description="Generation time, epoch milliseconds")
    query: QueryMetadata
    engine: EngineInfo


class IsochroneResponse(BaseModel):
    """
    GeoJSON FeatureCollection with request metadata
    """
    type: Literal["FeatureCollection"] = "FeatureCollection"
    bbox: List[float]
    features: List[IsochroneFeature] = Field(default_factory=list)
    metadata: Metadata

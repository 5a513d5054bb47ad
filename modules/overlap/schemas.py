import math
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field, field_validator

from modules.isochrone.schemas import Number, TransportMode, check_location


class Marker(BaseModel):
    """
    A map marker as configured by the UI: one location, one mode, one range.
    """
    id: str = Field(..., min_length=1, description="Caller assigned marker id")
    location: List[Number] = Field(..., min_length=2, max_length=2, description="[lng, lat]")
    transport: TransportMode = Field(..., description="Transportation Mode")
    range: Number = Field(..., description="Range in meters, > 0")

    @field_validator("location")
    @classmethod
    def _validate_location(cls, value):
        lng, lat = value
        check_location(lng, lat)
        return value

    @field_validator("range")
    @classmethod
    def _validate_range(cls, value):
        if not math.isfinite(value) or value <= 0:
            raise ValueError("range must be finite and > 0")
        return value


class OverlapRequest(BaseModel):
    markers: List[Marker] = Field(default_factory=list, description="Current marker set")

    @field_validator("markers")
    @classmethod
    def _validate_unique_ids(cls, value):
        ids = [marker.id for marker in value]
        if len(ids) != len(set(ids)):
            raise ValueError("marker ids must be unique")
        return value


class FeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[Dict[str, Any]] = Field(default_factory=list)


class OverlapResponse(BaseModel):
    isochrones: FeatureCollection
    intersections: FeatureCollection
    failed: List[str] = Field(default_factory=list, description="Markers rendered without a polygon")

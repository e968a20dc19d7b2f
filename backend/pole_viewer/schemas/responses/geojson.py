from typing import Any, Literal
from pydantic import BaseModel, Field

COORDINATES_TYPE = tuple[float, float]

# ----- Geometry Types -----
class Point(BaseModel):
    type: Literal["Point"]
    # [longitude, latitude] per RFC 7946
    coordinates: COORDINATES_TYPE

# ----- Core GeoJSON Objects -----
class Feature(BaseModel):
    type: Literal["Feature"]
    geometry: Point | None = None
    properties: dict[str, Any] | None = Field(default=None)
    id: str | int | None = None

class FeatureCollection(BaseModel):
    type: Literal["FeatureCollection"]
    features: list[Feature]
    bbox: list[float] | None = None

class PoleFeatureCollection(FeatureCollection):
    total: int
    page: int
    limit: int

from pole_viewer.core.errors import InvalidBoundsError
from pydantic import BaseModel, Field, ValidationError, model_validator
from shapely.geometry import Polygon, box


class BoundingBox(BaseModel):
    """
    Geographic bounding box in WGS 84 degrees.

    Bounds given in the wrong order are swapped, never rejected, so that
    (south, north) and (north, south) describe the same box.
    """
    south: float = Field(..., allow_inf_nan=False, description="Minimum latitude")
    north: float = Field(..., allow_inf_nan=False, description="Maximum latitude")
    west: float = Field(..., allow_inf_nan=False, description="Minimum longitude")
    east: float = Field(..., allow_inf_nan=False, description="Maximum longitude")

    @model_validator(mode="after")
    def normalize_order(self):
        if self.south > self.north:
            self.south, self.north = self.north, self.south
        if self.west > self.east:
            self.west, self.east = self.east, self.west
        return self

    @classmethod
    def from_bounds(cls, south, north, west, east) -> 'BoundingBox':
        try:
            return cls(south=south, north=north, west=west, east=east)
        except ValidationError as e:
            raise InvalidBoundsError(str(e)) from e

    @classmethod
    def from_bbox_string(cls, bbox: str) -> 'BoundingBox':
        """Parse 'west,south,east,north'."""
        parts = [part.strip() for part in bbox.split(',')]
        if len(parts) != 4 or any(part == '' for part in parts):
            raise InvalidBoundsError(f'bbox must be west,south,east,north: {bbox!r}')
        west, south, east, north = parts
        return cls.from_bounds(south=south, north=north, west=west, east=east)

    @property
    def polygon(self) -> Polygon:
        return box(self.west, self.south, self.east, self.north)

    @property
    def area(self) -> float:
        return self.polygon.area

    def as_list(self) -> list[float]:
        return [self.west, self.south, self.east, self.north]

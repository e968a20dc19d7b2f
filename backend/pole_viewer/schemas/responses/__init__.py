from pole_viewer.schemas.responses.geojson import Feature, FeatureCollection, Point, PoleFeatureCollection
from pole_viewer.schemas.responses.pole import PolePage, PoleRecord

__all__ = ['Feature', 'FeatureCollection', 'Point', 'PoleFeatureCollection', 'PolePage', 'PoleRecord']

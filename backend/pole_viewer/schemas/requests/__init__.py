from pole_viewer.schemas.requests.bounding_box import BoundingBox
from pole_viewer.schemas.requests.page_request import PageRequest

__all__ = ['BoundingBox', 'PageRequest']

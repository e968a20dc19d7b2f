from pole_viewer.client.compat import PagePayload, PayloadShapeError, normalize_page_payload
from pole_viewer.client.loader import Generation, LoadResult, LoadStatus, PoleLoader
from pole_viewer.client.transport import HttpPageFetcher, PoleApiError

__all__ = [
    'Generation', 'HttpPageFetcher', 'LoadResult', 'LoadStatus', 'PagePayload',
    'PayloadShapeError', 'PoleApiError', 'PoleLoader', 'normalize_page_payload',
]

from pole_viewer.core.errors import InvalidBoundsError, InvalidPaginationError
from pole_viewer.core.settings import Settings
from pole_viewer.schemas import requests
from fastapi import Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncIterator


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    async with request.app.state.session_factory() as session:
        yield session


def get_bounding_box(
    bbox: str | None = Query(None, description='west,south,east,north'),
    min_lat: str | None = Query(None, alias='minLat'),
    max_lat: str | None = Query(None, alias='maxLat'),
    min_lng: str | None = Query(None, alias='minLng'),
    max_lng: str | None = Query(None, alias='maxLng'),
) -> requests.BoundingBox:
    # Raw strings so that malformed input becomes 'invalid bounds' rather than a 422
    if bbox is not None:
        return requests.BoundingBox.from_bbox_string(bbox)
    if any(value is None for value in (min_lat, max_lat, min_lng, max_lng)):
        raise InvalidBoundsError('missing bound parameter')
    return requests.BoundingBox.from_bounds(south=min_lat, north=max_lat, west=min_lng, east=max_lng)


def _parse_int(name: str, value: str | None) -> int | None:
    if value is None or value.strip() == '':
        return None
    try:
        return int(value)
    except ValueError:
        raise InvalidPaginationError(f'{name} must be an integer: {value!r}')


def get_page_request(page: str | None = None, limit: str | None = None) -> requests.PageRequest:
    return requests.PageRequest.clamped(
        page=_parse_int('page', page),
        limit=_parse_int('limit', limit),
        default_limit=Settings.DEFAULT_PAGE_LIMIT,
        min_limit=Settings.MIN_PAGE_LIMIT,
        max_limit=Settings.MAX_PAGE_LIMIT,
    )

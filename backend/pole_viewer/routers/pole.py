from pole_viewer.core.deps import get_bounding_box, get_db, get_page_request
from pole_viewer.core.settings import Settings
from pole_viewer.schemas import requests, responses
from pole_viewer.services.poles import search_poles
from fastapi import APIRouter, Depends, Response
from shapely.geometry import Point, mapping
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any


api_router = APIRouter(prefix='')


def _set_cache_headers(response: Response) -> None:
    response.headers['Cache-Control'] = (
        f's-maxage={Settings.CACHE_S_MAXAGE}, stale-while-revalidate={Settings.CACHE_STALE_WHILE_REVALIDATE}'
    )


def _get_pole_properties(record: responses.PoleRecord) -> dict[str, Any]:
    return record.model_dump(by_alias=True, exclude={'latitude', 'longitude'})


@api_router.get('')
async def get_poles(
    response: Response,
    bbox: requests.BoundingBox = Depends(get_bounding_box),
    page_request: requests.PageRequest = Depends(get_page_request),
    db: AsyncSession = Depends(get_db),
) -> responses.PolePage:
    page = await search_poles(db, bbox, page_request)
    _set_cache_headers(response)
    return page


@api_router.get('/geojson')
async def get_poles_geojson(
    response: Response,
    bbox: requests.BoundingBox = Depends(get_bounding_box),
    page_request: requests.PageRequest = Depends(get_page_request),
    db: AsyncSession = Depends(get_db),
) -> responses.PoleFeatureCollection:
    page = await search_poles(db, bbox, page_request)

    features = []
    for record in page.data:
        features.append(responses.Feature(
            type='Feature',
            id=record.id,
            geometry=mapping(Point(record.longitude, record.latitude)),
            properties=_get_pole_properties(record),
        ))

    _set_cache_headers(response)
    return responses.PoleFeatureCollection(
        type='FeatureCollection',
        features=features,
        bbox=bbox.as_list(),
        total=page.total,
        page=page.page,
        limit=page.limit,
    )

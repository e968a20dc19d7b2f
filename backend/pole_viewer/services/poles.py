import asyncio
import logging
from collections import defaultdict

from pole_viewer.core.constants import QUERY_CANCELED_SQLSTATE
from pole_viewer.core.errors import AreaTooLargeError, QueryFailedError, QueryTimeoutError
from pole_viewer.core.models import Pole, PoleCompany
from pole_viewer.core.settings import Settings
from pole_viewer.schemas import requests, responses
from sqlalchemy import and_, func, select, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


log = logging.getLogger(__name__)


def ensure_area_within_limit(bbox: requests.BoundingBox) -> None:
    if bbox.area > Settings.MAX_BBOX_AREA:
        raise AreaTooLargeError(f'bbox area {bbox.area:.4f} exceeds {Settings.MAX_BBOX_AREA}')


def is_statement_timeout(exc: DBAPIError) -> bool:
    # asyncpg exposes the SQLSTATE as `sqlstate`, psycopg as `pgcode`
    orig = exc.orig
    code = getattr(orig, 'sqlstate', None) or getattr(orig, 'pgcode', None)
    return code == QUERY_CANCELED_SQLSTATE


def _within(bbox: requests.BoundingBox):
    return and_(
        Pole.latitude.between(bbox.south, bbox.north),
        Pole.longitude.between(bbox.west, bbox.east),
    )


async def _fetch_companies(db: AsyncSession, pole_ids: list[int]) -> dict[int, list[str]]:
    if not pole_ids:
        return {}
    stmt = (
        select(PoleCompany.pole_id, PoleCompany.company)
        .where(PoleCompany.pole_id.in_(pole_ids))
        .distinct()
        .order_by(PoleCompany.pole_id, PoleCompany.company)
    )
    companies: dict[int, list[str]] = defaultdict(list)
    for pole_id, company in await db.execute(stmt):
        companies[pole_id].append(company)
    return companies


def _to_record(pole: Pole, companies: list[str]) -> responses.PoleRecord:
    return responses.PoleRecord(
        id=pole.id,
        municipality=pole.municipality,
        neighborhood=pole.neighborhood,
        street=pole.street,
        material=pole.material,
        height=pole.height,
        mechanical_tension=pole.mechanical_tension,
        latitude=pole.latitude,
        longitude=pole.longitude,
        companies=companies,
        company_count=len(companies),
    )


async def _run_search(db: AsyncSession, bbox: requests.BoundingBox, page_request: requests.PageRequest) -> responses.PolePage:
    async with db.begin():
        if db.bind.dialect.name == 'postgresql':
            # SET does not accept bind parameters; the value is an int from Settings
            await db.execute(text(f'SET LOCAL statement_timeout = {int(Settings.STATEMENT_TIMEOUT_MS)}'))

        within = _within(bbox)
        total = await db.scalar(select(func.count()).select_from(Pole).where(within))

        poles: list[Pole] = []
        # A page past the end is empty; skipping it also keeps huge offsets away from the driver
        if page_request.offset < (total or 0):
            stmt = (
                select(Pole)
                .where(within)
                .order_by(Pole.id)
                .limit(page_request.limit)
                .offset(page_request.offset)
            )
            poles = list((await db.execute(stmt)).scalars())
        companies = await _fetch_companies(db, [pole.id for pole in poles])

    return responses.PolePage(
        total=total or 0,
        page=page_request.page,
        limit=page_request.limit,
        data=[_to_record(pole, companies.get(pole.id, [])) for pole in poles],
    )


async def search_poles(db: AsyncSession, bbox: requests.BoundingBox, page_request: requests.PageRequest) -> responses.PolePage:
    """
    Return one page of the poles inside `bbox`, ordered by id.

    `total` counts every pole in the box, independently of the page. Raises
    AreaTooLargeError before touching the database, QueryTimeoutError when
    either the server statement timeout or QUERY_TIMEOUT_SECONDS is hit, and
    QueryFailedError for any other failure while querying.
    """
    ensure_area_within_limit(bbox)

    try:
        return await asyncio.wait_for(
            _run_search(db, bbox, page_request),
            timeout=Settings.QUERY_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError as e:
        log.warning('Pole search timed out after %ss for bbox=%s', Settings.QUERY_TIMEOUT_SECONDS, bbox.as_list())
        raise QueryTimeoutError() from e
    except DBAPIError as e:
        if is_statement_timeout(e):
            log.warning('Pole search hit the statement timeout for bbox=%s', bbox.as_list())
            raise QueryTimeoutError(str(e.orig)) from e
        log.exception('Pole search failed for bbox=%s', bbox.as_list())
        raise QueryFailedError(str(e.orig)) from e
    except SQLAlchemyError as e:
        log.exception('Pole search failed for bbox=%s', bbox.as_list())
        raise QueryFailedError(str(e)) from e
    except Exception as e:
        # Driver errors SQLAlchemy does not wrap, e.g. ConnectionRefusedError from asyncpg
        log.exception('Pole search failed for bbox=%s', bbox.as_list())
        raise QueryFailedError(str(e)) from e

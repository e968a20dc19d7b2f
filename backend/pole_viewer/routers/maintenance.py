import logging
import os
from pole_viewer.core.deps import get_db
from pole_viewer.core.models import Pole, PoleCompany
from pole_viewer.core.settings import Settings
from pole_viewer.parsers import poles as pole_parser
from pole_viewer.utils import batched
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession


api_router = APIRouter(prefix='')

log = logging.getLogger(__name__)

BATCH_SIZE = 5_000


async def _insert_all(db: AsyncSession, iterable) -> int:
    count = 0
    for batch in batched(iterable, BATCH_SIZE):
        db.add_all(batch)
        await db.flush()
        db.expunge_all()
        count += len(batch)
    return count


@api_router.post('/load/poles')
async def load_poles(db: AsyncSession = Depends(get_db)):
    for path in (Settings.POLES_CSV_PATH, Settings.POLE_COMPANIES_CSV_PATH):
        if not os.path.isfile(path):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f'Export not found: {path}')

    counters = {}
    skipped: list[str] = []
    pole_ids: set[int] = set()

    def tracked_poles():
        for pole in pole_parser.read_poles(Settings.POLES_CSV_PATH, skipped):
            pole_ids.add(pole.id)
            yield pole

    # Replace everything in one transaction so readers never see a half-loaded table
    async with db.begin():
        await db.execute(delete(PoleCompany))
        await db.execute(delete(Pole))
        counters['pole'] = await _insert_all(db, tracked_poles())
        counters['pole_company'] = await _insert_all(db, pole_parser.read_pole_companies(Settings.POLE_COMPANIES_CSV_PATH, pole_ids))

    counters['skipped'] = len(skipped)
    log.info('Loaded poles: %s', counters)
    return counters

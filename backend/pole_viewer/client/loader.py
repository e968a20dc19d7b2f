import asyncio
import enum
import logging
from dataclasses import dataclass, field
from pole_viewer.client.compat import PagePayload, PayloadShapeError, normalize_page_payload
from pole_viewer.client.transport import PoleApiError
from pole_viewer.schemas.requests import BoundingBox
from pole_viewer.schemas.responses import PoleRecord
from typing import Any, Awaitable, Callable


log = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 500
DEFAULT_PAGE_DELAY = 0.3

FetchPage = Callable[[BoundingBox, int, int], Awaitable[Any]]
RenderPage = Callable[[list[PoleRecord]], None]
ReportStatus = Callable[[str], None]


class LoadStatus(enum.Enum):
    COMPLETED = 'completed'
    SUPERSEDED = 'superseded'
    FAILED = 'failed'


@dataclass
class LoadResult:
    status: LoadStatus
    received: int = 0
    total: int | None = None
    pages: int = 0
    error: str | None = None


class Generation:
    """
    Monotonic epoch counter.

    `advance()` hands out a token for a new operation; `is_current(token)`
    tells that operation whether it is still the latest one.
    """

    def __init__(self):
        self._epoch = 0

    @property
    def epoch(self) -> int:
        return self._epoch

    def advance(self) -> int:
        self._epoch += 1
        return self._epoch

    def is_current(self, token: int) -> bool:
        return token == self._epoch


@dataclass
class PoleLoader:
    """
    Drive paginated pole requests for one map view at a time.

    Each `load(bbox)` requests pages 1, 2, ... until the reported total has
    been received or a page comes back empty, handing each page to
    `on_page`. Starting a new load supersedes the running one: the old loop
    checks its generation token after every await and stops without
    rendering anything further. Any exception from `fetch_page` or an
    unreadable payload stops the loop with an error status and leaves
    already rendered pages alone.
    """
    fetch_page: FetchPage
    on_page: RenderPage
    on_status: ReportStatus | None = None
    limit: int = DEFAULT_PAGE_LIMIT
    page_delay: float = DEFAULT_PAGE_DELAY
    generation: Generation = field(default_factory=Generation)

    def _report(self, token: int, message: str) -> None:
        if self.on_status is not None and self.generation.is_current(token):
            self.on_status(message)

    def cancel(self) -> None:
        """Supersede the running load without starting a new one."""
        self.generation.advance()

    async def load(self, bbox: BoundingBox) -> LoadResult:
        token = self.generation.advance()
        received = 0
        total: int | None = None
        page = 1

        self._report(token, 'Loading poles...')
        while True:
            try:
                payload = await self.fetch_page(bbox, page, self.limit)
                if not self.generation.is_current(token):
                    log.debug('Discarding page %s of superseded load %s', page, token)
                    return LoadResult(LoadStatus.SUPERSEDED, received, total, page - 1)
                normalized: PagePayload = normalize_page_payload(payload)
            except Exception as e:
                if not self.generation.is_current(token):
                    return LoadResult(LoadStatus.SUPERSEDED, received, total, page - 1)
                if isinstance(e, (PoleApiError, PayloadShapeError, OSError)):
                    log.warning('Pole load %s failed on page %s: %s', token, page, e)
                else:
                    # A fetch_page outside HttpPageFetcher raised something unexpected
                    log.exception('Pole load %s failed on page %s', token, page)
                self._report(token, f'Error loading poles: {e}')
                return LoadResult(LoadStatus.FAILED, received, total, page - 1, error=str(e))

            if total is None:
                total = normalized.total

            if not normalized.items:
                break

            self.on_page(normalized.items)
            received += len(normalized.items)

            if received >= total:
                break

            percentage = received / total * 100 if total else 100.0
            self._report(token, f'Loading poles... {received}/{total} ({percentage:.1f}%)')

            await asyncio.sleep(self.page_delay)
            if not self.generation.is_current(token):
                return LoadResult(LoadStatus.SUPERSEDED, received, total, page)
            page += 1

        self._report(token, f'{received} poles loaded')
        return LoadResult(LoadStatus.COMPLETED, received, total, page)

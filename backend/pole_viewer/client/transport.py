import asyncio
import logging
import requests
from pole_viewer.schemas.requests import BoundingBox
from typing import Any


log = logging.getLogger(__name__)


class PoleApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f'{status_code}: {message}')
        self.status_code = status_code
        self.message = message


class HttpPageFetcher:
    """
    Fetch one page of `GET {base_url}/api/poles`.

    requests is blocking, so each call runs in a worker thread and the
    caller's event loop keeps running while the page is in flight.
    """

    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: float = 30.0):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def params(self, bbox: BoundingBox, page: int, limit: int) -> dict[str, str]:
        return {
            'bbox': ','.join(repr(value) for value in bbox.as_list()),
            'page': str(page),
            'limit': str(limit),
        }

    def get(self, bbox: BoundingBox, page: int, limit: int) -> Any:
        url = f'{self.base_url}/api/poles'
        response = self.session.get(url, params=self.params(bbox, page, limit), timeout=self.timeout)
        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get('error', response.reason) if isinstance(body, dict) else response.reason
            raise PoleApiError(response.status_code, message)
        return response.json()

    async def __call__(self, bbox: BoundingBox, page: int, limit: int) -> Any:
        return await asyncio.to_thread(self.get, bbox, page, limit)

    def close(self) -> None:
        self.session.close()

import logging
import time
import uuid
from contextlib import asynccontextmanager

from pole_viewer.core.database import create_engine_from_settings, create_session_factory
from pole_viewer.core.errors import PoleQueryError, QueryFailedError
from pole_viewer.core.models import Base
from pole_viewer.core.settings import Settings
from pole_viewer.routers import (
    maintenance as maintenance_router,
    pole as pole_router,
)
from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse


log = logging.getLogger('pole_viewer.api')
if not logging.getLogger().handlers:
    logging.basicConfig(level=Settings.LOG_LEVEL.upper(), format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    async_engine = create_engine_from_settings()
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.engine = async_engine
    app.state.session_factory = create_session_factory(async_engine)
    log.info('Connected to %s', async_engine.url.render_as_string(hide_password=True))
    yield
    await async_engine.dispose()


async def log_requests(request: Request, call_next):
    req_id = request.headers.get('X-Request-ID', str(uuid.uuid4()))
    start = time.perf_counter()
    response = await call_next(request)
    dur = (time.perf_counter() - start) * 1000
    log.info('%s %s id=%s -> %s in %.1f ms', request.method, request.url.path, req_id, response.status_code, dur)
    response.headers['X-Request-ID'] = req_id
    return response


async def handle_pole_query_error(request: Request, exc: PoleQueryError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        log.error('%s %s failed: %s: %s', request.method, request.url.path, exc.public_message, exc.detail)
    body = {'error': exc.public_message}
    if Settings.DEBUG and exc.detail:
        body['detail'] = exc.detail
    return JSONResponse(body, status_code=exc.status_code)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    log.error('%s %s failed unexpectedly', request.method, request.url.path, exc_info=exc)
    body = {'error': QueryFailedError.public_message}
    if Settings.DEBUG:
        body['detail'] = str(exc)
    return JSONResponse(body, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def internal_only(request: Request):
    client_ip = request.client.host if request.client else ''

    if client_ip.startswith("172.18."):
        return

    if client_ip in ("127.0.0.1", "localhost"):
        return

    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def create_app() -> FastAPI:
    app = FastAPI(title='Pole map viewer', lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=Settings.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.middleware('http')(log_requests)
    app.add_exception_handler(PoleQueryError, handle_pole_query_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    @app.get('/health')
    async def health():
        return {'status': 'ok'}

    app.include_router(pole_router.api_router, prefix='/api/poles', tags=['pole'])
    app.include_router(maintenance_router.api_router, prefix='/maintenance', tags=['maintenance'], dependencies=[Depends(internal_only)])

    return app


app = create_app()

"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.um_common.database import check_connection, engine
from src.um_common.errors import AppError, InternalError
from src.um_common.response import ApiResponse, debug_error_response, error_response
from src.um_gateway.api.router import router as auth_router
from src.um_gateway.middleware.request_log import RequestLogMiddleware, get_request_id
from src.um_permission.api.router import router as permission_router
from src.um_user.api.router import router as user_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB connection. Shutdown: dispose."""
    await check_connection()
    logger.info("Database reachable; %s ready", settings.APP_NAME)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _error_body(request: Request, exc: AppError) -> ApiResponse:
    # Exception chain + stack trace only leave the process in DEBUG mode
    if settings.DEBUG:
        resp = debug_error_response(exc.code, exc.message, exc)
    else:
        resp = error_response(exc.code, exc.message)
    resp.request_id = get_request_id(request)
    return resp


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s: %s", type(exc).__name__, exc.message, exc_info=exc)
    return JSONResponse(
        status_code=exc.http_status,
        content=_error_body(request, exc).to_payload(),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    wrapper = InternalError()
    wrapper.__cause__ = exc
    return JSONResponse(
        status_code=wrapper.http_status,
        content=_error_body(request, wrapper).to_payload(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(user_router, prefix="/api/v1")
app.include_router(permission_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from pulse_chat.api.middleware.correlation_id import CorrelationIdMiddleware
from pulse_chat.api.middleware.metrics import RequestTimingMiddleware
from pulse_chat.api.v1.routers import health, messages, users, ws
from pulse_chat.application.exceptions import AppError
from pulse_chat.config import settings
from pulse_chat.infrastructure.db.session import engine
from pulse_chat.infrastructure.ws.dispatcher import DeliveryDispatcher
from pulse_chat.infrastructure.ws.lifecycle import SessionLifecycle
from pulse_chat.infrastructure.ws.registry import PresenceRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    Path(settings.MEDIA_ROOT).mkdir(parents=True, exist_ok=True)
    logger.info(
        "Realtime heartbeat interval=%.0fs timeout=%.0fs",
        settings.WS_HEARTBEAT_INTERVAL,
        settings.WS_HEARTBEAT_TIMEOUT,
    )

    yield

    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Pulse Chat",
        version="0.1.0",
        lifespan=lifespan,
    )

    # One registry per process; the lifecycle manager and dispatcher share it.
    registry = PresenceRegistry()
    app.state.registry = registry
    app.state.lifecycle = SessionLifecycle(registry)
    app.state.dispatcher = DeliveryDispatcher(registry)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(messages.router)
    app.include_router(ws.router)
    app.mount(
        settings.MEDIA_URL,
        StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False),
        name="media",
    )

    return app


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(_req: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s: %s", type(exc).__name__, exc.detail, exc_info=exc.__cause__)
        return _error(exc.status_code, exc.detail)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_req: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _validation(_req: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ())[1:])
        detail = first.get("msg", "Invalid request")
        return _error(400, f"{field}: {detail}" if field else detail)

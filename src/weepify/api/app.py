"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from weepify.api.cry_logs import router as cry_logs_router
from weepify.app_logging import configure_logging
from weepify.config import parse_cors_origins
from weepify.containers import AppContainer
from weepify.domain.errors import (
    CryLogNotFoundError,
    CryLogValidationError,
    StoreError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = app.state.container.settings
        logger.info(
            "Weepify API starting: environment=%s timezone=%s",
            settings.environment,
            settings.timezone,
        )
        yield
        logger.info("Weepify API stopped")

    app = FastAPI(title="Weepify", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_cors_origins(container.settings.cors_allowed_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(cry_logs_router)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        logger.info(
            "%s %s -> %s", request.method, request.url.path, response.status_code
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": _error_code(exc.status_code), "message": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(CryLogValidationError)
    async def handle_validation_error(
        request: Request, exc: CryLogValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": exc.code, "message": exc.message},
        )

    @app.exception_handler(CryLogNotFoundError)
    async def handle_not_found(
        request: Request, exc: CryLogNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "not_found", "message": "Crying session not found"},
        )

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
        logger.error(
            "Store failure on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_store_error_content(container, exc),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def index() -> dict[str, object]:
        """Describe the available endpoints."""
        return {
            "name": "Weepify API",
            "endpoints": {
                "GET /api/crylogs": "List crying sessions",
                "POST /api/crylogs": "Log a new crying session",
                "GET /api/crylogs/stats": "Crying statistics",
                "GET /api/crylogs/date/{day}": "Sessions on a day",
                "GET /api/crylogs/{log_id}": "Get a session",
                "PUT /api/crylogs/{log_id}": "Update a session",
                "DELETE /api/crylogs/{log_id}": "Delete a session",
            },
        }

    return app


def _store_error_content(container: AppContainer, exc: StoreError) -> dict[str, str]:
    """Return a generic failure body, with debug detail in local runs."""
    content = {
        "error": "store_failure",
        "message": "Something went wrong on our end, please try again.",
    }
    if container.settings.environment == "local":
        content["debug"] = f"{type(exc).__name__}: {exc}"
    return content


def _error_code(status_code: int) -> str:
    """Return a snake_case code such as ``unauthorized`` for an HTTP status."""
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        return "http_error"
    return phrase.lower().replace(" ", "_").replace("-", "_")

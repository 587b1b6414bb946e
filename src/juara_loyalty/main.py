"""FastAPI application entrypoint for the Martabak Juara loyalty service."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from . import __version__
from .api.v1.router import api_router
from .core.errors import UpstreamServiceError
from .core.lifecycle import register_lifecycle
from .core.logging import configure_logging

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE = "Database sedang tidak tersedia, silakan coba lagi."


def register_error_handlers(app: FastAPI) -> None:
    """Report upstream failures as 502 instead of an unhandled 500."""

    @app.exception_handler(UpstreamServiceError)
    async def upstream_failure(request: Request, exc: UpstreamServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(OperationalError)
    async def database_unavailable(request: Request, exc: OperationalError) -> JSONResponse:
        logger.error("database operation failed on %s %s: %s", request.method, request.url.path, exc.orig)
        return await upstream_failure(request, UpstreamServiceError(DATABASE_UNAVAILABLE))


def create_app(*, create_tables: bool = True) -> FastAPI:
    """Instantiate and configure the FastAPI application."""
    configure_logging()
    app = FastAPI(title="Martabak Juara Loyalty API", version=__version__)
    app.include_router(api_router, prefix="/api/v1")
    register_error_handlers(app)
    register_lifecycle(app, create_tables=create_tables)
    return app


app = create_app()

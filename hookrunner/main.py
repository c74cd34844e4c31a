"""FastAPI application with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from hookrunner.config import settings
from hookrunner.dependencies import get_config_store
from hookrunner.routers import hooks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log the configuration the server starts dispatching against."""
    logger = structlog.get_logger()
    store = get_config_store()
    logger.info(
        "dispatcher_ready",
        config_file=str(store.path),
        repositories=[entry.name for entry in store.current.repositories],
    )
    yield
    logger.info("dispatcher_stopped")


app = FastAPI(
    title=settings.app_name,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(hooks.router)

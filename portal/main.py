import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.api.errors import register_exception_handlers
from portal.api.v1.api import api_router
from portal.core.config import Settings, get_settings
from portal.services.notifier import RequestNotifier, build_notifier
from portal.storage import PortalStorage, build_storage


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[PortalStorage] = None,
    notifier: Optional[RequestNotifier] = None,
) -> FastAPI:
    """
    Build the application.

    Anything not passed in is built from the settings: the storage backing is
    chosen here, once, and shared by every request handler.

    Run with: uvicorn portal.main:create_app --factory
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    if storage is None:
        storage = build_storage(settings)
    if notifier is None:
        notifier = build_notifier(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.storage.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.notifier = notifier

    # Set up CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API routes
    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from daybook import __version__
from daybook.api.router import api_router
from daybook.core.config import AppSettings, get_settings
from daybook.core.database import Database
from daybook.core.errors import StorageUnavailableError
from daybook.core.migrations import migrate_database
from daybook.integrations.storage import MediaBlobStorage


logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    """Ensure application logs propagate with the requested verbosity."""
    level = getattr(logging, level_name.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        )
    root_logger.setLevel(level)


async def _storage_unavailable_handler(request: Request, exc: StorageUnavailableError) -> JSONResponse:
    logger.warning("Storage unavailable while serving %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage is temporarily unavailable. Please try again later."},
    )


def create_app(
    settings: AppSettings | None = None,
    *,
    database: Database | None = None,
    media_storage: MediaBlobStorage | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings.log_level)

    database = database or Database.from_settings(settings)
    media_storage = media_storage or MediaBlobStorage(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if settings.database_url and settings.database_auto_migrate:
            await migrate_database(settings)
        yield
        await database.dispose()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.media_storage = media_storage

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StorageUnavailableError, _storage_unavailable_handler)

    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["health"])
    async def root() -> dict[str, str]:
        return {"service": settings.app_name, "environment": settings.app_env}

    return app

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging
import ssl
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.util import immutabledict

from daybook.core.config import AppSettings
from daybook.core.errors import StorageUnavailableError


logger = logging.getLogger(__name__)


def prepare_engine_arguments(database_url: str) -> tuple[str, dict[str, Any]]:
    """Normalize the URL and translate sslmode for asyncpg engines."""
    url = make_url(database_url)
    drivername = url.drivername or ""
    if "asyncpg" not in drivername:
        return database_url, {}

    query = dict(url.query)
    sslmode = query.pop("sslmode", None)
    connect_args: dict[str, Any] = {}

    if sslmode:
        ssl_value = _sslmode_to_asyncpg_ssl(sslmode)
        if ssl_value is not None:
            connect_args["ssl"] = ssl_value

    sanitized_url = url.set(query=immutabledict(query))
    return sanitized_url.render_as_string(hide_password=False), connect_args


def _sslmode_to_asyncpg_ssl(sslmode: str) -> Any:
    """Map libpq-style sslmode to asyncpg ssl argument."""
    normalized = sslmode.lower()
    if normalized == "disable":
        return False
    if normalized in {"allow", "prefer"}:
        return None
    if normalized in {"require", "verify-full"}:
        return True
    if normalized == "verify-ca":
        context = ssl.create_default_context()
        context.check_hostname = False
        return context

    raise ValueError(f"Unsupported sslmode '{sslmode}' for asyncpg.")


class Database:
    """Owns the async engine and session factory for one application instance.

    A database built without a URL is *unconfigured*: it boots, but every
    attempt to open a session raises ``StorageUnavailableError``.
    """

    def __init__(
        self,
        engine: AsyncEngine | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        if engine is not None and session_factory is None:
            session_factory = async_sessionmaker(engine, expire_on_commit=False)
        self._engine = engine
        self._session_factory = session_factory

    @classmethod
    def unconfigured(cls) -> "Database":
        return cls()

    @classmethod
    def from_url(cls, database_url: str) -> "Database":
        database_url, connect_args = prepare_engine_arguments(database_url)
        engine_kwargs: dict[str, Any] = {}
        if connect_args:
            engine_kwargs["connect_args"] = connect_args
        return cls(create_async_engine(database_url, **engine_kwargs))

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "Database":
        if not settings.database_url:
            logger.warning("DATABASE_URL is not configured; storage routes will be unavailable.")
            return cls.unconfigured()
        return cls.from_url(settings.database_url)

    @property
    def is_configured(self) -> bool:
        return self._session_factory is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StorageUnavailableError("Database is not configured.")
        return self._engine

    def new_session(self) -> AsyncSession:
        if self._session_factory is None:
            raise StorageUnavailableError("Database is not configured.")
        return self._session_factory()

    @asynccontextmanager
    async def session_scope(self) -> AsyncIterator[AsyncSession]:
        """Yield a session that commits on success and rolls back on error.

        Driver-level connection failures surface as ``StorageUnavailableError``.
        """
        session = self.new_session()
        try:
            yield session
            await session.commit()
        except (OperationalError, InterfaceError) as exc:
            await _safe_rollback(session)
            logger.warning("Database unavailable", exc_info=exc)
            raise StorageUnavailableError("Database is unavailable.") from exc
        except Exception:
            await _safe_rollback(session)
            raise
        finally:
            await session.close()

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()


async def _safe_rollback(session: AsyncSession) -> None:
    try:
        await session.rollback()
    except (OperationalError, InterfaceError):
        logger.debug("Rollback skipped; connection already lost.")

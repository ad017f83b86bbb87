from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from daybook.core.config import AppSettings, get_settings


logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def build_alembic_config(database_url: str) -> Config:
    """Alembic config pointing at the project's scripts and ``database_url``."""
    alembic_ini = PROJECT_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        raise RuntimeError(f"Alembic configuration not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    # ConfigParser interpolation treats % as a directive.
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return config


async def migrate_database(settings: AppSettings | None = None, revision: str = "head") -> None:
    """Upgrade the schema of the database named by ``settings``.

    Alembic's command API is blocking, so it runs in the default executor.
    """
    settings = settings or get_settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL must be configured to run migrations.")

    config = build_alembic_config(settings.database_url)
    logger.info("Upgrading database schema to %s", revision)
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, command.upgrade, config, revision)

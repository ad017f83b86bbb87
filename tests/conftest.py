import sys
from pathlib import Path
from uuid import UUID

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine


def _ensure_local_package_on_path() -> None:
    root_dir = Path(__file__).resolve().parents[1]
    if str(root_dir) not in sys.path:
        sys.path.insert(0, str(root_dir))


_ensure_local_package_on_path()

from daybook.models import Base, User  # noqa: E402


@pytest_asyncio.fixture()
async def session() -> AsyncSession:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as db_session:
        yield db_session

    await engine.dispose()


@pytest_asyncio.fixture()
async def user_id(session: AsyncSession) -> UUID:
    user = User(external_id="ada@example.com", email="ada@example.com")
    session.add(user)
    await session.flush()
    return user.id


@pytest_asyncio.fixture()
async def other_user_id(session: AsyncSession) -> UUID:
    user = User(external_id="grace@example.com", email="grace@example.com")
    session.add(user)
    await session.flush()
    return user.id

from collections.abc import AsyncGenerator
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.core.config import AppSettings, get_settings
from daybook.core.database import Database
from daybook.integrations.storage import MediaBlobStorage
from daybook.services.diary import DiaryService
from daybook.services.habits import HabitService
from daybook.services.insights import InsightService
from daybook.services.media import MediaService
from daybook.services.mood import MoodService
from daybook.services.users import ProxyIdentity, UserService


def get_database(request: Request) -> Database:
    """Return the database owned by the running application."""
    return request.app.state.database


def get_media_storage(request: Request) -> MediaBlobStorage:
    return request.app.state.media_storage


async def get_db_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an AsyncSession."""
    async with database.session_scope() as session:
        yield session


async def get_user_service(
    session: AsyncSession = Depends(get_db_session),
) -> UserService:
    return UserService(session)


def _resolve_header(request: Request, candidates: list[str]) -> str | None:
    """Return the first non-empty header value from the provided candidate list."""
    for name in candidates:
        if not name:
            continue
        value = request.headers.get(name.strip())
        if value and value.strip():
            return value.strip()
    return None


def get_proxy_identity(
    request: Request,
    settings: AppSettings = Depends(get_settings),
) -> ProxyIdentity:
    """Read the caller identity forwarded by the authenticating proxy."""
    email = _resolve_header(
        request,
        [settings.auth_email_header, "X-Auth-Request-Email", "X-Forwarded-Email"],
    )
    subject = _resolve_header(
        request,
        [settings.auth_user_header, "X-Auth-Request-User", "X-Forwarded-User"],
    ) or email
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication proxy did not provide a user identity.",
        )
    name = request.headers.get("X-Auth-Request-Preferred-Username")
    return ProxyIdentity(subject=subject, email=email, name=name)


async def get_current_user_id(
    identity: ProxyIdentity = Depends(get_proxy_identity),
    service: UserService = Depends(get_user_service),
) -> UUID:
    """Resolve the caller to a local user id before any journal operation runs."""
    user = await service.resolve(identity)
    return user.id


async def get_diary_service(
    session: AsyncSession = Depends(get_db_session),
) -> DiaryService:
    return DiaryService(session)


async def get_mood_service(
    session: AsyncSession = Depends(get_db_session),
) -> MoodService:
    return MoodService(session)


async def get_habit_service(
    session: AsyncSession = Depends(get_db_session),
) -> HabitService:
    return HabitService(session)


async def get_media_service(
    session: AsyncSession = Depends(get_db_session),
    storage: MediaBlobStorage = Depends(get_media_storage),
) -> MediaService:
    return MediaService(session, storage)


async def get_insight_service(
    session: AsyncSession = Depends(get_db_session),
) -> InsightService:
    """Provide InsightService wired to mood and habit services on the same session."""
    return InsightService(
        session,
        mood_service=MoodService(session),
        habit_service=HabitService(session),
    )

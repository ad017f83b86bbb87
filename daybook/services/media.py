from __future__ import annotations

import base64
import binascii
import logging
import time
from collections.abc import Callable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.core.errors import ForbiddenError
from daybook.integrations.storage import MediaBlobStorage
from daybook.models import DiaryEntry, MediaAttachment, MediaType


logger = logging.getLogger(__name__)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class MediaService:
    """Upload photos and videos and keep their metadata."""

    def __init__(
        self,
        session: AsyncSession,
        storage: MediaBlobStorage,
        *,
        millis: Callable[[], int] = _epoch_millis,
    ):
        self._session = session
        self._storage = storage
        self._millis = millis

    async def upload_media(
        self,
        user_id: UUID,
        *,
        file_name: str,
        file_data: str,
        file_type: MediaType | str,
        mime_type: str,
        diary_entry_id: UUID | None = None,
    ) -> MediaAttachment:
        """Decode a base64 payload, store the blob and record its metadata."""
        media_type = MediaType(file_type)
        name = (file_name or "").strip()
        if not name:
            raise ValueError("file_name must not be empty.")
        try:
            payload = base64.b64decode(file_data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValueError("file_data must be base64 encoded.") from exc

        if diary_entry_id is not None:
            entry = await self._session.get(DiaryEntry, diary_entry_id)
            if entry is None or entry.user_id != user_id:
                raise ForbiddenError("Diary entry belongs to another user.")

        file_key = f"{user_id}/media/{self._millis()}-{name}"
        url = await self._storage.put(file_key, payload, mime_type)

        attachment = MediaAttachment(
            user_id=user_id,
            diary_entry_id=diary_entry_id,
            file_key=file_key,
            file_url=url,
            file_type=media_type.value,
            mime_type=mime_type,
            file_name=name,
            file_size=len(payload),
        )
        self._session.add(attachment)
        await self._session.flush()
        logger.debug("Recorded %s attachment %s (%d bytes)", media_type.value, file_key, len(payload))
        return attachment

    async def list_media(self, user_id: UUID, *, limit: int = 100) -> list[MediaAttachment]:
        stmt = (
            select(MediaAttachment)
            .where(MediaAttachment.user_id == user_id)
            .order_by(MediaAttachment.uploaded_at.desc())
            .limit(max(1, limit))
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def list_media_for_entry(
        self,
        user_id: UUID,
        diary_entry_id: UUID,
    ) -> list[MediaAttachment]:
        stmt = (
            select(MediaAttachment)
            .where(MediaAttachment.user_id == user_id)
            .where(MediaAttachment.diary_entry_id == diary_entry_id)
            .order_by(MediaAttachment.uploaded_at)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

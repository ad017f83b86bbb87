from __future__ import annotations

import base64
from datetime import datetime
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.core.errors import ForbiddenError, StorageUnavailableError
from daybook.models import DiaryEntry
from daybook.services.media import MediaService


class StubStorage:
    def __init__(self, *, fail: bool = False) -> None:
        self.uploads: list[tuple[str, bytes, str]] = []
        self._fail = fail

    async def put(self, key: str, body: bytes, content_type: str) -> str:
        if self._fail:
            raise StorageUnavailableError("Media storage is unavailable.")
        self.uploads.append((key, body, content_type))
        return f"https://cdn.example.com/{key}"


def _encoded(payload: bytes) -> str:
    return base64.b64encode(payload).decode("ascii")


@pytest.mark.asyncio
async def test_upload_stores_blob_under_user_scoped_key(session: AsyncSession, user_id) -> None:
    storage = StubStorage()
    service = MediaService(session, storage, millis=lambda: 1735689600000)

    attachment = await service.upload_media(
        user_id,
        file_name="sunset.jpg",
        file_data=_encoded(b"\xff\xd8jpeg-bytes"),
        file_type="image",
        mime_type="image/jpeg",
    )

    expected_key = f"{user_id}/media/1735689600000-sunset.jpg"
    assert storage.uploads == [(expected_key, b"\xff\xd8jpeg-bytes", "image/jpeg")]
    assert attachment.file_key == expected_key
    assert attachment.file_url == f"https://cdn.example.com/{expected_key}"
    assert attachment.file_size == len(b"\xff\xd8jpeg-bytes")
    assert attachment.file_type == "image"
    assert attachment.diary_entry_id is None


@pytest.mark.asyncio
async def test_upload_rejects_invalid_payloads(session: AsyncSession, user_id) -> None:
    storage = StubStorage()
    service = MediaService(session, storage)

    with pytest.raises(ValueError):
        await service.upload_media(
            user_id, file_name="a.png", file_data="not base64!", file_type="image", mime_type="image/png"
        )

    with pytest.raises(ValueError):
        await service.upload_media(
            user_id, file_name="a.gif", file_data=_encoded(b"x"), file_type="audio", mime_type="audio/ogg"
        )

    assert storage.uploads == []


@pytest.mark.asyncio
async def test_upload_to_another_users_entry_is_forbidden(
    session: AsyncSession, user_id, other_user_id
) -> None:
    entry = DiaryEntry(user_id=other_user_id, date=datetime(2025, 6, 1, 9), title="Theirs")
    session.add(entry)
    await session.flush()
    storage = StubStorage()
    service = MediaService(session, storage)

    with pytest.raises(ForbiddenError):
        await service.upload_media(
            user_id,
            file_name="clip.mp4",
            file_data=_encoded(b"video"),
            file_type="video",
            mime_type="video/mp4",
            diary_entry_id=entry.id,
        )

    with pytest.raises(ForbiddenError):
        await service.upload_media(
            user_id,
            file_name="clip.mp4",
            file_data=_encoded(b"video"),
            file_type="video",
            mime_type="video/mp4",
            diary_entry_id=uuid4(),
        )

    assert storage.uploads == []


@pytest.mark.asyncio
async def test_storage_failure_records_nothing(session: AsyncSession, user_id) -> None:
    service = MediaService(session, StubStorage(fail=True))

    with pytest.raises(StorageUnavailableError):
        await service.upload_media(
            user_id, file_name="a.png", file_data=_encoded(b"png"), file_type="image", mime_type="image/png"
        )

    assert await service.list_media(user_id) == []


@pytest.mark.asyncio
async def test_list_media_by_user_and_entry(session: AsyncSession, user_id, other_user_id) -> None:
    entry = DiaryEntry(user_id=user_id, date=datetime(2025, 6, 1, 9), title="Beach")
    session.add(entry)
    await session.flush()
    millis = iter(range(1, 100))
    service = MediaService(session, StubStorage(), millis=lambda: next(millis))

    attached = await service.upload_media(
        user_id,
        file_name="wave.jpg",
        file_data=_encoded(b"wave"),
        file_type="image",
        mime_type="image/jpeg",
        diary_entry_id=entry.id,
    )
    await service.upload_media(
        user_id, file_name="loose.jpg", file_data=_encoded(b"loose"), file_type="image", mime_type="image/jpeg"
    )
    await service.upload_media(
        other_user_id, file_name="theirs.jpg", file_data=_encoded(b"x"), file_type="image", mime_type="image/jpeg"
    )

    mine = await service.list_media(user_id)
    assert {item.file_name for item in mine} == {"wave.jpg", "loose.jpg"}

    for_entry = await service.list_media_for_entry(user_id, entry.id)
    assert [item.id for item in for_entry] == [attached.id]

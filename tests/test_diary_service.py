from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.core.errors import ForbiddenError
from daybook.services.diary import DiaryService


def fixed_clock(now: datetime):
    return lambda: now


@pytest.mark.asyncio
async def test_create_and_list_entries_newest_first(session: AsyncSession, user_id) -> None:
    service = DiaryService(session)
    await service.create_entry(user_id, date=datetime(2025, 5, 1, 21), title="  First  ", content="Hello")
    await service.create_entry(user_id, date=datetime(2025, 5, 2, 21), title="Second", mood="good", mood_intensity=8)

    entries = await service.list_entries(user_id)

    assert [entry.title for entry in entries] == ["Second", "First"]
    assert entries[0].mood == "good"
    assert entries[1].mood is None


@pytest.mark.asyncio
async def test_list_entries_pages_and_scopes_to_owner(
    session: AsyncSession, user_id, other_user_id
) -> None:
    service = DiaryService(session)
    for day in range(1, 4):
        await service.create_entry(user_id, date=datetime(2025, 5, day, 9), title=f"Day {day}")
    await service.create_entry(other_user_id, date=datetime(2025, 5, 4, 9), title="Not mine")

    page = await service.list_entries(user_id, limit=2, offset=1)

    assert [entry.title for entry in page] == ["Day 2", "Day 1"]


@pytest.mark.asyncio
async def test_create_entry_validates_mood(session: AsyncSession, user_id) -> None:
    service = DiaryService(session)

    with pytest.raises(ValueError):
        await service.create_entry(user_id, date=datetime(2025, 5, 1), mood="ecstatic")

    with pytest.raises(ValueError):
        await service.create_entry(user_id, date=datetime(2025, 5, 1), mood="good", mood_intensity=12)


@pytest.mark.asyncio
async def test_get_entry_by_date_uses_the_day_bucket(session: AsyncSession, user_id) -> None:
    service = DiaryService(session)
    entry = await service.create_entry(user_id, date=datetime(2025, 5, 1, 6, 30), title="Early")

    found = await service.get_entry_by_date(user_id, datetime(2025, 5, 1, 23, 0))

    assert found is not None
    assert found.id == entry.id
    assert await service.get_entry_by_date(user_id, datetime(2025, 5, 2, 0, 0)) is None


@pytest.mark.asyncio
async def test_todays_entry_can_be_edited(session: AsyncSession, user_id) -> None:
    service = DiaryService(session, clock=fixed_clock(datetime(2025, 5, 1, 22, 0)))
    entry = await service.create_entry(user_id, date=datetime(2025, 5, 1, 8, 0), title="Draft", content="a")

    updated = await service.update_entry(user_id, entry.id, content="a and b")

    assert updated.title == "Draft"
    assert updated.content == "a and b"


@pytest.mark.asyncio
async def test_past_entries_are_read_only(session: AsyncSession, user_id) -> None:
    service = DiaryService(session, clock=fixed_clock(datetime(2025, 5, 2, 9, 0)))
    entry = await service.create_entry(user_id, date=datetime(2025, 5, 1, 8, 0), title="Yesterday")

    with pytest.raises(ForbiddenError):
        await service.update_entry(user_id, entry.id, title="Rewritten")

    assert entry.title == "Yesterday"


@pytest.mark.asyncio
async def test_entries_of_other_users_are_read_only(
    session: AsyncSession, user_id, other_user_id
) -> None:
    service = DiaryService(session, clock=fixed_clock(datetime(2025, 5, 1, 12, 0)))
    theirs = await service.create_entry(other_user_id, date=datetime(2025, 5, 1, 8, 0), title="Theirs")

    with pytest.raises(ForbiddenError):
        await service.update_entry(user_id, theirs.id, title="Mine")

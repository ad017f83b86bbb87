from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.models import MoodCategory, MoodRecord
from daybook.services.mood import MoodService


@pytest.mark.asyncio
async def test_record_mood_persists_and_normalizes_notes(session: AsyncSession, user_id) -> None:
    service = MoodService(session)
    when = datetime(2025, 1, 3, 9, 15)

    record = await service.record_mood(
        user_id,
        date=when,
        mood=MoodCategory.GOOD,
        mood_intensity=7,
        notes="  productive day  ",
    )

    assert record.id is not None
    assert record.user_id == user_id
    assert record.mood == "good"
    assert record.mood_intensity == 7
    assert record.notes == "productive day"
    assert record.date == when

    stored = await session.get(MoodRecord, record.id)
    assert stored is not None
    assert stored.mood_intensity == 7


@pytest.mark.asyncio
async def test_record_mood_keeps_notes_when_update_omits_them(session: AsyncSession, user_id) -> None:
    service = MoodService(session)

    await service.record_mood(
        user_id, date=datetime(2025, 1, 3, 9), mood="good", mood_intensity=7, notes="walked"
    )
    record = await service.record_mood(
        user_id, date=datetime(2025, 1, 3, 18), mood="neutral", mood_intensity=4
    )

    assert record.mood == "neutral"
    assert record.mood_intensity == 4
    assert record.notes == "walked"


@pytest.mark.asyncio
async def test_record_mood_validates_input(session: AsyncSession, user_id) -> None:
    service = MoodService(session)
    when = datetime(2025, 1, 3, 9)

    with pytest.raises(ValueError):
        await service.record_mood(user_id, date=when, mood="good", mood_intensity=0)

    with pytest.raises(ValueError):
        await service.record_mood(user_id, date=when, mood="good", mood_intensity=11)

    with pytest.raises(ValueError):
        await service.record_mood(user_id, date=when, mood="ecstatic", mood_intensity=5)

    with pytest.raises(ValueError):
        await service.record_mood(user_id, date=when, mood=MoodCategory.UNKNOWN, mood_intensity=5)


@pytest.mark.asyncio
async def test_get_mood_by_date_returns_none_for_empty_day(session: AsyncSession, user_id) -> None:
    service = MoodService(session)
    await service.record_mood(user_id, date=datetime(2025, 1, 3, 9), mood="good", mood_intensity=7)

    assert await service.get_mood_by_date(user_id, datetime(2025, 1, 4, 9)) is None


@pytest.mark.asyncio
async def test_list_moods_returns_window_newest_first(session: AsyncSession, user_id) -> None:
    service = MoodService(session)
    for day, mood in [(1, "sad"), (3, "good"), (5, "excellent"), (9, "neutral")]:
        await service.record_mood(user_id, date=datetime(2025, 1, day, 12), mood=mood, mood_intensity=5)

    records = await service.list_moods(user_id, datetime(2025, 1, 2), datetime(2025, 1, 5, 23, 59))

    assert [record.mood for record in records] == ["excellent", "good"]


@pytest.mark.asyncio
async def test_chart_groups_intensity_by_local_day(session: AsyncSession, user_id) -> None:
    service = MoodService(session)
    await service.record_mood(user_id, date=datetime(2025, 1, 1, 9), mood="good", mood_intensity=8)
    await service.record_mood(user_id, date=datetime(2025, 1, 2, 9), mood="sad", mood_intensity=3)
    await service.record_mood(user_id, date=datetime(2025, 1, 3, 9), mood="good", mood_intensity=6)

    chart = await service.chart(user_id, datetime(2025, 1, 1), datetime(2025, 1, 3, 23, 59))

    assert chart.distribution == {
        MoodCategory.EXCELLENT: 0,
        MoodCategory.GOOD: 2,
        MoodCategory.NEUTRAL: 0,
        MoodCategory.SAD: 1,
        MoodCategory.TERRIBLE: 0,
    }
    assert [point.date for point in chart.trend] == ["2025-01-01", "2025-01-02", "2025-01-03"]
    assert [point.average_intensity for point in chart.trend] == [8.0, 3.0, 6.0]
    assert chart.average_intensity == pytest.approx(5.7)
    assert chart.dominant_mood is MoodCategory.GOOD

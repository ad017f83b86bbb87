from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Protocol, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.core.errors import NoDataForPeriodError
from daybook.models import MoodCategory, PeriodInsight
from daybook.models.enums import InsightPeriod
from daybook.services.day_bucket import day_window


logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")
_ONE_PLACE = Decimal("0.1")
_TOP_HABITS_LIMIT = 3
_PERIOD_LOOKBACK_DAYS = {
    InsightPeriod.WEEK: 7,
    InsightPeriod.MONTH: 30,
    InsightPeriod.YEAR: 365,
}
SUMMARY_TEMPLATE = (
    "During this {period}, your dominant mood was {dominant} with an average "
    "intensity of {average}/10. You tracked {count} mood entries."
)


class MoodLike(Protocol):
    date: datetime
    mood: Any
    mood_intensity: int | None


class HabitLike(Protocol):
    id: Any
    name: str


@dataclass(slots=True, frozen=True)
class HabitSnapshot:
    """Habit reference stored alongside an insight."""

    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "HabitSnapshot":
        return cls(id=str(payload["id"]), name=str(payload["name"]))


@dataclass(slots=True)
class PeriodAggregate:
    """Result of a single pass over a period's mood records."""

    period: InsightPeriod
    sample_count: int
    mood_distribution: dict[MoodCategory, int]
    average_mood_score: Decimal
    dominant_mood: MoodCategory
    top_habits: list[HabitSnapshot]
    summary: str


@dataclass(slots=True)
class MoodTrendPoint:
    """Average intensity for a single local day."""

    date: str
    average_intensity: float
    sample_count: int


@dataclass(slots=True)
class MoodChart:
    """Display-only distribution and trend over fetched mood records."""

    distribution: dict[MoodCategory, int]
    trend: list[MoodTrendPoint] = field(default_factory=list)
    average_intensity: float = 0.0
    dominant_mood: MoodCategory | None = None
    sample_count: int = 0


def period_window(period: InsightPeriod, today: datetime) -> tuple[datetime, datetime]:
    """Default aggregation window ending with ``today``'s local day."""
    start, _ = day_window(today - timedelta(days=_PERIOD_LOOKBACK_DAYS[period]))
    _, end = day_window(today)
    return start, end


def _empty_distribution() -> dict[MoodCategory, int]:
    return {category: 0 for category in MoodCategory.rated()}


def _dominant(counts: dict[MoodCategory, int]) -> MoodCategory:
    # max() keeps the first key among ties, i.e. the first declared category.
    return max(counts, key=counts.__getitem__)


def _half_up(value: Decimal, places: Decimal) -> Decimal:
    return value.quantize(places, rounding=ROUND_HALF_UP)


def aggregate_period(
    moods: Sequence[MoodLike],
    habits: Sequence[HabitLike],
    period: InsightPeriod,
) -> PeriodAggregate:
    """Count categories, average intensity and pick the dominant mood.

    Raises ``NoDataForPeriodError`` for an empty ``moods`` sequence. Records
    with a missing or unrecognized category are counted under ``unknown``.
    ``top_habits`` is the first three habits in the order given; no
    correlation with mood is computed.
    """
    if not moods:
        raise NoDataForPeriodError()

    counts = _empty_distribution()
    total_intensity = 0
    for record in moods:
        category = MoodCategory.parse(record.mood)
        counts[category] = counts.get(category, 0) + 1
        total_intensity += record.mood_intensity or 0

    average = _half_up(Decimal(total_intensity) / Decimal(len(moods)), _TWO_PLACES)
    dominant = _dominant(counts)
    top_habits = [
        HabitSnapshot(id=str(habit.id), name=habit.name)
        for habit in habits[:_TOP_HABITS_LIMIT]
    ]
    summary = SUMMARY_TEMPLATE.format(
        period=period.value,
        dominant=dominant.value,
        average=f"{average:.2f}",
        count=len(moods),
    )
    return PeriodAggregate(
        period=period,
        sample_count=len(moods),
        mood_distribution=counts,
        average_mood_score=average,
        dominant_mood=dominant,
        top_habits=top_habits,
        summary=summary,
    )


def _local_day(instant: datetime, tz: tzinfo | None) -> str:
    if tz is not None and instant.tzinfo is not None:
        instant = instant.astimezone(tz)
    return instant.date().isoformat()


def build_mood_chart(moods: Iterable[MoodLike], tz: tzinfo | None = None) -> MoodChart:
    """Distribution over the five rated categories plus a per-day intensity trend.

    Aware record dates are shifted into ``tz`` before grouping so trend days
    match the day buckets records were written to. Drivers such as asyncpg
    hand timestamps back in UTC.
    """
    distribution = _empty_distribution()
    daily: dict[str, list[int]] = defaultdict(list)
    total_intensity = 0
    sample_count = 0

    for record in moods:
        category = MoodCategory.parse(record.mood)
        if category is not MoodCategory.UNKNOWN:
            distribution[category] += 1
        intensity = record.mood_intensity or 0
        total_intensity += intensity
        sample_count += 1
        daily[_local_day(record.date, tz)].append(intensity)

    if not sample_count:
        return MoodChart(distribution=distribution)

    trend = [
        MoodTrendPoint(
            date=day,
            average_intensity=float(
                _half_up(Decimal(sum(values)) / Decimal(len(values)), _ONE_PLACE)
            ),
            sample_count=len(values),
        )
        for day, values in sorted(daily.items())
    ]
    return MoodChart(
        distribution=distribution,
        trend=trend,
        average_intensity=float(
            _half_up(Decimal(total_intensity) / Decimal(sample_count), _ONE_PLACE)
        ),
        dominant_mood=_dominant(distribution),
        sample_count=sample_count,
    )


class InsightService:
    """Generate and look up stored period insights."""

    def __init__(self, session: AsyncSession, *, mood_service, habit_service):
        self._session = session
        self._moods = mood_service
        self._habits = habit_service

    async def generate_insight(
        self,
        user_id: UUID,
        period: InsightPeriod,
        period_start: datetime,
        period_end: datetime,
    ) -> PeriodInsight:
        """Aggregate the period's moods and persist the resulting insight."""
        if period_end < period_start:
            raise ValueError("period_end must not precede period_start.")

        moods = await self._moods.list_moods(user_id, period_start, period_end)
        habits = await self._habits.list_habits(user_id)
        aggregate = aggregate_period(moods, habits, period)

        insight = PeriodInsight(
            user_id=user_id,
            period=period.value,
            period_start=period_start,
            period_end=period_end,
            average_mood_score=aggregate.average_mood_score,
            dominant_mood=aggregate.dominant_mood.value,
            mood_distribution={
                category.value: count
                for category, count in aggregate.mood_distribution.items()
            },
            top_habits_correlation=[habit.to_dict() for habit in aggregate.top_habits],
            insights=aggregate.summary,
        )
        self._session.add(insight)
        await self._session.flush()
        logger.info(
            "Generated %s insight for user %s from %d mood records",
            period.value,
            user_id,
            aggregate.sample_count,
        )
        return insight

    async def get_insight(
        self,
        user_id: UUID,
        period: InsightPeriod,
        period_start: datetime,
        period_end: datetime,
    ) -> PeriodInsight | None:
        """Return the most recently generated insight inside the window."""
        stmt = (
            select(PeriodInsight)
            .where(PeriodInsight.user_id == user_id)
            .where(PeriodInsight.period == period.value)
            .where(PeriodInsight.period_start >= period_start)
            .where(PeriodInsight.period_end <= period_end)
            .order_by(PeriodInsight.generated_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from daybook.api.deps import get_current_user_id, get_mood_service
from daybook.schemas.mood import MoodChartItem, MoodRecordItem, MoodRecordUpsert
from daybook.services.mood import MoodService


router = APIRouter()


@router.put(
    "/records",
    response_model=MoodRecordItem,
    summary="Record the mood of a day, replacing an earlier rating for that day.",
)
async def record_mood(
    payload: MoodRecordUpsert,
    user_id: UUID = Depends(get_current_user_id),
    service: MoodService = Depends(get_mood_service),
) -> MoodRecordItem:
    try:
        record = await service.record_mood(
            user_id,
            date=payload.date,
            mood=payload.mood,
            mood_intensity=payload.mood_intensity,
            notes=payload.notes,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return MoodRecordItem.model_validate(record)


@router.get(
    "/records/by-date",
    response_model=MoodRecordItem | None,
    summary="Return the mood recorded for the day containing `date`.",
)
async def get_mood_by_date(
    date: datetime = Query(..., description="Any instant within the requested day."),
    user_id: UUID = Depends(get_current_user_id),
    service: MoodService = Depends(get_mood_service),
) -> MoodRecordItem | None:
    record = await service.get_mood_by_date(user_id, date)
    return MoodRecordItem.model_validate(record) if record else None


@router.get(
    "/records",
    response_model=list[MoodRecordItem],
    summary="List mood records within a date window, newest first.",
)
async def list_moods(
    start: datetime = Query(...),
    end: datetime = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: MoodService = Depends(get_mood_service),
) -> list[MoodRecordItem]:
    records = await service.list_moods(user_id, start, end)
    return [MoodRecordItem.model_validate(record) for record in records]


@router.get(
    "/chart",
    response_model=MoodChartItem,
    summary="Mood distribution and per-day intensity trend for charts.",
)
async def get_mood_chart(
    start: datetime = Query(...),
    end: datetime = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: MoodService = Depends(get_mood_service),
) -> MoodChartItem:
    chart = await service.chart(user_id, start, end)
    return MoodChartItem.from_domain(chart)

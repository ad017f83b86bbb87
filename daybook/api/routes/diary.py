from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from daybook.api.deps import get_current_user_id, get_diary_service
from daybook.core.errors import ForbiddenError
from daybook.schemas.diary import DiaryEntryCreate, DiaryEntryItem, DiaryEntryUpdate
from daybook.services.diary import DiaryService


router = APIRouter()


@router.get("/entries", response_model=list[DiaryEntryItem])
async def list_entries(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    user_id: UUID = Depends(get_current_user_id),
    service: DiaryService = Depends(get_diary_service),
) -> list[DiaryEntryItem]:
    entries = await service.list_entries(user_id, limit=limit, offset=offset)
    return [DiaryEntryItem.model_validate(entry) for entry in entries]


@router.get("/entries/by-date", response_model=DiaryEntryItem | None)
async def get_entry_by_date(
    date: datetime = Query(..., description="Any instant within the requested day."),
    user_id: UUID = Depends(get_current_user_id),
    service: DiaryService = Depends(get_diary_service),
) -> DiaryEntryItem | None:
    entry = await service.get_entry_by_date(user_id, date)
    return DiaryEntryItem.model_validate(entry) if entry else None


@router.post(
    "/entries",
    response_model=DiaryEntryItem,
    status_code=status.HTTP_201_CREATED,
)
async def create_entry(
    payload: DiaryEntryCreate,
    user_id: UUID = Depends(get_current_user_id),
    service: DiaryService = Depends(get_diary_service),
) -> DiaryEntryItem:
    try:
        entry = await service.create_entry(
            user_id,
            date=payload.date,
            title=payload.title,
            content=payload.content,
            mood=payload.mood,
            mood_intensity=payload.mood_intensity,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return DiaryEntryItem.model_validate(entry)


@router.patch(
    "/entries/{entry_id}",
    response_model=DiaryEntryItem,
    summary="Edit today's diary entry.",
)
async def update_entry(
    entry_id: UUID,
    payload: DiaryEntryUpdate,
    user_id: UUID = Depends(get_current_user_id),
    service: DiaryService = Depends(get_diary_service),
) -> DiaryEntryItem:
    try:
        entry = await service.update_entry(
            user_id,
            entry_id,
            title=payload.title,
            content=payload.content,
        )
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return DiaryEntryItem.model_validate(entry)

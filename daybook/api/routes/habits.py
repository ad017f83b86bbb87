from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from daybook.api.deps import get_current_user_id, get_habit_service
from daybook.core.errors import ForbiddenError, NotFoundError
from daybook.schemas.habits import (
    HabitCompletionItem,
    HabitCompletionToggle,
    HabitCreate,
    HabitItem,
    HabitUpdate,
)
from daybook.services.habits import HabitService


router = APIRouter()


@router.get("", response_model=list[HabitItem], summary="List active habits.")
async def list_habits(
    user_id: UUID = Depends(get_current_user_id),
    service: HabitService = Depends(get_habit_service),
) -> list[HabitItem]:
    habits = await service.list_habits(user_id)
    return [HabitItem.model_validate(habit) for habit in habits]


@router.post("", response_model=HabitItem, status_code=status.HTTP_201_CREATED)
async def create_habit(
    payload: HabitCreate,
    user_id: UUID = Depends(get_current_user_id),
    service: HabitService = Depends(get_habit_service),
) -> HabitItem:
    try:
        habit = await service.create_habit(
            user_id,
            name=payload.name,
            description=payload.description,
            color=payload.color,
            icon=payload.icon,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return HabitItem.model_validate(habit)


@router.patch("/{habit_id}", response_model=HabitItem)
async def update_habit(
    habit_id: UUID,
    payload: HabitUpdate,
    user_id: UUID = Depends(get_current_user_id),
    service: HabitService = Depends(get_habit_service),
) -> HabitItem:
    try:
        habit = await service.update_habit(
            user_id,
            habit_id,
            name=payload.name,
            description=payload.description,
            color=payload.color,
            icon=payload.icon,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return HabitItem.model_validate(habit)


@router.post(
    "/{habit_id}/archive",
    response_model=HabitItem,
    summary="Archive a habit; its completion history is kept.",
)
async def archive_habit(
    habit_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: HabitService = Depends(get_habit_service),
) -> HabitItem:
    try:
        habit = await service.archive_habit(user_id, habit_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return HabitItem.model_validate(habit)


@router.get("/completions/by-date", response_model=list[HabitCompletionItem])
async def completions_for_day(
    date: datetime = Query(..., description="Any instant within the requested day."),
    user_id: UUID = Depends(get_current_user_id),
    service: HabitService = Depends(get_habit_service),
) -> list[HabitCompletionItem]:
    records = await service.completions_for_day(user_id, date)
    return [HabitCompletionItem.model_validate(record) for record in records]


@router.get("/{habit_id}/completions", response_model=list[HabitCompletionItem])
async def completions_for_range(
    habit_id: UUID,
    start: datetime = Query(...),
    end: datetime = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: HabitService = Depends(get_habit_service),
) -> list[HabitCompletionItem]:
    try:
        records = await service.completions_for_range(user_id, habit_id, start, end)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return [HabitCompletionItem.model_validate(record) for record in records]


@router.put(
    "/{habit_id}/completions",
    response_model=HabitCompletionItem,
    summary="Mark a habit completed or not for the day containing `date`.",
)
async def toggle_completion(
    habit_id: UUID,
    payload: HabitCompletionToggle,
    user_id: UUID = Depends(get_current_user_id),
    service: HabitService = Depends(get_habit_service),
) -> HabitCompletionItem:
    try:
        record = await service.toggle_completion(
            user_id,
            habit_id,
            date=payload.date,
            completed=payload.completed,
            notes=payload.notes,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    return HabitCompletionItem.model_validate(record)

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from daybook.api.deps import get_current_user_id, get_insight_service
from daybook.models import InsightPeriod
from daybook.schemas.insights import InsightGenerateRequest, PeriodInsightItem
from daybook.services.insights import InsightService, period_window


router = APIRouter()


@router.get(
    "",
    response_model=PeriodInsightItem,
    summary="Return the latest generated insight within a period window.",
)
async def get_insight(
    period: InsightPeriod = Query(...),
    period_start: datetime = Query(...),
    period_end: datetime = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: InsightService = Depends(get_insight_service),
) -> PeriodInsightItem:
    insight = await service.get_insight(user_id, period, period_start, period_end)
    if insight is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No insight generated for this period",
        )
    return PeriodInsightItem.model_validate(insight)


@router.post(
    "",
    response_model=PeriodInsightItem,
    status_code=status.HTTP_201_CREATED,
    summary="Aggregate the period's moods into a stored insight.",
)
async def generate_insight(
    payload: InsightGenerateRequest,
    user_id: UUID = Depends(get_current_user_id),
    service: InsightService = Depends(get_insight_service),
) -> PeriodInsightItem:
    if payload.period_start is not None and payload.period_end is not None:
        period_start, period_end = payload.period_start, payload.period_end
    else:
        period_start, period_end = period_window(payload.period, datetime.now().astimezone())

    try:
        insight = await service.generate_insight(user_id, payload.period, period_start, period_end)
    except ValueError as exc:
        # Includes NoDataForPeriodError.
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return PeriodInsightItem.model_validate(insight)

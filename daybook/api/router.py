from fastapi import APIRouter

from daybook.api.routes import diary, habits, health, insights, media, mood

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(diary.router, prefix="/diary", tags=["diary"])
api_router.include_router(mood.router, prefix="/mood", tags=["mood"])
api_router.include_router(habits.router, prefix="/habits", tags=["habits"])
api_router.include_router(media.router, prefix="/media", tags=["media"])
api_router.include_router(insights.router, prefix="/insights", tags=["insights"])

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from daybook.api.deps import get_database
from daybook.core.database import Database

router = APIRouter()


@router.get("/healthz")
async def healthcheck(database: Database = Depends(get_database)) -> dict[str, str]:
    """Lightweight health endpoint for liveness probes."""
    return {
        "status": "ok",
        "database": "configured" if database.is_configured else "unconfigured",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

from fastapi import APIRouter

from trippino.core.db import check_db_health
from trippino.utils.responses import success_response

router = APIRouter()


@router.get("/healthz")
async def read_healthz() -> dict:
    """Liveness probe with a cached database round trip."""

    database = await check_db_health()
    return success_response({"status": "ok", "database": database})

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from nexus.schemas.common import ok

router = APIRouter()


@router.get("/status")
async def status(request: Request):
    rid = getattr(request.state, "request_id", None)
    return ok(
        message="Backend is up and running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        requestId=rid,
    )

"""Health check endpoint for load balancers and monitoring."""

import os
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from quickreps.api.v1.deps import get_registry
from quickreps.buffer.registry import BufferRegistry
from quickreps.db.session import get_db

router = APIRouter()


@router.get("")
async def health():
    """Liveness check. Includes built_at if BACKEND_BUILT_AT env is set."""
    payload: dict = {"status": "ok"}
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_db),
    registry: BufferRegistry = Depends(get_registry),
):
    """Readiness: DB connectivity plus the number of live quick-entry buffers."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        return JSONResponse(
            status_code=500,
            content={"status": "error", "database": str(e)},
        )
    return {"status": "ok", "database": "connected", "buffers": len(registry)}

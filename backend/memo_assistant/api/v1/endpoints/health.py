from __future__ import annotations

import asyncio

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from memo_assistant.config import settings
from memo_assistant.db.base import get_supabase_admin_client

router = APIRouter()

SERVICE_NAME = "memo-assistant-api"
SERVICE_VERSION = "0.1.0"


@router.get("/")
async def health_check():
    """Liveness check."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
        }
    )


@router.get("/ready")
async def readiness_check():
    """Readiness check that probes the memos table."""
    db_status = "connected"
    try:
        client = get_supabase_admin_client()
        await asyncio.to_thread(
            lambda: client.table(settings.memos_table).select("id").limit(1).execute()
        )
    except Exception as e:
        db_status = f"error: {type(e).__name__}"

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ready",
            "database": db_status,
            "completion_model": settings.completion_model,
            "api_prefix": settings.api_prefix,
        }
    )

from __future__ import annotations

from fastapi import APIRouter

from .endpoints import ai, chat, health, memos, visualization

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(memos.router, prefix="/memos", tags=["memos"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
api_router.include_router(visualization.router, prefix="/visualization", tags=["visualization"])

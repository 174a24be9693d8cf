from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware

from memo_assistant.config import settings
from memo_assistant.utils.logging import get_logger

if TYPE_CHECKING:
    from fastapi import Request
    from starlette.types import ASGIApp

logger = get_logger(__name__)

# Routes that call the language model
MODEL_BACKED_PREFIXES = ("/ai", "/chat")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; "
        "img-src 'self' data: https:; "
        "connect-src 'self' https://*.supabase.co; "
        "frame-ancestors 'none';"
    ),
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
}


class SecurityMiddleware(BaseHTTPMiddleware):
    """Add security headers and log timing of model-backed requests.

    Streaming responses set their own Cache-Control, which is left alone.
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self._model_paths = tuple(settings.api_prefix + p for p in MODEL_BACKED_PREFIXES)

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)

        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=15552000; includeSubDomains"

        if request.url.path.startswith(self._model_paths):
            logger.info(
                "Model-backed request handled",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "ip": request.client.host if request.client else "unknown",
                    "status_code": response.status_code,
                    # for streams this is time to first byte
                    "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                }
            )

        return response

from __future__ import annotations

import logging
import sys

from memo_assistant.config import settings


def setup_logging() -> None:
    """Configure root logging for the memo service."""

    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout
    )

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
    # OpenAI and PostgREST requests go through httpx; per-request lines are noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("memo_assistant").setLevel(level)

    logging.info("Logging configured", extra={"level": settings.log_level})


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)

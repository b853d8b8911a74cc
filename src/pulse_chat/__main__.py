"""Entrypoint: python -m pulse_chat"""
from __future__ import annotations

import logging

import uvicorn

from pulse_chat.api.middleware.correlation_id import CorrelationIdFilter
from pulse_chat.config import settings


def configure_logging() -> None:
    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s [%(request_id)s]: %(message)s",
        handlers=[handler],
    )


def main() -> None:
    configure_logging()
    uvicorn.run(
        "pulse_chat.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

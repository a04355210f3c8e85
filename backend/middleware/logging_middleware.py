"""
Loguru setup and request / response logging middleware.
"""

import sys
import time
from fastapi import Request
from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}",
    )


async def logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    logger.debug(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    elapsed = round((time.perf_counter() - start) * 1000, 2)
    logger.info(f"{request.method} {request.url.path} [{response.status_code}] {elapsed}ms")

    return response

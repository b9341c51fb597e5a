import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

logger = logging.getLogger("http")


async def http_logger_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    client = request.client.host if request.client else "-"
    logger.info(
        "%s %s %s %sb - %s %s - %.0fms",
        request.method,
        request.url.path,
        response.status_code,
        response.headers.get("content-length", 0),
        request.headers.get("user-agent", ""),
        client,
        elapsed_ms,
    )
    return response

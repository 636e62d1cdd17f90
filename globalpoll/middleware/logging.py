"""Request logging middleware."""
import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from globalpoll.core.identity import get_client_ip

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id and log its start, end and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.request_id = request_id = uuid.uuid4().hex

        # Everything logged while handling this request carries these fields
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            client_ip=get_client_ip(request.headers),
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        query = str(request.query_params) if request.query_params else None
        logger.info("request_started", query=query)

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("request_failed", error=repr(exc), duration_ms=_elapsed_ms(started))
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info("request_completed", status_code=response.status_code, duration_ms=_elapsed_ms(started))
        return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("coursehub.access")

QUIET_PATHS = {"/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """One access line per request; client errors at WARNING, crashes with traceback."""

    async def dispatch(self, request: Request, call_next):
        start = time.monotonic()
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s -> unhandled error (%.2fs)", request.method, path, time.monotonic() - start
            )
            raise

        if path in QUIET_PATHS:
            return response

        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s -> %s (%.2fs)",
            request.method,
            path,
            response.status_code,
            time.monotonic() - start,
        )
        return response

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("tasklist.access")

QUIET_PREFIXES = ("/static", "/health")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Start and end access lines per request, tagged with a request id.

    The id comes from ``X-Request-ID`` when the caller sends one and is echoed
    back on the response. Static files and health probes are not logged.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        path = request.url.path
        quiet = path.startswith(QUIET_PREFIXES)
        start = time.perf_counter()
        fields = {
            "category": "http",
            "request_id": request_id,
            "method": request.method,
            "path": path,
        }

        if not quiet:
            logger.info(
                "request.start",
                extra={
                    **fields,
                    "event": "request.start",
                    "query": str(request.url.query),
                    "client": request.client.host if request.client else None,
                },
            )

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(
                "request.error",
                extra={**fields, "event": "request.error", "duration_ms": _elapsed_ms(start)},
            )
            raise

        response.headers["X-Request-ID"] = request_id
        if not quiet:
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(
                level,
                "request.end",
                extra={
                    **fields,
                    "event": "request.end",
                    "status_code": response.status_code,
                    "duration_ms": _elapsed_ms(start),
                },
            )
        return response


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)

"""Request Diagnostics: the single place every request outcome is logged.

Invariants:
    - Exactly one log event per request: request.end / request.rejected / request.failed,
      or request.error when an exception escapes every handler
    - Level follows status: INFO < 400, WARNING 4xx, ERROR 5xx
    - 5xx events carry the originating exception (set by error_handlers)
    - X-Request-ID is propagated from the caller or generated
"""

import logging
import time
import uuid

from fastapi import Request

logger = logging.getLogger("gateway.requests")


def _client_ip(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _outcome(status_code: int) -> tuple[int, str]:
    if status_code >= 500:
        return logging.ERROR, "request.failed"
    if status_code >= 400:
        return logging.WARNING, "request.rejected"
    return logging.INFO, "request.end"


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    context = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": _client_ip(request),
    }
    start = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as exc:
        logger.error(
            "request.error",
            exc_info=exc,
            extra={
                **context,
                "route_name": getattr(request.scope.get("route"), "name", None),
                "status_code": 500,
                "duration_ms": round((time.perf_counter() - start) * 1000, 1),
                "error_message": str(exc),
            },
        )
        raise

    error = getattr(request.state, "error", None)
    level, event = _outcome(response.status_code)
    extra = {
        **context,
        "route_name": getattr(request.scope.get("route"), "name", None),
        "status_code": response.status_code,
        "duration_ms": round((time.perf_counter() - start) * 1000, 1),
    }
    if error is not None:
        extra["error_code"] = getattr(error, "code", type(error).__name__)
        extra["error_message"] = getattr(error, "message", str(error))
        extra["backend"] = getattr(error, "backend", None)

    logger.log(
        level,
        event,
        exc_info=error if level >= logging.ERROR and error is not None else None,
        extra=extra,
    )
    response.headers.setdefault("X-Request-ID", request_id)
    return response

import logging
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

def _elapsed_ms(start_time: float) -> float:
    return round((time.perf_counter() - start_time) * 1000, 2)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request, tagged with the request id and, once the
    auth dependency has resolved one, the acting user."""

    async def dispatch(self, request: Request, call_next):
        # A caller-supplied id is kept so traces line up with the client's logs.
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} - ERROR",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": _elapsed_ms(start_time),
                    "error": str(exc)
                }
            )
            raise

        actor_id = getattr(request.state, "actor_id", None)
        actor_msg = f" [actor: {actor_id}]" if actor_id else ""
        is_write = request.method in WRITE_METHODS

        if response.status_code >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO
        logger.log(
            log_level,
            f"[{request_id}] {request.method} {request.url.path} - {response.status_code}{actor_msg}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(start_time),
                "actor_id": actor_id,
                "is_write": is_write,
            }
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response

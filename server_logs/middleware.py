import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs start, end and failure of every request under a short request id.

    The id is echoed back in the X-Request-ID response header.
    """

    def __init__(self, app, logger):
        super().__init__(app)
        self.logger = logger

    async def dispatch(self, request: Request, call_next):
        req_id = uuid.uuid4().hex[:8]
        log = self.logger.bind(req_id=req_id)
        start = time.perf_counter()

        log.info("request_started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
            origin=request.headers.get("origin"),
        )

        try:
            response = await call_next(request)
        except Exception as e:
            log.error("request_failed", error=str(e))
            raise

        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
        if response.status_code >= 500:
            log.warning("request_completed", status=response.status_code, duration_ms=elapsed_ms)
        else:
            log.info("request_completed", status=response.status_code, duration_ms=elapsed_ms)
        response.headers["X-Request-ID"] = req_id
        return response

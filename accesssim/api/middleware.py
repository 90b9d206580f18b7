from __future__ import annotations

import logging
import time
from typing import Callable, Optional
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("accesssim.api")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Correlate and log every request.

    Sets X-Request-ID on the response (reusing a short client-supplied id)
    and emits one structured "api_request" record per request. Request
    bodies are never logged; simulate payloads carry employee ids.
    """

    def __init__(self, app, *, header_name: str = "X-Request-ID", max_len: int = 128):
        super().__init__(app)
        self._header_name = header_name
        self._max_len = max_len

    async def dispatch(self, request: Request, call_next: Callable):
        rid = request.headers.get(self._header_name)
        if not rid or len(rid) > self._max_len:
            rid = uuid4().hex
        request.state.request_id = rid

        start = time.monotonic()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
            response.headers[self._header_name] = rid
            return response
        finally:
            status_code = getattr(response, "status_code", 500)
            log.log(
                logging.WARNING if status_code >= 500 else logging.INFO,
                "api_request",
                extra={
                    "request_id": rid,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": status_code,
                    "duration_ms": int((time.monotonic() - start) * 1000),
                },
            )

"""
DevCamper API — Request ID Middleware
======================================

What:  Assigns a correlation id to each request and echoes it in the
       `X-Request-ID` response header.
Why:   Every log line and every error body of one request carries the same
       id, so a client-reported error can be found in the logs directly.
How:   A client-supplied `X-Request-ID` is reused; otherwise a short random
       id is generated. The id is stored in a ContextVar (read by the
       exception handlers and the access log) and on `request.state`.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars are plenty for correlating log lines
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

from typing_extensions import override
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable
from collections.abc import Awaitable

from library_api.core.logging import bind_request_id, get_logger, reset_request_id


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Tags each request with an id (taken from the header or generated),
    echoes it back and writes one access line per request.
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name: str = header_name

    @override
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(self.header_name) or uuid.uuid4().hex
        request.state.correlation_id = request_id
        token = bind_request_id(request_id)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            reset_request_id(token)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[self.header_name] = request_id
        get_logger(__name__, request).info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

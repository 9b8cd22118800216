"""Request middleware: request id, access logging and the last-resort 500."""

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response, status
from fastapi.responses import ORJSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from educourse.core.context import clear_context, set_request_id


logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
INTERNAL_ERROR_BODY = {"error": "Internal server error"}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id for the duration of a request.

    The id comes from the ``X-Request-ID`` header or is generated, is echoed
    on every response and is attached to every log line. Exceptions that
    escape the routers are logged here, while the id is still bound, and
    answered with ``500 {"error": "Internal server error"}``.
    """

    def __init__(
        self,
        app: ASGIApp,
        log_requests: bool = True,
        exclude_paths: list[str] | None = None,
    ) -> None:
        super().__init__(app)
        self.log_requests = log_requests
        self.exclude_paths = exclude_paths if exclude_paths is not None else ["/health"]

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        log_this = self.log_requests and not self._is_excluded(request.url.path)

        if log_this:
            logger.info(
                "request_started",
                method=request.method,
                path=request.url.path,
                query=str(request.query_params) or None,
            )

        try:
            try:
                response = await call_next(request)
            except Exception as e:
                logger.exception(
                    "unhandled_exception",
                    method=request.method,
                    path=request.url.path,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                response = ORJSONResponse(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    content=INTERNAL_ERROR_BODY,
                )

            if log_this:
                log = logger.warning if response.status_code >= 400 else logger.info
                log(
                    "request_completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_context()

    def _is_excluded(self, path: str) -> bool:
        return any(path.startswith(excluded) for excluded in self.exclude_paths)


__all__ = ["INTERNAL_ERROR_BODY", "REQUEST_ID_HEADER", "RequestContextMiddleware"]

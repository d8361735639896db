# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""FastAPI middleware that reports unhandled request errors.

The middleware resets the adapter's event ids at the start of every request,
leaves an ``http`` breadcrumb for the request, and captures exceptions that
escape the route handlers.
"""

import logging
from typing import Callable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .adapter import ReportingAdapter
from .context import RequestContext
from .errors import ReportingAdapterError

logger = logging.getLogger(__name__)

ContextProvider = Callable[[Request], RequestContext | None]


def default_context_provider(request: Request) -> RequestContext:
    """Read the request context set by earlier middleware or dependencies.

    Authentication layers store a RequestContext on
    ``request.state.reporting_context``. Without one only the client IP is
    reported.
    """
    context = getattr(request.state, "reporting_context", None)
    if isinstance(context, RequestContext):
        return context
    client_ip = request.client.host if request.client else None
    return RequestContext(ip_address=client_ip)


class ReportingMiddleware(BaseHTTPMiddleware):
    """Middleware reporting unhandled exceptions through a ReportingAdapter.

    Attributes:
        adapter: Adapter receiving breadcrumbs and exceptions
        context_provider: Resolves the RequestContext of a request
    """

    def __init__(
        self,
        app,
        adapter: ReportingAdapter,
        context_provider: ContextProvider | None = None,
    ):
        """Initialize reporting middleware.

        Args:
            app: FastAPI application
            adapter: Adapter used for reporting
            context_provider: Optional callable returning the request context
        """
        super().__init__(app)
        self.adapter = adapter
        self.context_provider = context_provider or default_context_provider

    def _record_request(self, request: Request) -> None:
        try:
            self.adapter.record_breadcrumb(
                f"{request.method} {request.url.path}",
                data={"method": request.method, "url": str(request.url)},
                category="http",
            )
        except ReportingAdapterError as e:
            logger.error(f"Failed to record request breadcrumb: {e}")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and report unhandled exceptions.

        Args:
            request: Incoming request
            call_next: Next middleware/handler

        Returns:
            Response from handler, or a 500 response carrying the event ids
        """
        self.adapter.logged_event_ids = []
        self._record_request(request)

        try:
            return await call_next(request)
        except Exception as exc:
            try:
                self.adapter.capture_exception(
                    exc,
                    {"extra": {"category": "http.500", "path": request.url.path}},
                    request_context=self.context_provider(request),
                )
            except ReportingAdapterError as e:
                logger.error(f"Failed to report unhandled exception: {e}")

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": "Internal Server Error",
                    "event_ids": list(self.adapter.logged_event_ids),
                },
            )

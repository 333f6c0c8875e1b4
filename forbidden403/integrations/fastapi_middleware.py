# forbidden403/integrations/fastapi_middleware.py

import logging
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from forbidden403.config import Settings, configure_logging, get_settings
from forbidden403.error_log import sink_for_client
from forbidden403.forbidden_log import LogSink, log_forbidden
from forbidden403.provenance import loaded_files_for

logger = logging.getLogger(__name__)


def client_ip(request: Request, trust_forwarded_for: bool = False) -> str:
    if trust_forwarded_for:
        xff = request.headers.get("x-forwarded-for", "")
        first = xff.split(",")[0].strip()
        if first:
            return first
    if request.client:
        return request.client.host
    return "unknown"


def request_target(request: Request) -> str:
    """Path plus query string as the client sent it."""
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    return target


class ForbiddenLogMiddleware(BaseHTTPMiddleware):
    """
    Write a 403_forbidden line whenever the app answers 403.

    The response is passed through untouched.
    """
    def __init__(self, app, sink: Optional[LogSink] = None, settings: Optional[Settings] = None):
        super().__init__(app)
        self.sink = sink
        self.settings = settings or get_settings()
        configure_logging(self.settings)

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if response.status_code == 403:
            try:
                sink = self.sink or sink_for_client(client_ip(request, self.settings.trust_forwarded_for))
                log_forbidden(request_target(request), loaded_files_for(request.scope.get("endpoint")), sink)
            except Exception:
                logger.exception("Failed to report 403 for %s", request.url.path)
        return response


def install(app: FastAPI, sink: Optional[LogSink] = None, settings: Optional[Settings] = None) -> FastAPI:
    app.add_middleware(ForbiddenLogMiddleware, sink=sink, settings=settings)
    return app

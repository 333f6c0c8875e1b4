# forbidden403/integrations/aiohttp_middleware.py

import logging
from typing import Optional

from aiohttp import web

from forbidden403.config import Settings, configure_logging, get_settings
from forbidden403.error_log import sink_for_client
from forbidden403.forbidden_log import LogSink, log_forbidden
from forbidden403.provenance import loaded_files_for

logger = logging.getLogger(__name__)

FORBIDDEN = 403


def client_ip(request: web.Request, trust_forwarded_for: bool = False) -> str:
    if trust_forwarded_for:
        xff = request.headers.get("X-Forwarded-For", "")
        if xff:
            first = xff.split(",")[0].strip()
            if first:
                return first
    return request.remote or "unknown"


def _report(request: web.Request, sink: Optional[LogSink], settings: Settings) -> None:
    try:
        target_sink = sink or sink_for_client(client_ip(request, settings.trust_forwarded_for))
        log_forbidden(request.path_qs, loaded_files_for(request.match_info.handler), target_sink)
    except Exception:
        logger.exception("Failed to report 403 for %s", request.path)


def forbidden_middleware(sink: Optional[LogSink] = None, settings: Optional[Settings] = None):
    """Aiohttp middleware factory that writes a 403_forbidden line for every 403 answer"""
    settings = settings or get_settings()
    configure_logging(settings)

    @web.middleware
    async def _forbidden_middleware(request: web.Request, handler):
        try:
            response = await handler(request)
        except web.HTTPException as ex:
            if ex.status == FORBIDDEN:
                _report(request, sink, settings)
            raise

        if getattr(response, "status", None) == FORBIDDEN:
            _report(request, sink, settings)
        return response

    return _forbidden_middleware

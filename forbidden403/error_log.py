# forbidden403/error_log.py

"""Default diagnostic sink: a dedicated logger writing plain lines for log-tailing ban tools."""

import logging
import sys
import threading
from functools import partial
from typing import Callable, Optional

from forbidden403.config import Settings, get_settings

SINK_LOGGER_NAME = "forbidden403.error_log"

logger = logging.getLogger("forbidden403")

sink_logger = logging.getLogger(SINK_LOGGER_NAME)
sink_logger.setLevel(logging.INFO)
sink_logger.propagate = False

_configure_lock = threading.Lock()


class ForbiddenLogError(OSError):
    """Raised when the diagnostic log file cannot be opened."""


class _ClientAddressFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "client_ip", None):
            record.client_ip = "-"
        return True


def configure_error_log(settings: Optional[Settings] = None, force: bool = False,
                        fallback: bool = False) -> logging.Logger:
    """
    Attach the file (or stderr) handler to the sink logger.
    Runs once per process unless force is set. With fallback, an unopenable
    log file degrades to stderr instead of raising ForbiddenLogError.
    """
    settings = settings or get_settings()
    with _configure_lock:
        if sink_logger.handlers and not force:
            return sink_logger

        for handler in list(sink_logger.handlers):
            sink_logger.removeHandler(handler)
            handler.close()

        if settings.log_file:
            try:
                handler = logging.FileHandler(settings.log_file, encoding="utf-8")
            except OSError as e:
                if not fallback:
                    raise ForbiddenLogError(f"Cannot open log file {settings.log_file}: {e}") from e
                logger.error(f"Cannot open log file {settings.log_file}, writing to stderr: {e}")
                handler = logging.StreamHandler(sys.stderr)
        else:
            handler = logging.StreamHandler(sys.stderr)

        handler.setFormatter(logging.Formatter(settings.log_format))
        handler.addFilter(_ClientAddressFilter())
        sink_logger.addHandler(handler)
    return sink_logger


def error_log(message: str, client_ip: Optional[str] = None) -> None:
    """Append one line to the diagnostic log."""
    if not sink_logger.handlers:
        configure_error_log(fallback=True)
    sink_logger.error(message, extra={"client_ip": client_ip or "-"})


def sink_for_client(client_ip: Optional[str]) -> Callable[[str], None]:
    return partial(error_log, client_ip=client_ip)

# forbidden403/forbidden_log.py

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from forbidden403.error_log import error_log

logger = logging.getLogger(__name__)

CATEGORY = "403_forbidden"
MESSAGE_PREFIX = "Malicious traffic detected: "
UNKNOWN_ENTRY = "unknown"

LogSink = Callable[[str], Any]

_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\0": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_request_path(value: Any) -> str:
    """
    Escape an untrusted request target so it stays on a single log line.

    Backslash, quotes and NUL are backslash-escaped, line breaks and tabs become
    their two-character forms and every other control character becomes \\xHH.
    Unicode line separators and lone surrogates become \\uHHHH so the line
    always encodes as UTF-8. Never raises.
    """
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value).decode("utf-8", errors="backslashreplace")
    elif isinstance(value, str):
        text = value
    else:
        try:
            text = str(value)
        except Exception:
            text = repr(type(value))

    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        elif ch in ("\u2028", "\u2029", "\x85") or 0xD800 <= ord(ch) <= 0xDFFF:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return "".join(out)


@dataclass(frozen=True)
class LogEvent:
    request_path: str
    entry_file: str
    category: str = CATEGORY

    def render(self) -> str:
        return (
            f"{MESSAGE_PREFIX}{self.category}"
            f" ({escape_request_path(self.request_path)})"
            f" <{escape_request_path(self.entry_file)}"
        )


def entry_file_of(loaded_files: Optional[Sequence[str]]) -> str:
    if not loaded_files:
        logger.debug("No loaded files reported, using %r as entry file", UNKNOWN_ENTRY)
        return UNKNOWN_ENTRY
    return str(loaded_files[0])


def log_forbidden(request_path: Any, loaded_files: Optional[Sequence[str]],
                  sink: Optional[LogSink] = None) -> None:
    """Write one 403_forbidden line for a request the host answered with 403."""
    if sink is None:
        sink = error_log

    event = LogEvent(request_path=request_path, entry_file=entry_file_of(loaded_files))
    line = event.render()
    try:
        sink(line)
    except (OSError, ValueError):
        # Logging must never change the HTTP response.
        logger.exception("Failed to write 403_forbidden line")

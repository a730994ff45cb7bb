"""
Logging for the storefront.

Every record is tagged with the visitor session it was emitted for, so
interleaved requests from different shoppers can be told apart:

    2025-01-01 12:00:00,000 [Xy3kP0aQ] cubtton.cart.service INFO Cart restored with 2 line(s)

Usage:
    from cubtton.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from contextvars import ContextVar, Token
from functools import cache

LOG_FORMAT = "%(asctime)s [%(session_id)s] %(name)s %(levelname)s %(message)s"

NO_SESSION = "-"

# Set by the API dependency for the duration of a request
session_id_var: ContextVar[str] = ContextVar("cubtton_session_id", default=NO_SESSION)


def bind_session(session_id: str) -> Token:
    """Tag log records emitted in the current context with `session_id`."""
    return session_id_var.set(session_id)


class SessionContextFilter(logging.Filter):
    """Adds `session_id` (truncated and escaped) to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        session_id = session_id_var.get()
        record.session_id = session_id if session_id == NO_SESSION else sanitize_id_for_logging(session_id)
        return True


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(SessionContextFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # Supabase talks through httpx; its request logs drown everything else
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _escape_log_injection(value: str) -> str:
    """Escape line breaks so client-supplied text cannot forge log entries (CWE-117)."""
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value: str | int | None) -> str:
    """Escaped id truncated to 8 chars; "N/A" for empty values."""
    if id_value is None or id_value == "":
        return "N/A"
    return _escape_log_injection(str(id_value))[:8]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Escaped free text (alert messages, error strings) cut at `max_length`."""
    if not value:
        return "N/A"
    safe_value = _escape_log_injection(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "SessionContextFilter",
    "bind_session",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
    "session_id_var",
]

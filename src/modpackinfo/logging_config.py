"""
Logging setup for modpack-info runs.

Logs go to stderr, either as human-readable lines or as one JSON object per
line (``--json-logs``). Structured context is passed through ``extra={...}``
and scrubbed before it is written:

- credential-like keys (the CurseForge ``x-api-key`` and friends) are dropped
- a ``url`` value is reduced to its path and reported as ``endpoint``
- request bodies and query params are replaced by placeholders
- long id lists are summarized by length

Usage:
    from modpackinfo.logging_config import get_logger, setup_logging

    setup_logging(json_format=True)
    logger = get_logger(__name__)
    logger.info("Fetched projects", extra={"registry": "modrinth", "count": 12})
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import IO, Any
from urllib.parse import urlsplit

import orjson

# Keys containing any of these (case-insensitive) are never logged
BLOCKED_FIELDS: frozenset[str] = frozenset(
    {
        "api_key",
        "x-api-key",
        "secret",
        "token",
        "password",
        "auth",
        "authorization",
        "credential",
    }
)

# Keys whose values are replaced wholesale
_PLACEHOLDERS: dict[str, str] = {
    "body": "[BODY]",
    "payload": "[PAYLOAD]",
    "params": "[PARAMS]",
}

MAX_LIST_ITEMS = 10
MAX_DEPTH = 3

_NOISY_LOGGERS = ("aiohttp", "asyncio")

# Attributes every LogRecord carries; anything else came from ``extra``
_STANDARD_ATTRS: frozenset[str] = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
}

_URL_IN_TEXT = re.compile(r"https?://[^\s\"'<>]+")

_REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(?:x-api-key|api[_-]?key|apikey)\s*[=:]\s*['\"]?[\w.$-]+['\"]?", re.I), "[API_KEY]"),
    (re.compile(r"\b(?:bearer|token)(?:\s*[=:]\s*|\s+)['\"]?[\w.-]+['\"]?", re.I), "[TOKEN]"),
    (re.compile(r"\bauthorization\s*[=:]\s*['\"]?[\w.\s-]+['\"]?", re.I), "[AUTH]"),
)


def _normalize_url(url: str) -> str:
    """Reduce a URL to its path ("/" when there is none)."""
    return urlsplit(url).path or "/"


def _strip_url(match: re.Match[str]) -> str:
    path = _normalize_url(match.group(0))
    return "[URL]" if path == "/" else path


def _sanitize_text(text: str) -> str:
    """Drop URL hosts and query strings and mask credential-looking text."""
    if not text:
        return text
    text = _URL_IN_TEXT.sub(_strip_url, text)
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text


def _is_blocked(key: str) -> bool:
    lowered = key.lower()
    return any(word in lowered for word in BLOCKED_FIELDS)


def _scrub(value: Any, depth: int) -> Any:
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _sanitize_text(value)
    if isinstance(value, dict):
        return _filter_log_record(value, _depth=depth + 1)
    if isinstance(value, (list, tuple, set, frozenset)):
        if len(value) > MAX_LIST_ITEMS:
            return f"[list:{len(value)} items]"
        return list(value)
    return _sanitize_text(str(value))


def _filter_log_record(record: dict[str, Any], *, _depth: int = 0) -> dict[str, Any]:
    """
    Scrub structured log context.

    Nested mappings are scrubbed too, down to MAX_DEPTH levels.
    """
    if _depth > MAX_DEPTH:
        return {"_truncated": "max depth exceeded"}

    out: dict[str, Any] = {}
    for key, value in record.items():
        if _is_blocked(key):
            continue
        lowered = key.lower()
        if lowered == "url" and isinstance(value, str):
            out["endpoint"] = _normalize_url(value)
        elif lowered in _PLACEHOLDERS:
            out[key] = _PLACEHOLDERS[lowered]
        else:
            out[key] = _scrub(value, _depth)
    return out


def _context(record: logging.LogRecord) -> dict[str, Any]:
    extras = {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS}
    return _filter_log_record(extras) if extras else {}


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line.

    {"ts": "...", "level": "WARNING", "logger": "...", "msg": "...",
     "file": "...", "line": 42, <context>}

    ``file``/``line`` are only added for warnings and above.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": _sanitize_text(record.getMessage()),
        }
        if record.levelno >= logging.WARNING:
            entry["file"] = record.filename
            entry["line"] = record.lineno
        if record.exc_info:
            entry["exc"] = _sanitize_text(self.formatException(record.exc_info))
        entry.update(_context(record))
        return orjson.dumps(entry, default=str).decode()


class SimpleFormatter(logging.Formatter):
    """``LEVEL    logger: message | key=value ...`` for terminals."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname:<8} {record.name}: {_sanitize_text(record.getMessage())}"
        context = _context(record)
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())
        if record.exc_info:
            line += "\n" + _sanitize_text(self.formatException(record.exc_info))
        return line


def setup_logging(
    *,
    level: int | str = logging.INFO,
    json_format: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """
    Route all logging to one handler. Call once at startup.

    stdout is left alone because the CLI writes its JSON document there.

    Args:
        level: Root log level.
        json_format: Emit JSON lines instead of plain text.
        stream: Destination (default stderr).
    """
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter() if json_format else SimpleFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger, usually ``get_logger(__name__)``."""
    return logging.getLogger(name)

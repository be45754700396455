"""
Shared logging for the categorizer.

Styles:
    human -> compact one-line records (default)
    json  -> newline-delimited JSON via python-json-logger
    both  -> emit both handlers

Two extra level names are registered so the status severities map onto
stdlib logging: VERBOSE sits between DEBUG and INFO, SUCCESS between INFO
and WARNING.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from pythonjsonlogger import jsonlogger

VERBOSE = 15
SUCCESS = 25

logging.addLevelName(VERBOSE, "VERBOSE")
logging.addLevelName(SUCCESS, "SUCCESS")

SERVICE_NAME = "mail-categorizer"


def _short(s: Any, limit: int = 140) -> str:
    """Stringify and truncate for single-line logs."""
    if s is None:
        return "-"
    t = str(s).replace("\n", " ").replace("\r", " ").strip()
    return t if len(t) <= limit else (t[:limit] + "...")


def human_kv(items: Mapping[str, Any] | Iterable[tuple[str, Any]], sep: str = " ") -> str:
    """Render mapping/iterable as 'k=v' tokens with truncation."""
    pairs = items.items() if isinstance(items, Mapping) else items
    return sep.join(f"{k}={_short(v)}" for k, v in pairs)


class _ServiceFilter(logging.Filter):
    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.service = self.service
        return True


class _HumanFormatter(logging.Formatter):
    default_msec_format = "%s.%03d"

    def format(self, record: logging.LogRecord) -> str:
        prefix = f"{self.formatTime(record)} {record.levelname} {record.name}:"
        line = f"{prefix} {record.getMessage()}"
        kv = getattr(record, "kv", None)
        if isinstance(kv, Mapping) and kv:
            line += " | " + human_kv(kv)
        return line


def resolve_level(name: str) -> int:
    """Map a level name to its number, falling back to INFO."""
    name = name.upper()
    if name == "VERBOSE":
        return VERBOSE
    if name == "SUCCESS":
        return SUCCESS
    value = getattr(logging, name, logging.INFO)
    return value if isinstance(value, int) else logging.INFO


def init_logging(level: str = "INFO", style: str = "human", service: str = SERVICE_NAME) -> None:
    """Configure the root logger once; later calls are ignored."""
    root = logging.getLogger()
    if getattr(root, "_initialized_by_app", False):
        return

    root.handlers.clear()
    root.setLevel(resolve_level(level))

    service_filter = _ServiceFilter(service)
    style = style.lower()

    if style in ("human", "both"):
        h = logging.StreamHandler()
        h.setFormatter(_HumanFormatter())
        h.addFilter(service_filter)
        root.addHandler(h)

    if style in ("json", "both"):
        j = logging.StreamHandler()
        j.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(service)s %(name)s %(message)s"))
        j.addFilter(service_filter)
        root.addHandler(j)

    root._initialized_by_app = True  # type: ignore[attr-defined]

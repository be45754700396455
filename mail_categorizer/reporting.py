"""Status reporting: severity-tagged events for logs and the run summary."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional

from .logging_setup import SUCCESS, VERBOSE

INFO = "info"
VERBOSE_EVENT = "verbose"
ERROR = "error"
SUCCESS_EVENT = "success"

_LEVELS = {
    INFO: logging.INFO,
    VERBOSE_EVENT: VERBOSE,
    ERROR: logging.ERROR,
    SUCCESS_EVENT: SUCCESS,
}


@dataclass
class StatusEvent:
    severity: str
    message: str
    data: Any = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class StatusReporter:
    """Collects status events and forwards them to a stdlib logger.

    Verbose events carry diagnostic detail only (per-keyword counts,
    progress) and are dropped unless ``verbose`` is set.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, verbose: bool = False):
        self.logger = logger or logging.getLogger("mail_categorizer")
        self.verbose_enabled = verbose
        self.events: List[StatusEvent] = []
        self.status: str = ""

    def emit(self, severity: str, message: str, data: Any = None) -> None:
        if severity not in _LEVELS:
            raise ValueError(f"Unknown severity: {severity}")
        if severity == VERBOSE_EVENT and not self.verbose_enabled:
            return
        self.events.append(StatusEvent(severity=severity, message=message, data=data))
        extra = {"kv": data} if isinstance(data, dict) else None
        self.logger.log(_LEVELS[severity], message, extra=extra)

    def info(self, message: str, data: Any = None) -> None:
        self.emit(INFO, message, data)

    def verbose(self, message: str, data: Any = None) -> None:
        self.emit(VERBOSE_EVENT, message, data)

    def error(self, message: str, data: Any = None) -> None:
        self.emit(ERROR, message, data)

    def success(self, message: str, data: Any = None) -> None:
        self.emit(SUCCESS_EVENT, message, data)

    def show_status(self, message: str) -> None:
        """Record the user-facing status line."""
        self.status = message
        self.logger.info("status: %s", message)

    def messages(self, severity: Optional[str] = None) -> List[str]:
        return [e.message for e in self.events if severity is None or e.severity == severity]

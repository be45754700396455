"""Core data structures shared across modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple


@dataclass
class Message:
    """A mail item as handed out by the host."""

    id: str
    subject: str
    body: str = ""
    folder: str = ""
    received: Optional[datetime] = None
    categories: List[str] = field(default_factory=list)


@dataclass
class ThreadSegment:
    """One sender's portion of a quoted or forwarded chain."""

    text: str
    timestamp: datetime
    synthetic: bool = False


class ClassificationState(str, Enum):
    APPLIED = "applied"
    APPLY_FAILED = "apply_failed"
    BELOW_THRESHOLD = "below_threshold"


@dataclass
class ClassificationResult:
    """Outcome of classifying a single message."""

    message_id: str
    state: ClassificationState
    category: Optional[str] = None
    score: float = 0.0
    threshold: float = 0.0
    scores: Dict[str, float] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.state is ClassificationState.APPLIED

    @property
    def decision(self) -> Optional[Tuple[str, float]]:
        """Winning category and score, or None when nothing was applied."""
        if not self.applied or self.category is None:
            return None
        return self.category, self.score


@dataclass
class RunSummary:
    """Counts and per-message results of one folder run."""

    folder: str
    processed: int = 0
    categorized: int = 0
    failed: int = 0
    total: int = 0
    cancelled: bool = False
    error: Optional[str] = None
    results: List[ClassificationResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def message(self) -> str:
        if self.error is not None:
            return f"Error processing folder: {self.error}"
        text = f"Completed: {self.processed} emails processed, {self.categorized} categorized"
        if self.cancelled:
            text += f" (cancelled after {self.processed}/{self.total})"
        return text

"""Weighted keyword scoring of one message against one category."""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from .config import WeightConfig
from .mailhost import MailHost
from .reporting import StatusReporter
from .schemas import Message, ThreadSegment
from .segmenting import ThreadSegmenter


def count_occurrences(text: str, keyword: str) -> int:
    """Case-insensitive, non-overlapping, left-to-right count of ``keyword``.

    The keyword is matched literally; blank keywords never match.
    """
    needle = keyword.strip()
    if not needle or not text:
        return 0
    return len(re.findall(re.escape(needle), text, re.IGNORECASE))


def recency_weight(multiplier: float, index: int, total: int) -> float:
    """Weight for segment ``index`` of ``total``, newest first.

    Saturates at infinity instead of raising when the power overflows.
    """
    try:
        return multiplier ** (total - index - 1)
    except OverflowError:
        return math.inf


class ScoringEngine:
    """Scores subject and body keyword hits with positional/recency weights."""

    def __init__(
        self,
        host: MailHost,
        reporter: Optional[StatusReporter] = None,
        segmenter: Optional[ThreadSegmenter] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.host = host
        self.reporter = reporter or StatusReporter()
        self.segmenter = segmenter or ThreadSegmenter()
        self.clock = clock

    def load_segments(self, message: Message) -> List[ThreadSegment]:
        """Fetch the body from the host and segment it.

        A host failure yields no segments, so the body contributes nothing.
        """
        try:
            body = self.host.get_plain_text_body(message)
        except Exception as exc:
            self.reporter.error(
                f"Error processing email body: {exc}",
                {"message_id": message.id, "error_type": type(exc).__name__},
            )
            return []
        now = self.clock() if self.clock is not None else None
        return self.segmenter.segment(body, now=now)

    def subject_score(self, subject: str, keywords: Sequence[str], weights: WeightConfig) -> float:
        score = 0.0
        for keyword in keywords:
            hits = count_occurrences(subject, keyword)
            score += hits * weights.subject_weight
            self.reporter.verbose(f'Subject match for "{keyword}": {hits} occurrences')
        return score

    def body_score(
        self,
        segments: Sequence[ThreadSegment],
        keywords: Sequence[str],
        weights: WeightConfig,
    ) -> float:
        score = 0.0
        total = len(segments)
        for index, segment in enumerate(segments):
            weight = recency_weight(weights.recency_multiplier, index, total)
            for keyword in keywords:
                hits = count_occurrences(segment.text, keyword)
                # 0 * inf is nan, so only weigh actual hits.
                if hits:
                    score += hits * weights.body_weight * weight
                self.reporter.verbose(
                    f'Body match for "{keyword}" in part {index + 1}: {hits} occurrences (weight: {weight})'
                )
        return score

    def score(
        self,
        message: Message,
        keywords: Sequence[str],
        weights: WeightConfig,
        segments: Optional[Sequence[ThreadSegment]] = None,
        category: Optional[str] = None,
    ) -> float:
        """Total score of ``message`` for one keyword list.

        Pass ``segments`` when the body was already fetched for this message.
        """
        if segments is None:
            segments = self.load_segments(message)
        score = self.subject_score(message.subject or "", keywords, weights)
        score += self.body_score(segments, keywords, weights)
        if category is not None:
            self.reporter.verbose(f'Final score for category "{category}": {score}')
        return score

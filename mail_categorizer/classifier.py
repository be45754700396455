"""Threshold-gated selection of the single best category for a message."""

from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence

from .config import WeightConfig
from .mailhost import MailHost
from .reporting import StatusReporter
from .schemas import ClassificationResult, ClassificationState, Message
from .scoring import ScoringEngine

SCORE_PRECISION = 6


class CategoryClassifier:
    """Scores a message against every category and applies the leader.

    Categories are visited in mapping order and a later category must beat
    the leader strictly, so the first of several equal scores wins. The
    leader starts at zero: a category has to score above zero to be chosen.
    """

    def __init__(self, scorer: ScoringEngine, host: MailHost, reporter: Optional[StatusReporter] = None):
        self.scorer = scorer
        self.host = host
        self.reporter = reporter or scorer.reporter

    def score_all(
        self,
        message: Message,
        categories: Mapping[str, Sequence[str]],
        weights: WeightConfig,
    ) -> Dict[str, float]:
        if not categories:
            return {}
        segments = self.scorer.load_segments(message)
        return {
            name: self.scorer.score(message, keywords, weights, segments=segments, category=name)
            for name, keywords in categories.items()
        }

    def classify(
        self,
        message: Message,
        categories: Mapping[str, Sequence[str]],
        weights: WeightConfig,
    ) -> ClassificationResult:
        self.reporter.verbose(f"Processing email: {message.subject}")
        scores = self.score_all(message, categories, weights)

        highest = 0.0
        best: Optional[str] = None
        for name, score in scores.items():
            if score > highest:
                highest = score
                best = name

        self.reporter.verbose("Category scores", scores)

        result = ClassificationResult(
            message_id=message.id,
            state=ClassificationState.BELOW_THRESHOLD,
            category=best,
            score=highest,
            threshold=weights.score_threshold,
            scores=scores,
        )

        if best is None or round(highest, SCORE_PRECISION) < weights.score_threshold:
            self.reporter.info(
                f"No category applied. Highest score ({highest}) below threshold ({weights.score_threshold})"
            )
            return result

        try:
            self.host.apply_category(message, best)
        except Exception as exc:
            result.state = ClassificationState.APPLY_FAILED
            result.error = str(exc)
            self.reporter.error(f"Error adding category: {exc}", {"message_id": message.id, "category": best})
            self.reporter.show_status(f"Error categorizing email: {exc}")
            return result

        result.state = ClassificationState.APPLIED
        self.reporter.success(f"Category added: {best} (score: {highest})")
        self.reporter.show_status(f"Added category {best} to email: {message.subject}")
        return result

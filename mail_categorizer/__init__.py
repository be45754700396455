"""Keyword-weighted email categorization."""

from .classifier import CategoryClassifier
from .config import AppConfig, WeightConfig
from .pipeline import CategorizationPipeline
from .scoring import ScoringEngine, count_occurrences
from .segmenting import ThreadSegmenter

__all__ = [
    "AppConfig",
    "CategorizationPipeline",
    "CategoryClassifier",
    "ScoringEngine",
    "ThreadSegmenter",
    "WeightConfig",
    "count_occurrences",
]

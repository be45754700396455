"""Configuration loading for the mail categorizer."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigParseError


DEFAULT_SUBJECT_WEIGHT = 10.0
DEFAULT_BODY_WEIGHT = 1.0
DEFAULT_RECENCY_MULTIPLIER = 1.5
DEFAULT_SCORE_THRESHOLD = 10.0

# camelCase spellings are what the add-in settings panel stores.
_WEIGHT_ALIASES = {
    "subject_weight": ("subject_weight", "subjectWeight"),
    "body_weight": ("body_weight", "bodyWeight"),
    "recency_multiplier": ("recency_multiplier", "recencyMultiplier"),
    "score_threshold": ("score_threshold", "scoreThreshold"),
}


def _resolve_path(raw_path: str, base_dir: Path) -> str:
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)


def _coerce_weight(value: Any, minimum: float = 0.0, inclusive: bool = False) -> float:
    """Read ``value`` as a finite number above ``minimum``.

    Raises ConfigParseError for anything else, including booleans and
    blank strings.
    """
    if value is None or isinstance(value, bool):
        raise ConfigParseError(f"not a number: {value!r}")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError) as exc:
        raise ConfigParseError(f"not a number: {value!r}") from exc
    if not math.isfinite(number):
        raise ConfigParseError(f"not finite: {value!r}")
    if number < minimum or (number == minimum and not inclusive):
        raise ConfigParseError(f"out of range: {value!r}")
    return number


@dataclass(frozen=True)
class WeightConfig:
    """Scoring weights supplied per run."""

    subject_weight: float = DEFAULT_SUBJECT_WEIGHT
    body_weight: float = DEFAULT_BODY_WEIGHT
    recency_multiplier: float = DEFAULT_RECENCY_MULTIPLIER
    score_threshold: float = DEFAULT_SCORE_THRESHOLD

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None) -> "WeightConfig":
        """Build weights, substituting the default for every unusable field.

        A field is unusable when it is absent, non-numeric or non-positive.
        ``recency_multiplier`` must additionally be at least 1.
        """
        data = data or {}
        defaults = cls()
        values: Dict[str, float] = {}
        for name, aliases in _WEIGHT_ALIASES.items():
            raw = next((data[key] for key in aliases if key in data), None)
            minimum, inclusive = (1.0, True) if name == "recency_multiplier" else (0.0, False)
            try:
                values[name] = _coerce_weight(raw, minimum=minimum, inclusive=inclusive)
            except ConfigParseError:
                values[name] = getattr(defaults, name)
        return cls(**values)

    def override(self, **changes: Any) -> "WeightConfig":
        """Return a copy with the given fields replaced, dropping unusable ones."""
        merged = {name: getattr(self, name) for name in _WEIGHT_ALIASES}
        merged.update({key: value for key, value in changes.items() if value is not None})
        return WeightConfig.from_mapping(merged)


@dataclass
class PathsConfig:
    """Filesystem locations used by the pipeline."""

    sqlite_path: str = "data/categories.db"
    mail_dir: str = "data/mail"


@dataclass
class LoggingConfig:
    """Log output settings."""

    level: str = "INFO"
    style: str = "human"
    verbose: bool = False


@dataclass
class AppConfig:
    """Top-level app configuration."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    weights: WeightConfig = field(default_factory=WeightConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "AppConfig":
        """Build config from a dictionary."""
        base = Path.cwd() if base_dir is None else base_dir

        paths_data = data.get("paths") or {}
        paths = PathsConfig(
            sqlite_path=_resolve_path(paths_data.get("sqlite_path", "data/categories.db"), base),
            mail_dir=_resolve_path(paths_data.get("mail_dir", "data/mail"), base),
        )

        logging_data = dict(data.get("logging") or {})
        logging_data.setdefault("level", os.getenv("LOG_LEVEL", "INFO"))
        logging_data.setdefault("style", os.getenv("LOG_STYLE", "human"))

        return cls(
            paths=paths,
            weights=WeightConfig.from_mapping(data.get("weights") or {}),
            logging=LoggingConfig(**logging_data),
        )

    @classmethod
    def from_yaml(cls, path: str) -> "AppConfig":
        """Load config from YAML."""
        config_path = Path(path).resolve()
        with config_path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        return cls.from_dict(data, base_dir=config_path.parent)

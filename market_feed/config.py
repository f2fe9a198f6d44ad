"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- DedupConfig: Fingerprint and similarity deduplication settings
- SourceQualityConfig: Source rating table overrides
- BudgetConfig: Daily request budget for "today" queries
- CurationConfig: Post-dedup article curation
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import yaml


@dataclass
class DedupConfig:
    """Configuration for article deduplication.

    Attributes:
        enabled: Whether to perform fingerprint deduplication
        max_tokens: Tokens kept per field after filtering, before sorting
        summary_chars: Characters of the normalized summary kept in the fingerprint
        similarity_pass: Whether to run the secondary near-duplicate title pass
        similarity_method: "jaccard" (threshold 0-1) or "ratio" (threshold 0-100)
        similarity_threshold: Minimum title similarity for a near duplicate, on the
                              method's scale (None for the method's default)
    """

    enabled: bool = True
    max_tokens: int = 10
    summary_chars: int = 100
    similarity_pass: bool = False
    similarity_method: str = "jaccard"
    similarity_threshold: float | None = None


@dataclass
class SourceQualityConfig:
    """Configuration for source credibility ratings.

    Attributes:
        ratings_file: Optional YAML file mapping publisher name to score
        overrides: Inline publisher scores applied after the ratings file
    """

    ratings_file: str | None = None
    overrides: dict[str, int] = field(default_factory=dict)


@dataclass
class BudgetConfig:
    """Configuration for the daily request budget.

    Attributes:
        max_requests: Requests allowed per calendar day
        storage_key: Key holding the budget record in the store
        state_file: JSON file backing the store used by the CLI
        timezone: IANA zone defining the budget day (None for local time)
    """

    max_requests: int = 2
    storage_key: str = "today_requests"
    state_file: str = ".market_feed/state.json"
    timezone: str | None = None


@dataclass
class CurationConfig:
    """Configuration for curation after deduplication.

    Attributes:
        limit_sports: Whether to cap the number of sports articles
        sports_min: Lower bound of the random sports cap
        sports_max: Upper bound of the random sports cap
    """

    limit_sports: bool = True
    sports_min: int = 2
    sports_max: int = 5


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    dedup: DedupConfig = field(default_factory=DedupConfig)
    source_quality: SourceQualityConfig = field(default_factory=SourceQualityConfig)
    budget: BudgetConfig = field(default_factory=BudgetConfig)
    curation: CurationConfig = field(default_factory=CurationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# method -> top of the threshold scale
_SIMILARITY_SCALES = {"jaccard": 1.0, "ratio": 100.0}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config file {path}: top level must be a mapping")

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    cfg = _fromdict(data)
    _validate(cfg)
    return cfg


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    try:
        return AppConfig(
            dedup=DedupConfig(**data["dedup"]),
            source_quality=SourceQualityConfig(**data["source_quality"]),
            budget=BudgetConfig(**data["budget"]),
            curation=CurationConfig(**data["curation"]),
            logging=LoggingConfig(**data["logging"]),
        )
    except TypeError as exc:
        raise ValueError(f"Invalid config: {exc}") from exc


def _validate(cfg: AppConfig) -> None:
    method = cfg.dedup.similarity_method
    if method not in _SIMILARITY_SCALES:
        raise ValueError(
            f"Unsupported similarity method: {method!r} "
            f"(expected one of {', '.join(_SIMILARITY_SCALES)})"
        )
    threshold = cfg.dedup.similarity_threshold
    if threshold is not None and (
        not isinstance(threshold, (int, float)) or not 0 <= threshold <= _SIMILARITY_SCALES[method]
    ):
        raise ValueError(
            f"dedup.similarity_threshold {threshold!r} is outside 0-{_SIMILARITY_SCALES[method]:g} "
            f"for similarity_method {method!r}"
        )
    if cfg.dedup.max_tokens < 1 or cfg.dedup.summary_chars < 0:
        raise ValueError("dedup.max_tokens must be >= 1 and dedup.summary_chars >= 0")
    if cfg.budget.max_requests < 0:
        raise ValueError("budget.max_requests must be >= 0")
    if not 0 <= cfg.curation.sports_min <= cfg.curation.sports_max:
        raise ValueError("curation.sports_min must be between 0 and curation.sports_max")

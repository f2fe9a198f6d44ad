"""
Publisher credibility ratings.

Scores come from a static table keyed by the exact publisher display name
as it appears in feeds. Lookups never match partially: "CNBC" (the on-air
brand) and "CNBC.com" (web bylines) carry different scores.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

import yaml

from .types import SourceQuality, Tier

UNKNOWN_SOURCE = "Unknown"

SOURCE_RATINGS: Mapping[str, int] = MappingProxyType(
    {
        # Premium (95-100)
        "Bloomberg": 98,
        "Reuters": 97,
        "Financial Times": 97,
        "The Wall Street Journal": 96,
        "Associated Press": 96,
        "The Economist": 95,
        # Highly reliable (85-94)
        "CNBC": 92,
        "CNN Business": 90,
        "BBC News": 92,
        "The New York Times": 91,
        "Washington Post": 90,
        "Fortune": 89,
        "Forbes": 88,
        "MarketWatch": 88,
        "Barron's": 90,
        "CoinDesk": 87,
        "TechCrunch": 86,
        "The Verge": 85,
        "ESPN": 85,
        # Standard (70-84)
        "Business Insider": 82,
        "Yahoo Finance": 80,
        "CNBC.com": 80,
        "Investopedia": 78,
        "Decrypt": 76,
        "CryptoSlate": 75,
        "Cointelegraph": 74,
        "The Athletic": 83,
        UNKNOWN_SOURCE: 60,
    }
)

# (minimum score, tier, description), checked top-down
TIER_THRESHOLDS: tuple[tuple[int, Tier, str], ...] = (
    (95, "premium", "Premium verified source"),
    (85, "reliable", "Highly reliable source"),
    (70, "standard", "Standard source"),
)
FALLBACK_TIER: tuple[Tier, str] = ("unverified", "Unverified source")

BADGE_COLORS: Mapping[Tier, str] = MappingProxyType(
    {
        "premium": "bg-accent-bright/20 text-accent-bright border-accent-bright/30",
        "reliable": "bg-success/20 text-success border-success/30",
        "standard": "bg-muted text-muted-foreground border-border",
        "unverified": "bg-warning/20 text-warning border-warning/30",
    }
)


def tier_for_score(score: int) -> tuple[Tier, str]:
    """Return the tier and its description for a numeric score."""
    for minimum, tier, description in TIER_THRESHOLDS:
        if score >= minimum:
            return tier, description
    return FALLBACK_TIER


def badge_color(tier: Tier) -> str:
    """Presentation color token for a tier badge."""
    return BADGE_COLORS[tier]


def rate_source(source_name: str | None) -> SourceQuality:
    """Rate a publisher against the built-in table.

    Unknown, missing or non-string names get the "Unknown" rating.
    """
    return _rate(SOURCE_RATINGS, source_name)


class SourceRater:
    """Rates publishers against the built-in table plus configured overrides.

    The merged table is built once and exposed read-only; it is never
    written after construction, so a rater can be shared across threads.
    """

    def __init__(
        self,
        overrides: Mapping[str, int] | None = None,
        ratings_file: str | Path | None = None,
    ):
        ratings = dict(SOURCE_RATINGS)
        if ratings_file:
            ratings.update(load_ratings_file(ratings_file))
        if overrides:
            ratings.update(_checked(overrides, "overrides"))
        if UNKNOWN_SOURCE not in ratings:
            raise ValueError(f"Ratings table must define {UNKNOWN_SOURCE!r}")
        self._ratings: Mapping[str, int] = MappingProxyType(ratings)

    @classmethod
    def from_config(cls, cfg) -> "SourceRater":
        """Build a rater from a SourceQualityConfig."""
        return cls(overrides=cfg.overrides, ratings_file=cfg.ratings_file)

    @property
    def ratings(self) -> Mapping[str, int]:
        return self._ratings

    def rate(self, source_name: str | None) -> SourceQuality:
        return _rate(self._ratings, source_name)


def load_ratings_file(path: str | Path) -> dict[str, int]:
    """Load a YAML mapping of publisher name to score.

    The file may either be the mapping itself or hold it under a
    ``ratings`` key.

    Raises:
        ValueError: If the file is not a mapping or a score is outside 0-100
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if isinstance(raw, dict) and isinstance(raw.get("ratings"), dict):
        raw = raw["ratings"]
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid ratings file {path}: expected a mapping of source to score")
    return _checked(raw, str(path))


def _checked(ratings: Mapping[str, int], origin: str) -> dict[str, int]:
    checked: dict[str, int] = {}
    for name, score in ratings.items():
        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 100:
            raise ValueError(f"Invalid rating for {name!r} in {origin}: {score!r} (expected 0-100)")
        checked[str(name)] = score
    return checked


def _rate(ratings: Mapping[str, int], source_name: str | None) -> SourceQuality:
    score = ratings.get(source_name) if isinstance(source_name, str) else None
    if score is None:
        score = ratings[UNKNOWN_SOURCE]
    tier, description = tier_for_score(score)
    return SourceQuality(score=score, tier=tier, description=description)

"""
Core data types for the market feed core.

This module defines the data structures shared across the pipeline:
- Article: A fetched news article from an upstream feed
- SourceQuality: Credibility score and tier for a publisher
- AnnotatedArticle: A surviving article paired with its source quality
- BudgetState: The persisted daily request counter
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Literal

Tier = Literal["premium", "reliable", "standard", "unverified"]

TIERS: tuple[Tier, ...] = ("premium", "reliable", "standard", "unverified")


@dataclass
class Article:
    """Represents a news article already fetched from an upstream feed.

    Attributes:
        title: The article headline
        summary: Short description from the feed (may be empty)
        source: Publisher display name (e.g., "Bloomberg", "CNBC.com")
        url: The full URL to the original article
        category: Optional category section (e.g., "markets", "sports")
        relevance_score: Optional market relevance score assigned upstream
        published_at: Optional ISO 8601 published timestamp
        id: Optional unique identifier from the feed
    """
    title: str
    summary: str = ""
    source: str | None = None
    url: str | None = None
    category: str | None = None
    relevance_score: float | None = None
    published_at: str | None = None
    id: str | None = None


@dataclass(frozen=True)
class SourceQuality:
    """Credibility rating for a publisher.

    Attributes:
        score: Integer score from 0 to 100
        tier: Bucket derived from the score
        description: Human readable label for the tier
    """
    score: int
    tier: Tier
    description: str


@dataclass
class AnnotatedArticle:
    """Article paired with the quality rating of its source.

    The original record is kept unmodified so callers get back exactly
    what they passed in.

    Attributes:
        article: The original article record
        quality: The rating of the article's source
    """
    article: Any
    quality: SourceQuality

    def to_dict(self) -> dict[str, Any]:
        record = self.article
        if isinstance(record, dict):
            payload = dict(record)
        elif is_dataclass(record) and not isinstance(record, type):
            payload = {key: value for key, value in asdict(record).items() if value is not None}
        elif hasattr(record, "_asdict"):
            payload = dict(record._asdict())
        elif hasattr(record, "__dict__"):
            payload = {key: value for key, value in vars(record).items() if not key.startswith("_")}
        else:
            payload = {"title": field_value(record, "title"), "summary": field_value(record, "summary")}
        payload["source_quality"] = self.quality.score
        payload["source_tier"] = self.quality.tier
        return payload


def field_value(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from either a mapping or an attribute-style record."""
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


@dataclass(frozen=True)
class BudgetState:
    """Daily request counter as persisted in the key-value store.

    Attributes:
        date: ISO calendar day the count belongs to ("" when unset)
        count: Requests made on that day
    """
    date: str = ""
    count: int = 0

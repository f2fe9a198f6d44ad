"""
Curation applied to deduplicated articles.

- Source quality annotation for credibility badges and ranking
- A cap on sports coverage so it does not crowd out market news
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import TypeVar

from .source_quality import UNKNOWN_SOURCE, SourceRater, rate_source
from .types import AnnotatedArticle, field_value

T = TypeVar("T")

SPORTS_CATEGORY = "sports"


def annotate_articles(
    articles: Iterable[object],
    rater: SourceRater | None = None,
) -> list[AnnotatedArticle]:
    """Pair each article with the quality rating of its source.

    Args:
        articles: Article records exposing an optional ``source`` field
        rater: Rater to use; the built-in table when None

    Returns:
        One AnnotatedArticle per input article, in order
    """
    rate = rater.rate if rater is not None else rate_source
    return [
        AnnotatedArticle(article=article, quality=rate(field_value(article, "source") or UNKNOWN_SOURCE))
        for article in articles
    ]


def limit_sports_articles(
    articles: list[T],
    min_keep: int = 2,
    max_keep: int = 5,
    rng: random.Random | None = None,
) -> list[T]:
    """Keep every non-sports article and only the best few sports ones.

    Sports articles are ranked by relevance score (highest first), then
    by publish time (newest first). The number kept is drawn uniformly
    from [min_keep, max_keep]. Sports articles are appended after the
    non-sports ones.

    Args:
        articles: Articles to curate
        min_keep: Smallest number of sports articles kept
        max_keep: Largest number of sports articles kept
        rng: Random source for the cap; the module generator when None

    Returns:
        The curated list; the input list unchanged if it has no sports
    """
    sports = [a for a in articles if field_value(a, "category") == SPORTS_CATEGORY]
    if not sports:
        return articles
    others = [a for a in articles if field_value(a, "category") != SPORTS_CATEGORY]

    ranked = sorted(
        sports,
        key=lambda a: (field_value(a, "relevance_score") or 0, _published_ts(a)),
        reverse=True,
    )
    cap = (rng or random).randint(min_keep, max_keep)
    return others + ranked[:cap]


def _published_ts(article: object) -> float:
    value = field_value(article, "published_at")
    if not value:
        return 0.0
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()

"""JSON parser for fetched article exports.

This module turns already-fetched feed items into structured Article
objects. Two layouts are accepted:
- A bare array of article objects
- An object with an ``articles`` array (optionally with metadata)
"""

from __future__ import annotations

import logging
from typing import Any

from ..core.types import Article

logger = logging.getLogger(__name__)


def parse_articles_json(data: Any) -> list[Article]:
    """Parse a JSON article export into a list of Article objects.

    Each item looks like:
        {
            "id": "a1b2",
            "title": "Fed Raises Rates",
            "summary": "The Federal Reserve announced...",
            "source": "Reuters",
            "url": "https://example.com/fed",
            "category": "markets",
            "relevanceScore": 82,
            "publishedAt": "2026-02-03T11:44:10.702Z"
        }

    ``description`` is used when ``summary`` is absent, and snake_case
    spellings of the camelCase keys are accepted.

    Args:
        data: The parsed JSON content

    Returns:
        A list of Article objects. Items without a title are skipped
        with a warning.

    Raises:
        ValueError: If the payload is neither a list nor an object with
                    an 'articles' list
    """
    if isinstance(data, dict):
        if "articles" not in data:
            raise ValueError("Invalid JSON format: missing 'articles' key")
        items = data["articles"]
    else:
        items = data
    if not isinstance(items, list):
        raise ValueError("Invalid JSON format: articles must be a list")

    articles: list[Article] = []

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning(f"Skipping article #{index}: not an object")
            continue
        title = item.get("title")
        if not title:
            article_id = item.get("id", f"#{index}")
            logger.warning(f"Skipping article {article_id}: missing required field (title)")
            continue

        summary = item.get("summary")
        if summary is None:
            summary = item.get("description") or ""

        articles.append(
            Article(
                id=_first(item, "id", "uuid"),
                title=str(title),
                summary=str(summary),
                source=_source_name(_first(item, "source", "feedTitle")),
                url=item.get("url"),
                category=item.get("category"),
                relevance_score=_score(_first(item, "relevanceScore", "relevance_score")),
                published_at=_first(item, "publishedAt", "published_at"),
            )
        )

    return articles


def _first(item: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value not in (None, ""):
            return value
    return None


def _source_name(value: Any) -> str | None:
    # NewsAPI style exports nest the publisher as {"id": ..., "name": ...}
    if isinstance(value, dict):
        value = value.get("name")
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value).strip() or None


def _score(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None

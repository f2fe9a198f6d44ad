"""
Article deduplication using normalized fingerprints.

This module removes duplicate articles based on:
1. Fingerprint equality (same headline and summary words, any order,
   case or punctuation)
2. Optionally, title similarity to an already kept article
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from rapidfuzz import fuzz

from .similarity import similarity
from .types import field_value

T = TypeVar("T")

STOP_WORDS = frozenset({"this", "that", "with", "from", "have", "been", "will", "more", "than"})
MIN_TOKEN_LENGTH = 4
MAX_TOKENS = 10
SUMMARY_CHARS = 100

# method -> (default threshold, top of the scale)
SIMILARITY_THRESHOLDS = {"jaccard": (0.8, 1.0), "ratio": (90.0, 100.0)}

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def normalize_text(
    text: str | None,
    max_tokens: int = MAX_TOKENS,
    stop_words: Iterable[str] = STOP_WORDS,
) -> str:
    """Reduce text to a sorted string of its first meaningful words.

    Steps: lowercase, strip punctuation, split on whitespace, drop words
    of three characters or fewer and stop words, keep the first
    ``max_tokens`` survivors, sort them and join with single spaces.

    Args:
        text: Text to normalize; None is treated as empty
        max_tokens: Number of filtered words kept before sorting
        stop_words: Words dropped regardless of length

    Returns:
        The normalized string, empty when no word survives
    """
    if not text:
        return ""
    stripped = _PUNCTUATION_RE.sub("", text.lower())
    words = [
        word
        for word in stripped.split()
        if len(word) >= MIN_TOKEN_LENGTH and word not in stop_words
    ]
    return " ".join(sorted(words[:max_tokens]))


def fingerprint(
    title: str | None,
    summary: str | None,
    max_tokens: int = MAX_TOKENS,
    summary_chars: int = SUMMARY_CHARS,
    stop_words: Iterable[str] = STOP_WORDS,
) -> str:
    """Build the deduplication key for one article.

    The normalized summary is truncated after normalization, so long
    summaries that only differ in trailing text still collide.
    """
    title_part = normalize_text(title, max_tokens, stop_words)
    summary_part = normalize_text(summary, max_tokens, stop_words)[:summary_chars]
    return f"{title_part}|{summary_part}"


def dedup_articles(
    articles: Iterable[T],
    max_tokens: int = MAX_TOKENS,
    summary_chars: int = SUMMARY_CHARS,
    stop_words: Iterable[str] = STOP_WORDS,
) -> list[T]:
    """Remove duplicate articles from a list.

    Articles are grouped by fingerprint and only the first article of each
    group is kept. Records may be dataclasses, plain objects or dicts as
    long as they expose ``title`` and ``summary``; survivors are returned
    as the same objects, in input order.

    Args:
        articles: Articles to deduplicate
        max_tokens: Number of filtered words kept per field
        summary_chars: Characters of the normalized summary kept
        stop_words: Words ignored when fingerprinting

    Returns:
        Deduplicated list of articles, preserving original order
    """
    stop_words = frozenset(stop_words)
    seen: set[str] = set()
    kept: list[T] = []

    for article in articles:
        key = fingerprint(
            field_value(article, "title", ""),
            field_value(article, "summary", ""),
            max_tokens,
            summary_chars,
            stop_words,
        )
        if key in seen:
            continue
        seen.add(key)
        kept.append(article)

    return kept


def dedup_similar(
    articles: Iterable[T],
    threshold: float | None = None,
    method: str = "jaccard",
) -> list[T]:
    """Drop articles whose title is close to an already kept title.

    Args:
        articles: Articles to filter, usually the output of dedup_articles
        threshold: Minimum similarity to treat two titles as the same story.
                   In [0, 1] for "jaccard", 0-100 for "ratio". None uses
                   the method's default from SIMILARITY_THRESHOLDS.
        method: "jaccard" for word-set overlap, "ratio" for rapidfuzz's
                Levenshtein based ratio

    Returns:
        Filtered list of articles, preserving original order

    Raises:
        ValueError: If method is not supported or threshold is outside
                    the method's scale
    """
    scorer = _scorer(method)
    threshold = resolve_threshold(method, threshold)
    kept: list[T] = []
    titles: list[str] = []

    for article in articles:
        title = field_value(article, "title", "") or ""
        if _is_similar_title(title, titles, threshold, scorer):
            continue
        titles.append(title)
        kept.append(article)

    return kept


def resolve_threshold(method: str, threshold: float | None = None) -> float:
    """Return the threshold to apply, or the method's default when None."""
    if method not in SIMILARITY_THRESHOLDS:
        raise ValueError(f"Unsupported similarity method: {method!r}")
    default, upper = SIMILARITY_THRESHOLDS[method]
    if threshold is None:
        return default
    if not 0 <= threshold <= upper:
        raise ValueError(f"Similarity threshold {threshold!r} is outside 0-{upper:g} for method {method!r}")
    return threshold


def _scorer(method: str) -> Callable[[str, str], float]:
    if method == "jaccard":
        return similarity
    if method == "ratio":
        return fuzz.ratio
    raise ValueError(f"Unsupported similarity method: {method!r}")


def _is_similar_title(
    title: str,
    titles: Sequence[str],
    threshold: float,
    scorer: Callable[[str, str], float],
) -> bool:
    for existing in titles:
        if scorer(title, existing) >= threshold:
            return True
    return False

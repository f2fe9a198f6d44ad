"""
Core domain models and business logic.

This package contains the deduplication, similarity, source rating and
request budget logic, independent of any input format or CLI.
"""

from .budget import RequestBudget
from .curation import annotate_articles, limit_sports_articles
from .dedup import dedup_articles, dedup_similar, fingerprint, normalize_text
from .similarity import similarity
from .source_quality import SourceRater, badge_color, rate_source, tier_for_score
from .storage import JsonFileStore, KeyValueStore, MemoryStore
from .types import AnnotatedArticle, Article, BudgetState, SourceQuality

__all__ = [
    "Article",
    "AnnotatedArticle",
    "BudgetState",
    "SourceQuality",
    "dedup_articles",
    "dedup_similar",
    "fingerprint",
    "normalize_text",
    "similarity",
    "SourceRater",
    "rate_source",
    "tier_for_score",
    "badge_color",
    "annotate_articles",
    "limit_sports_articles",
    "RequestBudget",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
]

"""
Market Feed - deduplication and source scoring for market news.

This package collapses near-duplicate articles gathered from several
upstream feeds, rates each publisher's credibility, and guards expensive
"today" queries with a daily request budget.

Main entry point is the CLI via `market-feed run` command.

Example:
    $ market-feed run -i articles.json -o out/articles.json
"""

__all__ = [
    "__version__",
    "dedup_articles",
    "similarity",
    "rate_source",
    "RequestBudget",
    "process_articles",
]
__version__ = "0.1.0"

from .core.budget import RequestBudget
from .core.dedup import dedup_articles
from .core.similarity import similarity
from .core.source_quality import rate_source
from .runner import process_articles

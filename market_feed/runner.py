"""
Pipeline orchestration for the market feed core.

This module chains the core stages over an already-fetched article list:
1. Fingerprint deduplication
2. Optional near-duplicate title pass
3. Source quality annotation
4. Sports coverage cap

``run_pipeline`` wraps the same stages with JSON file input and output.
"""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import AppConfig
from .core.curation import annotate_articles, limit_sports_articles
from .core.dedup import dedup_articles, dedup_similar, resolve_threshold
from .core.source_quality import SourceRater
from .core.types import AnnotatedArticle
from .input.json_parser import parse_articles_json
from .utils.logging import log_event, setup_logging


@dataclass
class PipelineStats:
    """Article counts after each stage.

    Attributes:
        input: Articles received
        after_dedup: Articles left after fingerprint deduplication
        after_similarity: Articles left after the near-duplicate pass
        output: Articles returned
    """
    input: int = 0
    after_dedup: int = 0
    after_similarity: int = 0
    output: int = 0

    @property
    def duplicates_removed(self) -> int:
        return self.input - self.after_similarity


@dataclass
class PipelineResult:
    articles: list[AnnotatedArticle] = field(default_factory=list)
    stats: PipelineStats = field(default_factory=PipelineStats)


def process_articles(
    articles: list[Any],
    cfg: AppConfig,
    logger: logging.Logger | None = None,
    rng: random.Random | None = None,
    rater: SourceRater | None = None,
) -> PipelineResult:
    """Deduplicate, annotate and curate a combined article list.

    Args:
        articles: Articles from all feeds, in arrival order
        cfg: Application configuration
        logger: Logger for stage events (no events when None)
        rng: Random source for the sports cap
        rater: Source rater; built from cfg.source_quality when None

    Returns:
        PipelineResult with annotated survivors and per-stage counts
    """
    stats = PipelineStats(input=len(articles))
    rater = rater or SourceRater.from_config(cfg.source_quality)

    kept = list(articles)
    if cfg.dedup.enabled:
        kept = dedup_articles(
            kept,
            max_tokens=cfg.dedup.max_tokens,
            summary_chars=cfg.dedup.summary_chars,
        )
    stats.after_dedup = len(kept)
    log_event(
        logger,
        "Fingerprint dedup",
        event="dedup",
        input=stats.input,
        kept=stats.after_dedup,
        removed=stats.input - stats.after_dedup,
    )

    if cfg.dedup.similarity_pass:
        threshold = resolve_threshold(cfg.dedup.similarity_method, cfg.dedup.similarity_threshold)
        kept = dedup_similar(
            kept,
            threshold=threshold,
            method=cfg.dedup.similarity_method,
        )
        log_event(
            logger,
            "Similarity dedup",
            event="dedup_similar",
            method=cfg.dedup.similarity_method,
            threshold=threshold,
            kept=len(kept),
            removed=stats.after_dedup - len(kept),
        )
    stats.after_similarity = len(kept)

    if cfg.curation.limit_sports:
        before = len(kept)
        kept = limit_sports_articles(
            kept,
            min_keep=cfg.curation.sports_min,
            max_keep=cfg.curation.sports_max,
            rng=rng,
        )
        if len(kept) != before:
            log_event(logger, "Sports articles limited", event="sports_limit", before=before, after=len(kept))

    annotated = annotate_articles(kept, rater)
    stats.output = len(annotated)
    log_event(logger, "Pipeline done", event="pipeline_done", output=stats.output)
    return PipelineResult(articles=annotated, stats=stats)


def run_pipeline(
    input_path: Path,
    output_path: Path,
    cfg: AppConfig,
    rng: random.Random | None = None,
    run_id: str | None = None,
) -> PipelineResult:
    """Process a JSON article export and write the annotated survivors.

    Args:
        input_path: JSON file with an article list
        output_path: Destination JSON file
        cfg: Application configuration
        rng: Random source for the sports cap
        run_id: Identifier stamped on every log record of this run

    Returns:
        The PipelineResult that was written
    """
    logger = setup_logging(cfg.logging, output_path.parent, run_id=run_id)
    log_event(logger, "Pipeline start", event="pipeline_start", input=str(input_path), output=str(output_path))

    with open(input_path, encoding="utf-8") as f:
        data = json.load(f)
    articles = parse_articles_json(data)

    result = process_articles(articles, cfg, logger=logger, rng=rng)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump([item.to_dict() for item in result.articles], f, ensure_ascii=False, indent=2)

    return result

"""Tests for the dedup/annotate/curate pipeline."""

import json
import logging
import random

from market_feed.config import AppConfig
from market_feed.core.source_quality import SourceRater
from market_feed.core.types import Article
from market_feed import runner


def _articles():
    return [
        Article(title="Fed Raises Rates!!", summary="The Federal Reserve announced...", source="Reuters"),
        Article(title="fed raises rates", summary="federal reserve announced", source="CNBC.com"),
        Article(title="Apple shares jump after earnings", summary="iPhone sales beat", source="Bloomberg"),
        Article(title="apple shares jump after earnings beat", summary="Services revenue grows", source="Yahoo Finance"),
        Article(title="Quarterback injured", summary="Season over", source="ESPN", category="sports"),
    ]


def test_process_articles_dedups_and_annotates():
    cfg = AppConfig()
    cfg.curation.limit_sports = False

    result = runner.process_articles(_articles(), cfg)

    assert [item.article.source for item in result.articles] == ["Reuters", "Bloomberg", "Yahoo Finance", "ESPN"]
    assert [item.quality.tier for item in result.articles] == ["premium", "premium", "standard", "reliable"]
    assert result.stats.input == 5
    assert result.stats.after_dedup == 4
    assert result.stats.after_similarity == 4
    assert result.stats.output == 4
    assert result.stats.duplicates_removed == 1


def test_process_articles_similarity_pass():
    cfg = AppConfig()
    cfg.dedup.similarity_pass = True
    cfg.curation.limit_sports = False

    result = runner.process_articles(_articles(), cfg)

    assert [item.article.source for item in result.articles] == ["Reuters", "Bloomberg", "ESPN"]
    assert result.stats.after_similarity == 3
    assert result.stats.duplicates_removed == 2


def test_process_articles_with_dedup_disabled_keeps_everything():
    cfg = AppConfig()
    cfg.dedup.enabled = False
    cfg.curation.limit_sports = False

    result = runner.process_articles(_articles(), cfg)

    assert result.stats.output == 5


def test_process_articles_uses_given_rater():
    cfg = AppConfig()

    result = runner.process_articles(
        [Article(title="Local news", source="Local Gazette")],
        cfg,
        rater=SourceRater({"Local Gazette": 96}),
    )

    assert result.articles[0].quality.tier == "premium"


def test_process_articles_logs_stage_events(caplog, monkeypatch):
    logger = logging.getLogger("test_runner_events")
    monkeypatch.setattr(logger, "propagate", True)
    cfg = AppConfig()

    with caplog.at_level(logging.INFO, logger="test_runner_events"):
        runner.process_articles(_articles(), cfg, logger=logger, rng=random.Random(1))

    events = [getattr(record, "event", None) for record in caplog.records]
    assert "dedup" in events
    assert "pipeline_done" in events


def test_run_pipeline_writes_annotated_json(tmp_path):
    input_path = tmp_path / "articles.json"
    input_path.write_text(
        json.dumps(
            {
                "articles": [
                    {"title": "Oil slides", "summary": "Crude futures drop", "source": "Reuters"},
                    {"title": "OIL SLIDES!", "summary": "crude futures drop.", "source": "Unknown Blog"},
                    {"title": "Gold steadies", "description": "Bullion flat", "source": "Forbes"},
                ]
            }
        ),
        encoding="utf-8",
    )
    output_path = tmp_path / "out" / "result.json"
    cfg = AppConfig()
    cfg.logging.console = False

    result = runner.run_pipeline(input_path, output_path, cfg)

    written = json.loads(output_path.read_text(encoding="utf-8"))
    assert result.stats.output == 2
    assert [item["title"] for item in written] == ["Oil slides", "Gold steadies"]
    assert written[0]["source_quality"] == 97
    assert written[1]["source_tier"] == "reliable"
    assert written[1]["summary"] == "Bullion flat"


def test_run_pipeline_accepts_nested_source_objects(tmp_path):
    input_path = tmp_path / "articles.json"
    input_path.write_text(
        json.dumps([{"title": "Oil slides", "source": {"id": "reuters", "name": "Reuters"}}]),
        encoding="utf-8",
    )
    output_path = tmp_path / "result.json"
    cfg = AppConfig()
    cfg.logging.console = False

    runner.run_pipeline(input_path, output_path, cfg)

    written = json.loads(output_path.read_text(encoding="utf-8"))
    assert written[0]["source"] == "Reuters"
    assert written[0]["source_quality"] == 97


def test_ratio_similarity_pass_keeps_unrelated_titles_by_default():
    cfg = AppConfig()
    cfg.dedup.similarity_pass = True
    cfg.dedup.similarity_method = "ratio"
    cfg.curation.limit_sports = False
    articles = [
        Article(title="Oil slides as supply grows", summary="Crude drops"),
        Article(title="Gold steadies", summary="Bullion flat"),
        Article(title="Nvidia unveils chip", summary="New accelerator"),
    ]

    result = runner.process_articles(articles, cfg)

    assert result.stats.after_similarity == 3

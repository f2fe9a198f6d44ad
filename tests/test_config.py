"""Tests for YAML configuration loading."""

import pytest

from market_feed.config import AppConfig, load_config


def test_load_config_without_path_returns_defaults():
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.dedup.max_tokens == 10
    assert cfg.dedup.summary_chars == 100
    assert cfg.budget.max_requests == 2


def test_load_config_returns_independent_instances():
    first = load_config(None)
    first.budget.max_requests = 9

    assert load_config(None).budget.max_requests == 2


def test_load_config_merges_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "dedup:\n"
        "  similarity_pass: true\n"
        "  similarity_method: ratio\n"
        "  similarity_threshold: 90\n"
        "budget:\n"
        "  timezone: America/New_York\n"
        "source_quality:\n"
        "  overrides:\n"
        "    Local Gazette: 72\n"
        "unknown_section:\n"
        "  foo: bar\n",
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.dedup.similarity_pass is True
    assert cfg.dedup.similarity_method == "ratio"
    assert cfg.dedup.max_tokens == 10
    assert cfg.budget.timezone == "America/New_York"
    assert cfg.budget.max_requests == 2
    assert cfg.source_quality.overrides == {"Local Gazette": 72}


def test_empty_config_file_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)) == AppConfig()


def test_rejects_unknown_similarity_method(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("dedup:\n  similarity_method: cosine\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported similarity method"):
        load_config(str(path))


def test_rejects_unknown_option(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("budget:\n  max_requets: 3\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid config"):
        load_config(str(path))


def test_rejects_non_mapping_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must be a mapping"):
        load_config(str(path))


def test_rejects_inverted_sports_bounds(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("curation:\n  sports_min: 6\n  sports_max: 3\n", encoding="utf-8")

    with pytest.raises(ValueError, match="sports_min"):
        load_config(str(path))


def test_similarity_threshold_defaults_to_method_scale():
    assert load_config(None).dedup.similarity_threshold is None


@pytest.mark.parametrize(
    "method,threshold",
    [("jaccard", 90), ("ratio", 150), ("ratio", -5), ("jaccard", "high")],
)
def test_rejects_threshold_outside_method_scale(tmp_path, method, threshold):
    path = tmp_path / "config.yaml"
    path.write_text(
        f"dedup:\n  similarity_method: {method}\n  similarity_threshold: {threshold}\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="similarity_threshold"):
        load_config(str(path))

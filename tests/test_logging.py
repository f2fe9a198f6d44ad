"""Tests for run logging."""

import json
import logging

from market_feed.config import AppConfig, LoggingConfig
from market_feed.utils.logging import JsonlFormatter, log_event, record_stage, setup_logging
from market_feed import runner


def _record(name="market_feed", **extra):
    fields = {"name": name, "levelname": "INFO", "levelno": logging.INFO, "msg": "Fingerprint dedup"}
    fields.update(extra)
    return logging.makeLogRecord(fields)


def _close_handlers():
    logger = logging.getLogger("market_feed")
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []


def test_jsonl_payload_carries_stage_run_and_counters():
    record = _record(event="dedup", run_id="run-1", kept=4, removed=1)

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["stage"] == "dedup"
    assert payload["run_id"] == "run-1"
    assert payload["message"] == "Fingerprint dedup"
    assert payload["kept"] == 4
    assert payload["removed"] == 1
    assert "event" not in payload


def test_stage_falls_back_to_emitting_module():
    assert record_stage(_record(name="market_feed.core.budget")) == "budget"
    assert record_stage(_record(name="market_feed.input.json_parser")) == "json_parser"


def test_log_event_without_logger_is_noop():
    log_event(None, "ignored", event="dedup", kept=1)


def test_log_event_honours_level(caplog):
    logger = logging.getLogger("test_logging_level")

    with caplog.at_level(logging.INFO, logger="test_logging_level"):
        log_event(logger, "Budget spent", event="budget", level=logging.WARNING, remaining=0)

    assert caplog.records[0].levelno == logging.WARNING
    assert caplog.records[0].event == "budget"
    assert caplog.records[0].remaining == 0


def test_file_log_stamps_run_id_on_child_loggers(tmp_path):
    cfg = LoggingConfig(console=False, file=True, filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path, run_id="run-42")
    try:
        log_event(logger, "Pipeline done", event="pipeline_done", output=3)
        logging.getLogger("market_feed.core.storage").warning("State file unreadable")
    finally:
        _close_handlers()

    lines = [json.loads(line) for line in (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [line["stage"] for line in lines] == ["pipeline_done", "storage"]
    assert {line["run_id"] for line in lines} == {"run-42"}
    assert lines[0]["output"] == 3


def test_run_pipeline_writes_stage_per_step(tmp_path):
    input_path = tmp_path / "articles.json"
    input_path.write_text(
        json.dumps([{"title": "Oil slides", "source": "Reuters"}, {"title": "OIL SLIDES!", "source": "CNBC"}]),
        encoding="utf-8",
    )
    cfg = AppConfig()
    cfg.logging.console = False
    cfg.logging.file = True
    try:
        runner.run_pipeline(input_path, tmp_path / "out" / "result.json", cfg, run_id="nightly")
    finally:
        _close_handlers()

    lines = (tmp_path / "out" / "run.jsonl").read_text(encoding="utf-8").splitlines()
    stages = [json.loads(line)["stage"] for line in lines]
    assert stages[0] == "pipeline_start"
    assert "dedup" in stages
    assert stages[-1] == "pipeline_done"
    assert all(json.loads(line)["run_id"] == "nightly" for line in lines)

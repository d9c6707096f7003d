"""Tests for structured logging."""

import json
import logging

import pytest

from protoforge.core.logging import ROOT_LOGGER_NAME, configure_logging, get_logger


@pytest.fixture
def log_file(tmp_path):
    """Route protoforge logs to a JSON file for one test."""
    path = tmp_path / "logs" / "protoforge.jsonl"
    configure_logging(level="DEBUG", json_output=True, log_file=str(path))
    yield path
    configure_logging()


def _records(path):
    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        handler.flush()
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


class TestStructuredLogger:
    """Test logger naming and JSON output."""

    def test_names_are_nested(self):
        assert get_logger("pipeline").logger.name == "protoforge.pipeline"
        assert get_logger("protoforge.pipeline") is get_logger("pipeline")

    def test_context_fields(self, log_file):
        """Test that keyword context lands in the JSON record."""
        get_logger("tests").info("hello", context={"run": 1}, stage="decode")

        record = _records(log_file)[-1]
        assert record["message"] == "hello"
        assert record["name"] == "protoforge.tests"
        assert record["levelname"] == "INFO"
        assert record["run"] == 1
        assert record["stage"] == "decode"

    def test_pipeline_stage(self, log_file):
        """Test stage events carry status and a rounded duration."""
        get_logger("tests").log_pipeline_stage("generate", "failed", duration_ms=12.3456, error_type="ParseError")

        record = _records(log_file)[-1]
        assert record["message"] == "Pipeline stage generate failed"
        assert record["levelname"] == "ERROR"
        assert record["event_type"] == "pipeline_stage"
        assert record["duration_ms"] == 12.35
        assert record["error_type"] == "ParseError"

    def test_artifact_is_debug(self, log_file):
        """Test artifact events at DEBUG level."""
        get_logger("tests").log_artifact("code/main.ino", 13)

        record = _records(log_file)[-1]
        assert record["levelname"] == "DEBUG"
        assert record["artifact"] == "code/main.ino"
        assert record["bytes"] == 13

    def test_level_filters(self, tmp_path):
        """Test that records below the configured level are dropped."""
        path = tmp_path / "warn.log"
        configure_logging(level="WARNING", log_file=str(path))
        try:
            logger = get_logger("tests")
            logger.info("quiet")
            logger.warning("loud")
            for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
                handler.flush()
            text = path.read_text(encoding="utf-8")
        finally:
            configure_logging()

        assert "loud" in text
        assert "quiet" not in text

# tests/unit/test_logger.py
"""
Unit tests for logging setup and analysis summaries
"""
import json
import logging
import pytest

from analysis.composite_scorer import build_fallback_analysis
from monitoring.logger import (
    ANALYSIS_LOG, AnalysisLogger, JsonFormatter, setup_logging
)
from tests.conftest import fixed_clock


@pytest.mark.unit
class TestLogging:
    """Logger configuration and summary records"""

    def test_setup_logging_creates_rotating_files(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging({"log_dir": str(tmp_path), "level": "DEBUG"}, name="test")

            logging.getLogger("chaincheck.test").error("something failed")
            for handler in root.handlers:
                handler.flush()

            assert root.level == logging.DEBUG
            assert "something failed" in (tmp_path / "test.log").read_text()
            assert "something failed" in (tmp_path / "test_errors.log").read_text()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers = saved_handlers
            root.setLevel(saved_level)

    def test_analysis_summary(self, caplog):
        analysis = build_fallback_analysis("0x2::sui::SUI", clock=fixed_clock)

        with caplog.at_level(logging.DEBUG, logger="chaincheck.analysis"):
            summary = AnalysisLogger().log_analysis(analysis, duration=0.4567)

        assert summary["risk_level"] == "VERY_HIGH"
        assert summary["duration"] == 0.457
        assert summary["categories"]["liquidityHealth"] == 0.13
        levels = [record.levelno for record in caplog.records]
        assert ANALYSIS_LOG in levels
        assert logging.WARNING in levels

    def test_json_formatter_includes_summary(self):
        record = logging.LogRecord("chaincheck.analysis", ANALYSIS_LOG, __file__, 1,
                                   "Analysis complete", (), None)
        record.analysis_data = {"overall_score": 0.5}
        data = json.loads(JsonFormatter().format(record))
        assert data["level"] == "ANALYSIS"
        assert data["analysis"] == {"overall_score": 0.5}

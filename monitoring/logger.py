"""
Structured Logger for ChainCheck
Console and rotating file outputs, plus one summary record per analysis
"""

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

logger = logging.getLogger(__name__)

# Custom log level for analysis summaries
ANALYSIS_LOG = 25  # Between INFO and WARNING

logging.addLevelName(ANALYSIS_LOG, "ANALYSIS")


def _default_config() -> Dict[str, Any]:
    """Default logging configuration"""
    return {
        "level": "INFO",
        "log_dir": "logs",
        "json_format": False,
        "max_bytes": 10 * 1024 * 1024,  # 10MB
        "backup_count": 5,
        "outputs": ["console", "file"],
    }


def setup_logging(
    config: Optional[Any] = None,
    name: str = "chaincheck",
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        config: LoggingConfig model or plain dict; missing keys use defaults
        name: Base name of the log files
        stream: Console stream, stdout by default
    """
    settings = _default_config()
    if config is not None:
        overrides = config.model_dump() if hasattr(config, "model_dump") else dict(config)
        settings.update(overrides)

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(settings["level"]).upper(), logging.INFO))
    root.handlers = []

    if "console" in settings["outputs"]:
        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        root.addHandler(console_handler)

    if "file" in settings["outputs"]:
        log_dir = Path(settings["log_dir"])
        log_dir.mkdir(parents=True, exist_ok=True)
        file_formatter = JsonFormatter() if settings["json_format"] else StandardFormatter()

        file_handler = RotatingFileHandler(
            log_dir / f"{name}.log",
            maxBytes=settings["max_bytes"],
            backupCount=settings["backup_count"],
        )
        file_handler.setFormatter(file_formatter)
        root.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            log_dir / f"{name}_errors.log",
            maxBytes=settings["max_bytes"],
            backupCount=settings["backup_count"],
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(file_formatter)
        root.addHandler(error_handler)

    # aiohttp access logs are noisy at INFO
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


class AnalysisLogger:
    """
    Records one summary line per completed analysis.
    """

    def __init__(self, name: str = "chaincheck.analysis"):
        self.logger = logging.getLogger(name)

    def log_analysis(self, analysis: Any, duration: float) -> Dict[str, Any]:
        """
        Log an analysis summary

        Args:
            analysis: CompositeAnalysis
            duration: Wall-clock seconds spent in analyze()

        Returns:
            The summary record that was logged
        """
        summary = {
            "address": analysis.contract_address,
            "symbol": analysis.token_symbol,
            "overall_score": analysis.overall_score,
            "risk_level": analysis.risk_level.value,
            "categories": {
                category.category: category.total_score
                for category in analysis.categories()
            },
            "data_sources": dict(analysis.data_sources),
            "is_fallback": analysis.is_fallback,
            "duration": round(duration, 3),
        }

        record = self.logger.makeRecord(
            self.logger.name,
            ANALYSIS_LOG,
            "analysis",
            0,
            f"Analysis complete: {summary['symbol']} "
            f"score={summary['overall_score']:.2f} risk={summary['risk_level']} "
            f"({summary['duration']:.2f}s)",
            (),
            None,
        )
        record.analysis_data = summary
        self.logger.handle(record)

        if analysis.is_fallback:
            self.logger.warning(
                f"⚠️ No provider returned data for {summary['address'][:16]}..., "
                f"fallback result served"
            )
        return summary


class JsonFormatter(logging.Formatter):
    """JSON log formatter"""

    def format(self, record):
        log_obj = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'analysis_data'):
            log_obj["analysis"] = record.analysis_data

        return json.dumps(log_obj, default=str)


class ColoredFormatter(logging.Formatter):
    """Colored console formatter"""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'ANALYSIS': '\033[35m',  # Magenta
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[41m',  # Red Background
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        record.levelname = f"{self.COLORS.get(levelname, '')}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class StandardFormatter(logging.Formatter):
    """Standard text formatter"""

    def __init__(self):
        super().__init__(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

import json
import logging
import sys
from collections.abc import Generator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from _pytest.logging import LogCaptureFixture

import src.logging_config as logging_config
from src.logging_config import LOG_NAME, CacheStats, JsonFormatter, get_logger


@pytest.fixture(autouse=True)
def reset_logger_handlers(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[None, None, None]:
    """Ensure tests run with a clean logger state."""
    monkeypatch.setattr(logging_config, "LOG_FILE", tmp_path / "logs" / "app.log")
    logger = logging.getLogger(LOG_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True


def test_json_formatter_returns_json_with_extras() -> None:
    formatter = JsonFormatter()
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Todo added",
        args=(),
        exc_info=None,
    )
    record.request_id = "abc"
    record.todo_id = "t-1"
    formatted = formatter.format(record)
    data = json.loads(formatted)
    assert data["level"] == "INFO"
    assert data["logger"] == "test"
    assert data["message"] == "Todo added"
    assert data["request_id"] == "abc"
    assert data["extra"] == {"todo_id": "t-1"}


def test_json_formatter_includes_exception() -> None:
    formatter = JsonFormatter()
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord(
            name="test",
            level=logging.ERROR,
            pathname=__file__,
            lineno=1,
            msg="Resolver failed",
            args=(),
            exc_info=sys.exc_info(),
        )
    data = json.loads(formatter.format(record))
    assert "ValueError: bad" in data["exc_info"]


def test_get_logger_configures_two_handlers(tmp_path: Path) -> None:
    logger = get_logger()
    assert len(logger.handlers) == 2
    assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    assert (tmp_path / "logs").is_dir()
    # Second call reuses the configured handlers
    assert len(get_logger().handlers) == 2


def test_cache_stats_hit_miss_logic() -> None:
    stats = CacheStats()
    assert stats.hit_rate == 0.0
    stats.record_hit()
    assert stats.hit_rate == 100.0
    stats.record_miss()
    assert stats.hit_rate == 50.0


def test_cache_stats_logging(caplog: LogCaptureFixture) -> None:
    stats = CacheStats()
    stats.record_hit()
    stats.record_miss()
    stats.record_eviction()
    stats.record_expiration(2)
    logger = get_logger()
    logger.addHandler(caplog.handler)
    caplog.set_level(logging.INFO, logger=LOG_NAME)
    stats.log_summary()
    logger.removeHandler(caplog.handler)
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.INFO
    assert record.getMessage() == "Cache stats"
    data = json.loads(JsonFormatter().format(record))
    assert data["extra"] == {"hit_rate": 50.0, "evictions": 1, "expirations": 2}

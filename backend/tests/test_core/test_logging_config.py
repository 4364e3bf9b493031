"""Tests for loguru configuration."""

from loguru import logger

from core.correlation import set_correlation_id
from core.logging_config import configure_logging, correlation_filter


def test_filter_injects_correlation_id() -> None:
    set_correlation_id("abcd1234")
    record: dict = {"extra": {}}
    assert correlation_filter(record) is True  # type: ignore[arg-type]
    assert record["extra"]["correlation_id"] == "abcd1234"


def test_filter_placeholder_outside_request() -> None:
    set_correlation_id("")
    record: dict = {"extra": {}}
    correlation_filter(record)  # type: ignore[arg-type]
    assert record["extra"]["correlation_id"] == "-"


def test_test_environment_skips_file_sink(tmp_path) -> None:
    logs_dir = tmp_path / "logs"
    configure_logging("test", logs_dir=str(logs_dir))

    set_correlation_id("feed1234")
    messages: list = []
    sink_id = logger.add(
        messages.append,
        filter=correlation_filter,
        format="{extra[correlation_id]} {message}",
    )
    try:
        logger.info("Doubt {id} created")
    finally:
        logger.remove(sink_id)

    assert not logs_dir.exists()
    assert messages[0].strip() == "feed1234 Doubt {id} created"

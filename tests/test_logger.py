import pytest
from loguru import logger as loguru_logger

from llmkit.logger import (
    LeveledLogger,
    LogLevel,
    Logger,
    LoguruLogger,
    NopLogger,
    format_keyvals,
    get_logger,
    scoped_logger,
)


@pytest.fixture
def sink():
    messages = []
    handler_id = loguru_logger.add(lambda message: messages.append(message.record), level="DEBUG")
    yield messages
    loguru_logger.remove(handler_id)


def test_parse_levels():
    assert LogLevel.parse("debug") is LogLevel.DEBUG
    assert LogLevel.parse("WARNING") is LogLevel.WARN
    assert LogLevel.parse(40) is LogLevel.ERROR
    with pytest.raises(ValueError):
        LogLevel.parse("loud")


def test_format_keyvals_pairs_and_odd_key():
    assert format_keyvals(("a", 1, "b", "x")) == "a=1 b=x"
    assert format_keyvals(("orphan",)) == "!BADKEY=orphan"


def test_level_filters_messages(sink):
    log = get_logger("test-filter", LogLevel.WARN)
    log.debug("hidden")
    log.warn("shown", "attempt", 2)
    messages = [record["message"] for record in sink if record["extra"].get("component") == "test-filter"]
    assert messages == ["shown attempt=2"]


def test_set_level_is_per_instance(sink):
    first = LoguruLogger("first", LogLevel.ERROR)
    second = LoguruLogger("second", LogLevel.ERROR)
    first.set_level("debug")
    first.debug("one")
    second.debug("two")
    components = [record["extra"].get("component") for record in sink]
    assert "first" in components
    assert "second" not in components


def test_logging_never_raises(sink):
    class Unprintable:
        def __str__(self):
            raise RuntimeError("nope")

    log = LoguruLogger("safe", LogLevel.DEBUG)
    log.error("bad value", "value", Unprintable())


def test_loggers_satisfy_protocol():
    assert isinstance(LoguruLogger(), Logger)
    assert isinstance(NopLogger(), Logger)


def test_child_logger_has_own_level(sink):
    parent = LoguruLogger("cmp", LogLevel.INFO)
    child = parent.child("openai")
    child.set_level("debug")
    child.debug("from child")
    parent.debug("from parent")
    assert parent.level is LogLevel.INFO
    components = [record["extra"].get("component") for record in sink]
    assert components == ["cmp.openai"]


def test_scoped_logger_wraps_loggers_without_children():
    received = []

    class ListLogger(NopLogger):
        def debug(self, msg, *keyvals):
            received.append(msg)

        def set_level(self, level):
            raise AssertionError("shared logger level must not change")

    scoped = scoped_logger(ListLogger(), "unit")
    assert isinstance(scoped, LeveledLogger)
    scoped.debug("kept")
    scoped.set_level("info")
    scoped.debug("dropped")
    assert received == ["kept"]
    assert isinstance(scoped_logger(LoguruLogger("x"), "unit"), LoguruLogger)

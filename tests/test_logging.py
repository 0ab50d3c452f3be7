"""Tests for the configuration event log.

The logger records structured entries for loads, saves, growth, and
failures so callers can see what happened to a configuration.
"""

from pathlib import Path

import pytest

from py_tinyconfig.errors import CapacityExceededError, ParseError
from py_tinyconfig.logging import LogEntry, Logger, LogLevel
from py_tinyconfig.persistence import load, save
from py_tinyconfig.store import EntryStore, StoreConfig

PARSE_LINE = 3


class TestLogLevel:
    """Verify log level ordering."""

    def test_levels_are_ordered(self) -> None:
        """DEBUG < INFO < WARNING < ERROR."""
        assert LogLevel.DEBUG < LogLevel.INFO
        assert LogLevel.INFO < LogLevel.WARNING
        assert LogLevel.WARNING < LogLevel.ERROR


class TestLogEntry:
    """Verify log entry structure."""

    def test_str_with_line(self) -> None:
        """An event on a known line is prefixed with path:line."""
        entry = LogEntry(
            level=LogLevel.ERROR,
            message="parse failed: missing value after '='",
            source="persistence",
            path="app.conf",
            line=PARSE_LINE,
        )
        assert str(entry) == "app.conf:3: [ERROR] persistence: parse failed: missing value after '='"

    def test_str_with_path_only(self) -> None:
        """A file-level event is prefixed with the path alone."""
        entry = LogEntry(level=LogLevel.INFO, message="loaded 3 entries", source="persistence", path="app.conf")
        assert str(entry) == "app.conf: [INFO] persistence: loaded 3 entries"

    def test_str_without_path(self) -> None:
        """In-memory events carry no location prefix."""
        entry = LogEntry(level=LogLevel.DEBUG, message="grew", source="store")
        assert entry.location == ""
        assert str(entry) == "[DEBUG] store: grew"

    def test_line_without_path_has_no_location(self) -> None:
        """A line number alone does not make a location."""
        entry = LogEntry(level=LogLevel.DEBUG, message="x", source="lexer", line=1)
        assert entry.location == ""


class TestLogger:
    """Verify the logger."""

    def test_entries_are_ordered(self) -> None:
        """Entries should be in chronological order."""
        logger = Logger()
        logger.log(LogLevel.INFO, "first", source="test")
        logger.log(LogLevel.INFO, "second", source="test")
        assert [e.message for e in logger.entries] == ["first", "second"]

    def test_filter_by_level(self) -> None:
        """Filtering should return only entries at or above the level."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "debug msg", source="test")
        logger.log(LogLevel.ERROR, "error msg", source="test")
        (entry,) = logger.filter(min_level=LogLevel.WARNING)
        assert entry.level is LogLevel.ERROR

    def test_filter_by_source(self) -> None:
        """Filtering by source should return matching entries."""
        logger = Logger()
        logger.log(LogLevel.INFO, "a", source="store")
        logger.log(LogLevel.INFO, "b", source="persistence")
        (entry,) = logger.filter(source="store")
        assert entry.message == "a"

    def test_filter_by_path(self) -> None:
        """Filtering by path keeps events about that file only."""
        logger = Logger()
        logger.log(LogLevel.INFO, "loaded", source="persistence", path="a.conf")
        logger.log(LogLevel.INFO, "loaded", source="persistence", path="b.conf")
        logger.log(LogLevel.DEBUG, "grew", source="store")
        (entry,) = logger.filter(path="b.conf")
        assert entry.path == "b.conf"

    def test_filter_combines_criteria(self) -> None:
        """Every given criterion must match."""
        logger = Logger()
        logger.log(LogLevel.ERROR, "bad", source="persistence", path="a.conf")
        logger.log(LogLevel.INFO, "ok", source="persistence", path="a.conf")
        logger.log(LogLevel.ERROR, "full", source="store")
        (entry,) = logger.filter(min_level=LogLevel.ERROR, path="a.conf")
        assert entry.message == "bad"

    def test_filter_returns_copy(self) -> None:
        """Mutating a filter result must not change the log."""
        logger = Logger()
        logger.log(LogLevel.INFO, "a", source="test")
        logger.filter().clear()
        assert len(logger.entries) == 1

    def test_clear(self) -> None:
        """Clearing should remove all entries."""
        logger = Logger()
        logger.log(LogLevel.INFO, "test", source="test")
        logger.clear()
        assert logger.entries == []


class TestComponentLogging:
    """Verify the store and persistence layers report events."""

    def test_load_and_save_are_logged(self, tmp_path: Path) -> None:
        """Loading and saving each leave an INFO entry naming the file."""
        path = tmp_path / "app.conf"
        path.write_text("a=1\nb=2\n")
        logger = Logger()
        store = load(path, logger=logger)
        save(store, path, logger=logger)
        info = logger.filter(min_level=LogLevel.INFO, source="persistence")
        assert [e.message for e in info] == ["loaded 2 entries", "saved 2 entries"]
        assert all(e.path == str(path) for e in info)

    def test_parse_failure_is_logged(self, tmp_path: Path) -> None:
        """A failed load is recorded at ERROR level with the failing line."""
        path = tmp_path / "bad.conf"
        path.write_text("# header\nok=1\nbad=&oops\n")
        logger = Logger()
        with pytest.raises(ParseError):
            load(path, logger=logger)
        (entry,) = logger.filter(min_level=LogLevel.ERROR)
        assert entry.line == PARSE_LINE
        assert entry.location == f"{path}:{PARSE_LINE}"
        assert entry.message.startswith("parse failed: invalid value start")

    def test_growth_is_logged(self) -> None:
        """Slot-table growth is recorded at DEBUG level."""
        logger = Logger()
        store = EntryStore(StoreConfig.growable(initial_capacity=1, grow_by=1), logger=logger)
        store.set("a", "1")
        store.set("b", "2")
        assert any("slot table grew" in e.message for e in logger.filter(source="store"))

    def test_capacity_rejection_is_logged(self) -> None:
        """A rejected insert into a full arena is recorded as a warning."""
        logger = Logger()
        store = EntryStore(StoreConfig.fixed(max_entries=1), logger=logger)
        store.set("a", "1")
        with pytest.raises(CapacityExceededError):
            store.set("b", "2")
        (entry,) = logger.filter(min_level=LogLevel.WARNING)
        assert entry.level is LogLevel.WARNING
        assert "full" in entry.message

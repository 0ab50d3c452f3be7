"""Event log for what the library did to a configuration.

Callers that want to know why a file failed to load, when a store had
to grow, or which file a save went to pass a ``Logger`` into ``load``,
``ConfigFile`` or ``EntryStore`` and read it back afterwards.  Nothing
is printed or written anywhere; the log is a list in memory.

Each record is pinned to where it happened in configuration terms: the
component that reported it, the file involved, and for parse failures
the line.  ``str(entry)`` reads like a compiler diagnostic::

    app.conf:3: [ERROR] persistence: parse failed: missing value after '='
    [DEBUG] store: slot table grew to 30 entries
"""

from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """How serious an event is; higher values are more severe."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """One event reported by a component.

    Attributes:
        level: The severity of this event.
        message: What happened.
        source: The reporting component: "lexer", "store", or "persistence".
        path: The configuration file involved, or "" for in-memory work.
        line: The 1-based line in *path* the event refers to, if any.

    """

    level: LogLevel
    message: str
    source: str
    path: str = ""
    line: int | None = None

    @property
    def location(self) -> str:
        """Return ``path:line``, ``path``, or "" when the event has no file."""
        if not self.path:
            return ""
        return f"{self.path}:{self.line}" if self.line is not None else self.path

    def __str__(self) -> str:
        """Format as ``location: [LEVEL] source: message``."""
        text = f"[{self.level.name}] {self.source}: {self.message}"
        return f"{self.location}: {text}" if self.location else text


class Logger:
    """In-memory list of ``LogEntry`` records, oldest first."""

    def __init__(self) -> None:
        """Create an empty logger."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return a copy of every entry in the order it was logged."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        path: str = "",
        line: int | None = None,
    ) -> None:
        """Record an event.

        Args:
            level: Severity of the event.
            message: What happened.
            source: Component reporting the event.
            path: Configuration file the event concerns.
            line: Line within *path*, for events tied to one line.

        """
        self._entries.append(LogEntry(level=level, message=message, source=source, path=path, line=line))

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        path: str | None = None,
    ) -> list[LogEntry]:
        """Return the entries that match every given criterion.

        Args:
            min_level: Keep entries at or above this level.
            source: Keep entries from this component.
            path: Keep entries about this configuration file.

        """
        return [
            e
            for e in self._entries
            if (min_level is None or e.level >= min_level)
            and (source is None or e.source == source)
            and (path is None or e.path == path)
        ]

    def clear(self) -> None:
        """Forget every entry."""
        self._entries.clear()

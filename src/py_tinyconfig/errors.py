"""Error taxonomy for configuration loading, parsing, and storage.

Every failure the library reports derives from ``ConfigError`` so a
caller can catch the whole family with one clause, or branch on the
specific subclass:

- ``ConfigIOError`` — the file could not be read or written.
- ``ParseError`` — the text is not valid ``key=value`` syntax.
- ``CapacityExceededError`` — a fixed bound (entry count or line size)
  would be exceeded.
- ``OutOfMemoryError`` — a growable buffer could not be allocated.
- ``InvalidEntryError`` — a key or value cannot be represented in the
  file format.
- ``StoreClosedError`` — the store has already released its buffers.

A missing key is *not* an error: lookups return ``None``.
"""


class ConfigError(Exception):
    """Base class for every error raised by py_tinyconfig."""


class ConfigIOError(ConfigError):
    """Raise when a configuration file cannot be opened, read, or written."""


class ParseError(ConfigError):
    """Raise when configuration text is malformed.

    Attributes:
        line: 1-based line number where the problem was found.
        reason: Short description without the line prefix.

    """

    def __init__(self, reason: str, *, line: int) -> None:
        """Create a parse error for *reason* on *line*."""
        super().__init__(f"line {line}: {reason}")
        self.reason = reason
        self.line = line


class CapacityExceededError(ConfigError):
    """Raise when a store's entry or line-size bound would be exceeded."""


class OutOfMemoryError(ConfigError):
    """Raise when an entry buffer cannot be allocated."""


class InvalidEntryError(ConfigError, ValueError):
    """Raise when a key or value cannot be written in the file format."""


class StoreClosedError(ConfigError):
    """Raise when a closed store is used."""

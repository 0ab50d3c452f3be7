"""py_tinyconfig — a small ``key=value`` configuration reader and writer.

Re-exports public symbols so callers can write::

    from py_tinyconfig import load, save

    store = load("app.conf")
    port = store.get("port")
    store.set("port", "9090")
    save(store, "app.conf")
"""

from py_tinyconfig.errors import (
    CapacityExceededError,
    ConfigError,
    ConfigIOError,
    InvalidEntryError,
    OutOfMemoryError,
    ParseError,
    StoreClosedError,
)
from py_tinyconfig.lexer import Lexer, Pair, Token, TokenKind, parse
from py_tinyconfig.logging import LogEntry, Logger, LogLevel
from py_tinyconfig.persistence import ConfigFile, dumps, load, loads, save
from py_tinyconfig.store import CapacityPolicy, EntryStore, StoreConfig

__all__ = [
    "CapacityExceededError",
    "CapacityPolicy",
    "ConfigError",
    "ConfigFile",
    "ConfigIOError",
    "EntryStore",
    "InvalidEntryError",
    "Lexer",
    "LogEntry",
    "LogLevel",
    "Logger",
    "OutOfMemoryError",
    "Pair",
    "ParseError",
    "StoreClosedError",
    "StoreConfig",
    "Token",
    "TokenKind",
    "dumps",
    "load",
    "loads",
    "parse",
    "save",
]

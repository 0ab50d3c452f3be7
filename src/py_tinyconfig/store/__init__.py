"""Entry storage — ordered table, entry buffers, and the fixed arena.

Re-exports public symbols so callers can write::

    from py_tinyconfig.store import EntryStore, StoreConfig
"""

from py_tinyconfig.store.arena import Arena
from py_tinyconfig.store.config import (
    DEFAULT_GROW_BY,
    DEFAULT_INITIAL_CAPACITY,
    DEFAULT_LINE_SIZE,
    DEFAULT_MAX_ENTRIES,
    CapacityPolicy,
    StoreConfig,
)
from py_tinyconfig.store.entry import Entry
from py_tinyconfig.store.table import EntryStore

__all__ = [
    "DEFAULT_GROW_BY",
    "DEFAULT_INITIAL_CAPACITY",
    "DEFAULT_LINE_SIZE",
    "DEFAULT_MAX_ENTRIES",
    "Arena",
    "CapacityPolicy",
    "Entry",
    "EntryStore",
    "StoreConfig",
]

"""EntryStore — the ordered table of configuration entries.

The store keeps entries in insertion order (parse order first, then the
order new keys were ``set``) and finds them with a linear scan, so the
first entry with a matching key always wins.

Two capacity policies share one implementation:

- **Growable** — the slot table starts at ``initial_capacity`` and grows
  by ``grow_by`` whenever it is full.  Each entry owns a ``bytearray``
  that starts at ``line_size`` bytes and doubles when an update no
  longer fits.  Growth copies the line into the new buffer, so every
  existing value survives byte for byte.
- **Fixed** — entries live in the slots of an ``Arena`` reserved at
  construction.  A new key when the arena is full, or a line larger than
  a slot, raises ``CapacityExceededError``; nothing is ever truncated.

Usage contract for views: ``view(key)`` returns a ``memoryview`` into
the entry's buffer.  Moving the entry to a larger buffer, deleting the
key, closing the store, or replacing it through a reload leaves earlier
views pointing at storage the store no longer uses.  In a fixed store a
deleted key's slot is zeroed and handed to the next new key, so a view
kept past ``delete`` reads whatever that key writes there.  ``get``
returns an independent ``str`` and is unaffected.

Every mutating operation is all-or-nothing: sizes are checked and new
buffers allocated before anything in the table changes.
"""

from collections.abc import Iterable, Iterator
from typing import Any, NoReturn

from py_tinyconfig.errors import (
    CapacityExceededError,
    InvalidEntryError,
    OutOfMemoryError,
    StoreClosedError,
)
from py_tinyconfig.lexer import Pair, is_valid_key, needs_quotes
from py_tinyconfig.logging import Logger, LogLevel
from py_tinyconfig.store.arena import Arena
from py_tinyconfig.store.config import StoreConfig
from py_tinyconfig.store.entry import Buffer, Entry, line_size

_SOURCE = "store"


def _encode_entry(key: str, value: str) -> bytes:
    """Return *value* as UTF-8 once the pair is known to be writable to a file.

    Raises:
        InvalidEntryError: If the key or value could not be read back.

    """
    if not is_valid_key(key):
        msg = f"Invalid key {key!r}: must start with a letter and use only [A-Za-z0-9_]"
        raise InvalidEntryError(msg)
    try:
        raw = value.encode("utf-8")
    except UnicodeEncodeError as e:
        msg = f"Value for {key!r} is not encodable as UTF-8: {e.reason}"
        raise InvalidEntryError(msg) from e
    if "\n" in value or "\r" in value:
        msg = f"Value for {key!r} must not contain line breaks"
        raise InvalidEntryError(msg)
    if '"' in value and needs_quotes(value):
        msg = f"Value for {key!r} needs quoting but contains '\"'"
        raise InvalidEntryError(msg)
    return raw


class EntryStore:
    """An insertion-ordered table of ``key=value`` entries."""

    def __init__(self, config: StoreConfig | None = None, *, logger: Logger | None = None) -> None:
        """Create an empty store.

        Args:
            config: Capacity policy and sizes (defaults to growable).
            logger: Optional event log for growth and capacity events.

        Raises:
            OutOfMemoryError: If a fixed store's arena cannot be reserved.

        """
        self._config = config or StoreConfig()
        self._logger = logger
        self._entries: list[Entry] = []
        self._slots: dict[str, int] = {}
        self._allocated = 0
        self._closed = False
        if self._config.is_fixed:
            self._arena: Arena | None = Arena(
                slot_count=self._config.max_entries,
                slot_size=self._config.line_size,
            )
            self._capacity = self._config.max_entries
        else:
            self._arena = None
            self._capacity = self._config.initial_capacity

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[Pair | tuple[str, str]],
        config: StoreConfig | None = None,
        *,
        logger: Logger | None = None,
    ) -> "EntryStore":
        """Build a store holding *pairs* in order.

        New keys are appended without searching the table.  A key that
        repeats in *pairs* updates its first entry, as ``set`` would.

        Raises:
            InvalidEntryError: If a pair cannot be written to a file.
            CapacityExceededError: If the pairs do not fit a fixed store.
            OutOfMemoryError: If a growable store runs out of memory.

        """
        store = cls(config, logger=logger)
        seen: set[str] = set()
        for pair in pairs:
            key, value = (pair.key, pair.value) if isinstance(pair, Pair) else pair
            raw = _encode_entry(key, value)
            if key in seen:
                entry = store._find(key)
                if entry is not None:
                    store._update(entry, raw)
                continue
            store._append(key, raw)
            seen.add(key)
        return store

    # -- Introspection ---------------------------------------------------------

    @property
    def config(self) -> StoreConfig:
        """Return the store's sizing configuration."""
        return self._config

    @property
    def capacity(self) -> int:
        """Return the number of entry slots currently available."""
        return self._capacity

    @property
    def allocated_bytes(self) -> int:
        """Return the bytes held by entry buffers."""
        return self._allocated

    @property
    def closed(self) -> bool:
        """Return True once ``close`` has been called."""
        return self._closed

    def stats(self) -> dict[str, Any]:
        """Return usage statistics for this store."""
        self._check_open()
        stats: dict[str, Any] = {
            "policy": str(self._config.policy),
            "size": len(self._entries),
            "capacity": self._capacity,
            "allocated_bytes": self._allocated,
        }
        if self._arena is not None:
            stats["arena"] = self._arena.stats()
        return stats

    # -- Lookup ----------------------------------------------------------------

    def _find(self, key: str) -> Entry | None:
        for entry in self._entries:
            if entry.key == key:
                return entry
        return None

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value for *key*, or *default* if it is not stored."""
        self._check_open()
        entry = self._find(key)
        return entry.value if entry is not None else default

    def view(self, key: str) -> memoryview | None:
        """Return a read-only view of *key*'s value bytes, or None.

        See the module docstring for when a view is invalidated.
        """
        self._check_open()
        entry = self._find(key)
        return entry.view() if entry is not None else None

    def __contains__(self, key: object) -> bool:
        """Return True if *key* is stored."""
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        """Return the number of entries."""
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        """Iterate over keys in storage order."""
        self._check_open()
        return iter([entry.key for entry in self._entries])

    def keys(self) -> list[str]:
        """Return all keys in storage order."""
        return list(self)

    def items(self) -> list[tuple[str, str]]:
        """Return all (key, value) pairs in storage order."""
        self._check_open()
        return [(entry.key, entry.value) for entry in self._entries]

    # -- Mutation --------------------------------------------------------------

    def set(self, key: str, value: str) -> str:
        """Set *key* to *value*, creating the entry if it is absent.

        Updating keeps the entry's position; creating appends at the end.

        Returns:
            The stored value.

        Raises:
            InvalidEntryError: If the key or value cannot be written to a
                configuration file.
            CapacityExceededError: If a fixed store is full, or the line
                exceeds the slot size or ``max_line_size``.
            OutOfMemoryError: If a growable buffer cannot be allocated.

        """
        self._check_open()
        raw = _encode_entry(key, value)
        entry = self._find(key)
        if entry is None:
            self._append(key, raw)
        else:
            self._update(entry, raw)
        return value

    def delete(self, key: str) -> None:
        """Remove *key* and release its buffer.

        Views of the deleted value must not be used afterwards; in a fixed
        store the slot is reused by the next new key.

        Raises:
            KeyError: If *key* is not stored.

        """
        self._check_open()
        entry = self._find(key)
        if entry is None:
            raise KeyError(key)
        self._entries.remove(entry)
        if self._arena is not None:
            self._arena.free(self._slots.pop(key))
        else:
            self._allocated -= entry.allocated
        entry.release()

    def close(self) -> None:
        """Release every entry buffer.  Further use raises StoreClosedError."""
        for entry in self._entries:
            entry.release()
        self._entries.clear()
        self._slots.clear()
        self._arena = None
        self._allocated = 0
        self._closed = True

    def __enter__(self) -> "EntryStore":
        """Return the store for use in a ``with`` block."""
        return self

    def __exit__(self, *_exc: object) -> None:
        """Close the store on leaving a ``with`` block."""
        self.close()

    # -- Internals -------------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            msg = "Store is closed"
            raise StoreClosedError(msg)

    def _append(self, key: str, raw: bytes) -> None:
        needed = line_size(key.encode("ascii"), raw)
        if self._arena is not None:
            self._append_fixed(self._arena, key, raw, needed)
            return

        self._check_line_limit(key, needed)
        size = self._grown_size(self._config.line_size, needed)
        buffer = self._allocate(size, key)
        if len(self._entries) == self._capacity:
            self._capacity += self._config.grow_by
            self._log(LogLevel.DEBUG, f"slot table grew to {self._capacity} entries")
        self._entries.append(Entry(key, raw, buffer))

    def _append_fixed(self, arena: Arena, key: str, raw: bytes, needed: int) -> None:
        if needed > arena.slot_size:
            self._reject(f"Line for {key!r} needs {needed} bytes, slot size is {arena.slot_size}")
        if arena.is_full:
            self._reject(f"Store is full ({arena.slot_count} entries), cannot add {key!r}")
        slot = arena.allocate()
        self._slots[key] = slot
        self._entries.append(Entry(key, raw, arena.window(slot)))

    def _update(self, entry: Entry, raw: bytes) -> None:
        if entry.fits(raw):
            entry.replace(raw)
            return

        needed = entry.needed(raw)
        if self._arena is not None:
            self._reject(f"Line for {entry.key!r} needs {needed} bytes, slot size is {self._arena.slot_size}")
        self._check_line_limit(entry.key, needed)
        size = self._grown_size(entry.allocated, needed)
        buffer = self._allocate(size, entry.key, freeing=entry.allocated)
        old = entry.allocated
        entry.move_to(buffer, raw)
        self._allocated -= old
        self._log(LogLevel.DEBUG, f"buffer for {entry.key!r} grew from {old} to {size} bytes")

    def _check_line_limit(self, key: str, needed: int) -> None:
        limit = self._config.max_line_size
        if limit is not None and needed > limit:
            self._reject(f"Line for {key!r} needs {needed} bytes, limit is {limit}")

    @staticmethod
    def _grown_size(current: int, needed: int) -> int:
        """Double *current* until it holds *needed* bytes."""
        size = current
        while size < needed:
            size *= 2
        return size

    def _allocate(self, size: int, key: str, *, freeing: int = 0) -> Buffer:
        """Allocate a growable entry buffer and charge it to the budget."""
        limit = self._config.memory_limit
        if limit is not None and self._allocated - freeing + size > limit:
            msg = f"Cannot allocate {size} bytes for {key!r}: memory limit of {limit} bytes reached"
            self._log(LogLevel.ERROR, msg)
            raise OutOfMemoryError(msg)
        try:
            buffer = bytearray(size)
        except MemoryError as e:
            msg = f"Cannot allocate {size} bytes for {key!r}"
            self._log(LogLevel.ERROR, msg)
            raise OutOfMemoryError(msg) from e
        self._allocated += size
        return buffer

    def _reject(self, msg: str) -> NoReturn:
        self._log(LogLevel.WARNING, msg)
        raise CapacityExceededError(msg)

    def _log(self, level: LogLevel, message: str) -> None:
        if self._logger is not None:
            self._logger.log(level, message, source=_SOURCE)

    def __repr__(self) -> str:
        """Return a debugging representation."""
        return f"EntryStore(policy={self._config.policy}, size={len(self._entries)}, capacity={self._capacity})"

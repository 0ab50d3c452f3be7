"""Persistence — read configuration files into stores and write them back.

Loading reads the *whole* file into one buffer, lexes it, and builds a
fresh ``EntryStore``.  There is no streaming: either the entire file
parses and a complete store comes back, or an error is raised and no
store exists.

    - ``load(path)`` / ``loads(data)`` — file or bytes → store.
    - ``save(store, path)`` / ``dumps(store)`` — store → file or text.
    - ``ConfigFile(path)`` — a handle that reloads the same path on demand.

Saving is **lossy**: comments, blank lines, and spacing from the
original file are gone; only the pairs and their order survive.  Values
that would not read back unchanged as bare text are written in double
quotes, so ``save`` followed by ``load`` always reproduces the pairs.
"""

from pathlib import Path

from py_tinyconfig.errors import ConfigIOError, ParseError
from py_tinyconfig.lexer import needs_quotes, parse
from py_tinyconfig.logging import Logger, LogLevel
from py_tinyconfig.store import EntryStore, StoreConfig

_SOURCE = "persistence"


def _log(
    logger: Logger | None,
    level: LogLevel,
    message: str,
    path: Path | None = None,
    *,
    line: int | None = None,
) -> None:
    if logger is not None:
        logger.log(level, message, source=_SOURCE, path=str(path) if path else "", line=line)


def loads(
    data: bytes | str,
    *,
    config: StoreConfig | None = None,
    logger: Logger | None = None,
) -> EntryStore:
    """Parse configuration text into a new store.

    Args:
        data: File contents; ``str`` is encoded as UTF-8.
        config: Capacity policy for the new store.
        logger: Optional event log.

    Returns:
        A store holding every pair in file order.  Empty input gives an
        empty store.

    Raises:
        ParseError: If the text is malformed.
        CapacityExceededError: If the pairs do not fit a fixed store.
        OutOfMemoryError: If a growable store cannot allocate.

    """
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    pairs = parse(raw, logger=logger)
    return EntryStore.from_pairs(pairs, config, logger=logger)


def load(
    path: Path | str,
    *,
    config: StoreConfig | None = None,
    logger: Logger | None = None,
) -> EntryStore:
    """Read a configuration file into a new store.

    Args:
        path: The file to read.
        config: Capacity policy for the new store.
        logger: Optional event log.

    Raises:
        ConfigIOError: If the file cannot be read or is empty.
        ParseError: If the file is malformed.
        CapacityExceededError: If the pairs do not fit a fixed store.
        OutOfMemoryError: If a growable store cannot allocate.

    """
    path = Path(path)
    try:
        raw = path.read_bytes()
    except OSError as e:
        msg = f"Cannot read {path}: {e.strerror or e}"
        _log(logger, LogLevel.ERROR, msg, path)
        raise ConfigIOError(msg) from e
    if not raw:
        msg = f"Cannot load {path}: file is empty"
        _log(logger, LogLevel.ERROR, msg, path)
        raise ConfigIOError(msg)

    try:
        store = loads(raw, config=config, logger=logger)
    except ParseError as e:
        _log(logger, LogLevel.ERROR, f"parse failed: {e.reason}", path, line=e.line)
        raise
    _log(logger, LogLevel.INFO, f"loaded {len(store)} entries", path)
    return store


def _format_value(value: str) -> str:
    return f'"{value}"' if needs_quotes(value) else value


def dumps(store: EntryStore) -> str:
    """Return the text ``save`` would write for *store*.

    One ``key=value`` line per entry, in store order, each ending in a
    newline.
    """
    return "".join(f"{key}={_format_value(value)}\n" for key, value in store.items())


def save(store: EntryStore, path: Path | str, *, logger: Logger | None = None) -> None:
    """Write *store* to *path*, replacing any existing content.

    Raises:
        ConfigIOError: If the file cannot be written.
        StoreClosedError: If the store has been closed.

    """
    path = Path(path)
    text = dumps(store)
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        msg = f"Cannot write {path}: {e.strerror or e}"
        _log(logger, LogLevel.ERROR, msg, path)
        raise ConfigIOError(msg) from e
    _log(logger, LogLevel.INFO, f"saved {len(store)} entries", path)


class ConfigFile:
    """A configuration file bound to its path, reloadable in place.

    ``reload()`` re-reads the file and swaps in a new store only after
    the whole file parsed.  A failed reload raises and leaves the
    current store untouched; a successful one closes the old store, so
    views obtained from it must not be used afterwards.
    """

    def __init__(
        self,
        path: Path | str,
        *,
        config: StoreConfig | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Load *path* immediately.

        Raises:
            ConfigIOError: If the file cannot be read or is empty.
            ParseError: If the file is malformed.

        """
        self._path = Path(path)
        self._config = config
        self._logger = logger
        self._store = load(self._path, config=config, logger=logger)
        self._generation = 1

    @property
    def path(self) -> Path:
        """Return the bound file path."""
        return self._path

    @property
    def store(self) -> EntryStore:
        """Return the current store."""
        return self._store

    @property
    def generation(self) -> int:
        """Return how many times the file has been loaded successfully."""
        return self._generation

    def reload(self) -> EntryStore:
        """Re-read the file and replace the current store.

        Returns:
            The new store.

        Raises:
            ConfigIOError: If the file cannot be read or is empty.
            ParseError: If the file is malformed.

        """
        fresh = load(self._path, config=self._config, logger=self._logger)
        old, self._store = self._store, fresh
        old.close()
        self._generation += 1
        _log(self._logger, LogLevel.INFO, f"reloaded (generation {self._generation})", self._path)
        return fresh

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return *key* from the current store."""
        return self._store.get(key, default)

    def set(self, key: str, value: str) -> str:
        """Set *key* in the current store (not written until ``save``)."""
        return self._store.set(key, value)

    def save(self, path: Path | str | None = None) -> None:
        """Write the current store to *path*, or back to the bound path."""
        save(self._store, self._path if path is None else path, logger=self._logger)

    def close(self) -> None:
        """Close the current store."""
        self._store.close()

    def __enter__(self) -> "ConfigFile":
        """Return the handle for use in a ``with`` block."""
        return self

    def __exit__(self, *_exc: object) -> None:
        """Close the current store on leaving a ``with`` block."""
        self.close()

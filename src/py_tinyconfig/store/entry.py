"""Entry — one ``key=value`` line encoded in a single buffer.

An entry's buffer holds the whole line plus a terminator::

    k e y = v a l u e \\0 . . . (unused allocation)
    ^     ^ ^
    0     | offset = len(key) + 1
          separator

The **offset header** records where the value starts, so reading a value
is a slice, not a scan past the key.  The entry keeps the value length
next to the offset; the terminator byte after the value is kept in
place so the used part of the buffer is always one printable line.

Entries do not allocate.  The store hands each entry a buffer (a private
``bytearray`` in growable mode, an arena window in fixed mode) and
decides when a value no longer fits and a new buffer is needed.
"""

from typing import TypeAlias

_SEPARATOR = ord("=")
_TERMINATOR = 0

Buffer: TypeAlias = bytearray | memoryview


def line_size(key: bytes, value: bytes) -> int:
    """Return the bytes needed to store ``key=value`` plus the terminator."""
    return len(key) + 1 + len(value) + 1


class Entry:
    """A key with a mutable value, stored in one buffer."""

    def __init__(self, key: str, value: bytes, buffer: Buffer) -> None:
        """Encode ``key=value`` into *buffer*.

        Args:
            key: The entry's key; fixed for the entry's lifetime.
            value: Encoded value bytes.
            buffer: Destination buffer, at least ``line_size`` bytes.

        """
        self._key = key
        self._key_bytes = key.encode("ascii")
        self._offset = len(self._key_bytes) + 1
        self._length = 0
        self._buffer = buffer
        self._write_line(buffer, value)

    @property
    def key(self) -> str:
        """Return the entry's key."""
        return self._key

    @property
    def offset(self) -> int:
        """Return the byte index of the value's first byte."""
        return self._offset

    @property
    def allocated(self) -> int:
        """Return the size of the entry's buffer in bytes."""
        return len(self._buffer)

    @property
    def value(self) -> str:
        """Return a decoded copy of the value."""
        return self.value_bytes().decode("utf-8")

    def value_bytes(self) -> bytes:
        """Return a copy of the raw value bytes."""
        return bytes(self._buffer[self._offset : self._offset + self._length])

    def view(self) -> memoryview:
        """Return a read-only view of the value bytes, without copying.

        The view aliases the entry's current buffer.  It goes stale when
        the value is replaced in place and stops tracking the entry
        altogether when the entry moves to a larger buffer.
        """
        return memoryview(self._buffer)[self._offset : self._offset + self._length].toreadonly()

    def line(self) -> bytes:
        """Return the stored ``key=value`` bytes without the terminator."""
        return bytes(self._buffer[: self._offset + self._length])

    def fits(self, value: bytes) -> bool:
        """Return True if *value* can be written without a new buffer."""
        return line_size(self._key_bytes, value) <= len(self._buffer)

    def needed(self, value: bytes) -> int:
        """Return the buffer size required to hold *value*."""
        return line_size(self._key_bytes, value)

    def replace(self, value: bytes) -> None:
        """Overwrite the value in the current buffer.

        The caller must have checked ``fits`` first.
        """
        end = self._offset + len(value)
        self._buffer[self._offset : end] = value
        self._buffer[end] = _TERMINATOR
        self._length = len(value)

    def move_to(self, buffer: Buffer, value: bytes) -> None:
        """Re-encode the line into a new, larger *buffer* with *value*."""
        self._write_line(buffer, value)
        self._buffer = buffer

    def release(self) -> None:
        """Drop the reference to the entry's buffer."""
        self._buffer = bytearray()
        self._length = 0

    def _write_line(self, buffer: Buffer, value: bytes) -> None:
        key_end = len(self._key_bytes)
        buffer[:key_end] = self._key_bytes
        buffer[key_end] = _SEPARATOR
        end = self._offset + len(value)
        buffer[self._offset : end] = value
        buffer[end] = _TERMINATOR
        self._length = len(value)

    def __repr__(self) -> str:
        """Return a debugging representation."""
        return f"Entry({self._key!r}, offset={self._offset}, allocated={self.allocated})"

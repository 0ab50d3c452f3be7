"""Cursor over an immutable byte buffer with one-byte lookahead.

The lexer never indexes the input directly.  It asks a ``Cursor`` what
the current byte is (``peek``), what the next one is (``peek_next``),
and moves forward (``advance``).  The cursor tracks the 1-based line
number as it crosses ``\\n`` bytes, so every token and every error can
say where it came from.

End of input is reported as ``EOF`` (an empty ``bytes``) rather than by
raising, which keeps the lexer's loops free of bounds checks.
"""

from dataclasses import dataclass

EOF = b""

NEWLINE = b"\n"
BLANKS = frozenset(b" \t\r")


@dataclass(frozen=True)
class Span:
    """A half-open byte range ``[start, end)`` into the source buffer."""

    start: int
    end: int

    def __len__(self) -> int:
        """Return the number of bytes covered."""
        return self.end - self.start

    def slice(self, data: bytes) -> bytes:
        """Return the bytes of *data* covered by this span."""
        return data[self.start : self.end]


class Cursor:
    """A read position over *data*.

    Each lexer owns its own cursor; two lexers over the same buffer never
    share a position.
    """

    def __init__(self, data: bytes) -> None:
        """Create a cursor at the first byte of *data*.

        Args:
            data: The buffer to scan.  It is copied to ``bytes`` so later
                mutation by the caller cannot change what is scanned.

        """
        self._data = bytes(data)
        self._pos = 0
        self._line = 1

    @property
    def data(self) -> bytes:
        """Return the buffer being scanned."""
        return self._data

    @property
    def pos(self) -> int:
        """Return the offset of the current byte."""
        return self._pos

    @property
    def line(self) -> int:
        """Return the 1-based line of the current byte."""
        return self._line

    @property
    def at_end(self) -> bool:
        """Return True if every byte has been consumed."""
        return self._pos >= len(self._data)

    def peek(self) -> bytes:
        """Return the current byte, or ``EOF``."""
        return self._data[self._pos : self._pos + 1]

    def peek_next(self) -> bytes:
        """Return the byte after the current one, or ``EOF``."""
        return self._data[self._pos + 1 : self._pos + 2]

    def advance(self) -> bytes:
        """Consume and return the current byte (``EOF`` at the end)."""
        byte = self.peek()
        if byte:
            self._pos += 1
            if byte == NEWLINE:
                self._line += 1
        return byte

    def skip_blanks(self) -> None:
        """Consume spaces, tabs, and carriage returns."""
        while not self.at_end and self._data[self._pos] in BLANKS:
            self._pos += 1

    def skip_line(self) -> None:
        """Consume up to, but not including, the next newline."""
        end = self._data.find(NEWLINE, self._pos)
        self._pos = len(self._data) if end == -1 else end

    def span_from(self, start: int) -> Span:
        """Return the span from *start* to the current position."""
        return Span(start, self._pos)

"""Tests for the single-buffer entry encoding.

Each entry stores ``key=value\\0`` in one buffer and records where the
value starts, so reading a value never scans past the key.
"""

from py_tinyconfig.store.entry import Entry, line_size

BUFFER_SIZE = 32
KEY = "port"
VALUE_OFFSET = len(KEY) + 1


def _entry(value: bytes = b"8080") -> tuple[Entry, bytearray]:
    buffer = bytearray(BUFFER_SIZE)
    return Entry(KEY, value, buffer), buffer


class TestLineSize:
    """Verify the space a line needs."""

    def test_counts_separator_and_terminator(self) -> None:
        """key + '=' + value + terminator."""
        assert line_size(b"ab", b"xyz") == len("ab=xyz") + 1


class TestEntry:
    """Verify the buffer layout and value access."""

    def test_buffer_layout(self) -> None:
        """The buffer holds key, '=', value, then a zero byte."""
        _, buffer = _entry()
        assert bytes(buffer[: len("port=8080") + 1]) == b"port=8080\x00"

    def test_offset_follows_separator(self) -> None:
        """The offset header points just past '='."""
        entry, buffer = _entry()
        assert entry.offset == VALUE_OFFSET
        assert buffer[entry.offset - 1] == ord("=")

    def test_value(self) -> None:
        """The value is read back through the offset."""
        entry, _ = _entry()
        assert entry.value == "8080"
        assert entry.line() == b"port=8080"

    def test_view_is_zero_copy(self) -> None:
        """A view aliases the buffer and cannot be written."""
        entry, buffer = _entry()
        view = entry.view()
        assert view.readonly
        buffer[VALUE_OFFSET] = ord("9")
        assert bytes(view) == b"9080"

    def test_replace_shorter_value(self) -> None:
        """A shorter value is terminated right after its last byte."""
        entry, buffer = _entry()
        entry.replace(b"80")
        assert entry.value == "80"
        assert buffer[VALUE_OFFSET + 2] == 0

    def test_fits(self) -> None:
        """fits() compares the whole line with the allocation."""
        entry, _ = _entry()
        room = BUFFER_SIZE - VALUE_OFFSET - 1
        assert entry.fits(b"x" * room)
        assert not entry.fits(b"x" * (room + 1))

    def test_move_to_larger_buffer(self) -> None:
        """Moving re-encodes key and value into the new buffer."""
        entry, old = _entry()
        stale = entry.view()
        bigger = bytearray(BUFFER_SIZE * 2)
        value = b"y" * BUFFER_SIZE
        entry.move_to(bigger, value)
        assert entry.allocated == BUFFER_SIZE * 2
        assert entry.value_bytes() == value
        assert bytes(bigger[:VALUE_OFFSET]) == b"port="
        assert bytes(stale) == b"8080"
        assert bytes(old[:VALUE_OFFSET]) == b"port="

    def test_release(self) -> None:
        """A released entry holds no buffer."""
        entry, _ = _entry()
        entry.release()
        assert entry.allocated == 0
        assert entry.value == ""

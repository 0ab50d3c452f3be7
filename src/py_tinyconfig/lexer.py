"""Lexer for ``key=value`` configuration text.

The grammar is line-oriented and needs only one byte of lookahead::

    file    := line*
    line    := blank* (pair)? blank* comment? NEWLINE
    pair    := key blank* "=" blank* value
    key     := LETTER (LETTER | DIGIT | "_")*
    value   := '"' (any byte except '"', CR, or LF)* '"'
             | (LETTER | DIGIT | "-" | ".") (any byte except CR, LF, "#")*
    comment := "#" (any byte except NEWLINE)*

Unquoted values have trailing blanks trimmed.  Quoted values keep their
content verbatim, including spaces and ``#``, and lose the quotes.

The lexer works in two layers:

- ``Lexer.tokens()`` yields the raw token stream (keys, separators,
  values, comments) as spans into the source buffer.
- ``Lexer.pairs()`` folds that stream into decoded ``Pair`` records.

``parse()`` is the entry point the rest of the package uses: it runs
the lexer over a whole buffer and rejects duplicate keys.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from py_tinyconfig.errors import ParseError
from py_tinyconfig.logging import Logger, LogLevel
from py_tinyconfig.scanner import EOF, NEWLINE, Cursor, Span

_SOURCE = "lexer"

_QUOTE = b'"'
_COMMENT = b"#"
_SEPARATOR = b"="
_CR = b"\r"

_LETTERS = frozenset(b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz")
_DIGITS = frozenset(b"0123456789")
_KEY_BYTES = _LETTERS | _DIGITS | frozenset(b"_")
_VALUE_START = _LETTERS | _DIGITS | frozenset(b"-.")
_VALUE_STOP = frozenset(b"\r\n#")
_TRAILING = frozenset(b" \t")


class TokenKind(StrEnum):
    """The four kinds of token in a configuration file."""

    KEY = "key"
    SEPARATOR = "separator"
    VALUE = "value"
    COMMENT = "comment"


@dataclass(frozen=True)
class Token:
    """One lexical token.

    Attributes:
        kind: What the token is.
        span: Bytes of the token in the source buffer.  For quoted values
            the span excludes the quotes.
        line: 1-based line the token starts on.
        quoted: True for a value that was written in double quotes.

    """

    kind: TokenKind
    span: Span
    line: int
    quoted: bool = False


@dataclass(frozen=True)
class Pair:
    """A decoded key/value pair with its source location."""

    key: str
    value: str
    line: int
    key_span: Span
    value_span: Span


def is_valid_key(key: str) -> bool:
    """Return True if *key* would lex as a complete key token."""
    if not key.isascii():
        return False
    raw = key.encode("ascii")
    return bool(raw) and raw[0] in _LETTERS and all(b in _KEY_BYTES for b in raw)


def needs_quotes(value: str) -> bool:
    """Return True if *value* would not lex back unchanged when written bare."""
    raw = value.encode("utf-8")
    if not raw or raw[0] not in _VALUE_START:
        return True
    return _COMMENT[0] in raw or raw[-1] in _TRAILING


def _describe(byte: bytes) -> str:
    if byte == EOF:
        return "end of input"
    if byte == NEWLINE:
        return "end of line"
    return repr(byte.decode("latin-1"))


class Lexer:
    """Tokenize one configuration buffer.

    A lexer owns its ``Cursor``; iterating ``tokens()`` or ``pairs()``
    consumes it, so each lexer can be iterated once.
    """

    def __init__(self, data: bytes) -> None:
        """Create a lexer over *data*."""
        self._cursor = Cursor(data)

    @property
    def data(self) -> bytes:
        """Return the buffer being tokenized."""
        return self._cursor.data

    def tokens(self) -> Iterator[Token]:
        """Yield tokens in source order.

        Raises:
            ParseError: On the first malformed line.

        """
        cur = self._cursor
        while True:
            cur.skip_blanks()
            byte = cur.peek()
            if byte == EOF:
                return
            if byte == NEWLINE:
                cur.advance()
                continue
            if byte == _COMMENT:
                yield self._comment()
                continue
            yield from self._pair_tokens()

    def pairs(self) -> Iterator[Pair]:
        """Yield decoded ``Pair`` records, skipping comments.

        Raises:
            ParseError: On malformed syntax or undecodable UTF-8.

        """
        data = self.data
        key: Token | None = None
        for token in self.tokens():
            if token.kind is TokenKind.KEY:
                key = token
            elif token.kind is TokenKind.VALUE and key is not None:
                try:
                    value = token.span.slice(data).decode("utf-8")
                except UnicodeDecodeError as e:
                    raise ParseError("invalid UTF-8 in value", line=token.line) from e
                yield Pair(
                    key=key.span.slice(data).decode("ascii"),
                    value=value,
                    line=key.line,
                    key_span=key.span,
                    value_span=token.span,
                )
                key = None

    # -- Token readers ---------------------------------------------------------

    def _comment(self) -> Token:
        cur = self._cursor
        line = cur.line
        start = cur.pos
        cur.skip_line()
        return Token(TokenKind.COMMENT, cur.span_from(start), line)

    def _pair_tokens(self) -> Iterator[Token]:
        """Read ``key = value`` and any trailing comment on the same line."""
        cur = self._cursor
        yield self._key()

        cur.skip_blanks()
        byte = cur.peek()
        if byte != _SEPARATOR:
            msg = f"expected '=' after key, found {_describe(byte)}"
            raise ParseError(msg, line=cur.line)
        start = cur.pos
        cur.advance()
        yield Token(TokenKind.SEPARATOR, cur.span_from(start), cur.line)

        cur.skip_blanks()
        yield self._value()

        cur.skip_blanks()
        byte = cur.peek()
        if byte == _COMMENT:
            yield self._comment()
        elif byte not in (EOF, NEWLINE):
            msg = f"unexpected character after value: {_describe(byte)}"
            raise ParseError(msg, line=cur.line)

    def _key(self) -> Token:
        cur = self._cursor
        byte = cur.peek()
        if byte[0] not in _LETTERS:
            msg = f"invalid key start {_describe(byte)}"
            raise ParseError(msg, line=cur.line)
        line = cur.line
        start = cur.pos
        cur.advance()
        while cur.peek() and cur.peek()[0] in _KEY_BYTES:
            cur.advance()
        return Token(TokenKind.KEY, cur.span_from(start), line)

    def _value(self) -> Token:
        cur = self._cursor
        byte = cur.peek()
        if byte in (EOF, NEWLINE, _COMMENT):
            raise ParseError("missing value after '='", line=cur.line)
        if byte == _QUOTE:
            return self._quoted_value()
        if byte[0] not in _VALUE_START:
            msg = f"invalid value start {_describe(byte)}"
            raise ParseError(msg, line=cur.line)

        line = cur.line
        start = cur.pos
        end = start
        while cur.peek() and cur.peek()[0] not in _VALUE_STOP:
            if cur.advance()[0] not in _TRAILING:
                end = cur.pos
        return Token(TokenKind.VALUE, Span(start, end), line)

    def _quoted_value(self) -> Token:
        cur = self._cursor
        line = cur.line
        cur.advance()
        start = cur.pos
        while cur.peek() != _QUOTE:
            if cur.peek() in (EOF, NEWLINE, _CR):
                raise ParseError("unterminated quoted value", line=line)
            cur.advance()
        span = cur.span_from(start)
        cur.advance()
        return Token(TokenKind.VALUE, span, line, quoted=True)


def parse(data: bytes, *, logger: Logger | None = None) -> list[Pair]:
    """Lex *data* completely and return its pairs in file order.

    Args:
        data: The whole configuration file contents.
        logger: Optional event log.

    Returns:
        Every pair, in the order it appears.

    Raises:
        ParseError: On malformed syntax, or when a key appears twice
            (reported on the line of the second occurrence).

    """
    pairs: list[Pair] = []
    seen: dict[str, int] = {}
    for pair in Lexer(data).pairs():
        first = seen.get(pair.key)
        if first is not None:
            msg = f"duplicate key '{pair.key}' (first defined on line {first})"
            raise ParseError(msg, line=pair.line)
        seen[pair.key] = pair.line
        pairs.append(pair)
    if logger is not None:
        logger.log(LogLevel.DEBUG, f"scanned {len(pairs)} pairs", source=_SOURCE)
    return pairs

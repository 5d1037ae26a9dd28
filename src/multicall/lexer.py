"""Lexer — converts Rust-like source text into token trees."""

from __future__ import annotations

from multicall.errors import LexError
from multicall.tokens import (
    CLOSE_DELIMITERS,
    DELIMITER_CHARS,
    OPEN_DELIMITERS,
    PUNCT_CHARS,
    Delimiter,
    Group,
    Ident,
    Literal,
    Position,
    Punct,
    Spacing,
    Span,
    TokenTree,
    is_ident_char,
    is_ident_start,
)


class _Frame:
    """An open delimiter and the tokens collected inside it so far."""

    __slots__ = ("delimiter", "start", "tokens")

    def __init__(self, delimiter: Delimiter, start: Position) -> None:
        self.delimiter = delimiter
        self.start = start
        self.tokens: list[TokenTree] = []


class Lexer:
    """Tokenize source text into a sequence of token trees."""

    def __init__(self, source: str, filename: str = "input.rs") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1
        self._stack: list[_Frame] = [_Frame(Delimiter.NONE, Position(1, 1, 0))]

    def tokenize(self) -> tuple[TokenTree, ...]:
        """Tokenize the full source and return the top-level token trees."""
        while self._pos < len(self._source):
            self._lex_next()

        if len(self._stack) > 1:
            frame = self._stack[-1]
            opener = DELIMITER_CHARS[frame.delimiter][0]
            raise self._error(f"unclosed delimiter '{opener}'", frame.start)

        return tuple(self._stack[0].tokens)

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _emit(self, token: TokenTree) -> None:
        self._stack[-1].tokens.append(token)

    def _span_from(self, start: Position) -> Span:
        return Span(start, self._current_pos())

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _lex_next(self) -> None:
        ch = self._peek()

        if ch in " \t\r\n":
            self._advance()
            return

        if ch == "/" and self._peek(1) == "/":
            self._skip_line_comment()
            return

        if ch == "/" and self._peek(1) == "*":
            self._skip_block_comment()
            return

        if ch in OPEN_DELIMITERS:
            start = self._current_pos()
            self._advance()
            self._stack.append(_Frame(OPEN_DELIMITERS[ch], start))
            return

        if ch in CLOSE_DELIMITERS:
            self._close_group(ch)
            return

        if ch == '"':
            self._lex_string(self._current_pos(), "")
            return

        if ch == "'":
            self._lex_quote()
            return

        if ch in "rb" and self._at_prefixed_literal():
            self._lex_prefixed_literal()
            return

        if ch.isdigit():
            self._lex_number()
            return

        if is_ident_start(ch):
            self._lex_identifier()
            return

        if ch in PUNCT_CHARS:
            self._lex_punct()
            return

        raise self._error(f"unexpected character {ch!r}")

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _skip_line_comment(self) -> None:
        while self._pos < len(self._source) and self._peek() != "\n":
            self._advance()

    def _skip_block_comment(self) -> None:
        start = self._current_pos()
        self._advance()
        self._advance()
        depth = 1
        while depth:
            if self._pos >= len(self._source):
                raise self._error("unterminated block comment", start)
            if self._peek() == "/" and self._peek(1) == "*":
                self._advance()
                self._advance()
                depth += 1
            elif self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                depth -= 1
            else:
                self._advance()

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def _close_group(self, ch: str) -> None:
        start = self._current_pos()
        delimiter = CLOSE_DELIMITERS[ch]
        if len(self._stack) == 1:
            raise self._error(f"unexpected closing delimiter '{ch}'", start)
        frame = self._stack[-1]
        if frame.delimiter != delimiter:
            expected = DELIMITER_CHARS[frame.delimiter][1]
            raise self._error(f"mismatched closing delimiter '{ch}', expected '{expected}'", start)
        self._advance()
        self._stack.pop()
        self._emit(Group(delimiter, tuple(frame.tokens), self._span_from(frame.start)))

    # ------------------------------------------------------------------
    # Identifiers, numbers, punctuation
    # ------------------------------------------------------------------

    def _lex_identifier(self) -> None:
        start = self._current_pos()
        chars = []
        # Raw identifier: r#name
        if self._peek() == "r" and self._peek(1) == "#" and is_ident_start(self._peek(2)):
            chars.append(self._advance())
            chars.append(self._advance())
        while self._pos < len(self._source) and is_ident_char(self._peek()):
            chars.append(self._advance())
        self._emit(Ident("".join(chars), self._span_from(start)))

    def _lex_number(self) -> None:
        start = self._current_pos()
        chars = []
        hex_like = self._peek() == "0" and self._peek(1) in ("x", "X", "b", "B", "o", "O")
        while self._pos < len(self._source):
            ch = self._peek()
            if is_ident_char(ch):
                chars.append(self._advance())
                # Exponent sign: 1e-5, 2E+3
                if (
                    not hex_like
                    and ch in "eE"
                    and self._peek() in ("+", "-")
                    and self._peek(1).isdigit()
                ):
                    chars.append(self._advance())
            elif ch == "." and self._peek(1).isdigit() and "." not in chars:
                chars.append(self._advance())
            else:
                break
        self._emit(Literal("".join(chars), self._span_from(start)))

    def _lex_punct(self) -> None:
        start = self._current_pos()
        ch = self._advance()
        nxt = self._peek()
        # A quote after punctuation starts a char literal or lifetime, not an
        # operator; a comment produces no token to join with.
        joint = (
            nxt in PUNCT_CHARS
            and nxt != "'"
            and not (nxt == "/" and self._peek(1) in ("/", "*"))
        )
        spacing = Spacing.JOINT if joint else Spacing.ALONE
        self._emit(Punct(ch, spacing, self._span_from(start)))

    # ------------------------------------------------------------------
    # Strings and characters
    # ------------------------------------------------------------------

    def _lex_string(self, start: Position, prefix: str) -> None:
        """Lex a "..." string whose optional prefix (b, c) is already consumed."""
        chars = [prefix, self._advance()]
        while True:
            if self._pos >= len(self._source):
                raise self._error("unterminated string literal", start)
            ch = self._advance()
            chars.append(ch)
            if ch == "\\":
                if self._pos >= len(self._source):
                    raise self._error("unterminated string literal", start)
                chars.append(self._advance())
            elif ch == '"':
                break
        self._emit(Literal("".join(chars), self._span_from(start)))

    def _lex_quote(self) -> None:
        """Lex a character literal or a lifetime."""
        start = self._current_pos()
        nxt = self._peek(1)
        if nxt == "\\" or (nxt and self._peek(2) == "'"):
            self._advance()
            self._lex_char_body(start, "'")
            return
        if is_ident_start(nxt):
            # Lifetime: a joint quote followed by an identifier
            self._advance()
            self._emit(Punct("'", Spacing.JOINT, self._span_from(start)))
            self._lex_identifier()
            return
        raise self._error("unterminated character literal", start)

    def _lex_char_body(self, start: Position, prefix: str) -> None:
        chars = [prefix]
        while True:
            if self._pos >= len(self._source) or self._peek() == "\n":
                raise self._error("unterminated character literal", start)
            ch = self._advance()
            chars.append(ch)
            if ch == "\\" and self._pos < len(self._source):
                chars.append(self._advance())
            elif ch == "'":
                break
        self._emit(Literal("".join(chars), self._span_from(start)))

    def _at_prefixed_literal(self) -> bool:
        ch, nxt = self._peek(), self._peek(1)
        if ch == "b":
            if nxt in ("\"", "'"):
                return True
            return nxt == "r" and self._raw_string_ahead(2)
        # ch == "r"
        return nxt == '"' or (nxt == "#" and self._raw_string_ahead(1))

    def _raw_string_ahead(self, offset: int) -> bool:
        """Return True if '#'* then '"' starts at offset (r#"..."# vs r#ident)."""
        while self._peek(offset) == "#":
            offset += 1
        return self._peek(offset) == '"'

    def _lex_prefixed_literal(self) -> None:
        start = self._current_pos()
        prefix = self._advance()
        if prefix == "b" and self._peek() == "'":
            self._advance()
            self._lex_char_body(start, "b'")
            return
        if prefix == "b" and self._peek() == '"':
            self._lex_string(start, "b")
            return
        if prefix == "b":
            prefix += self._advance()  # the 'r' of br"..."
        self._lex_raw_string(start, prefix)

    def _lex_raw_string(self, start: Position, prefix: str) -> None:
        hashes = 0
        while self._peek() == "#":
            self._advance()
            hashes += 1
        self._advance()  # opening quote
        closing = '"' + "#" * hashes
        content_start = self._pos
        while True:
            if self._pos >= len(self._source):
                raise self._error("unterminated raw string literal", start)
            if self._source.startswith(closing, self._pos):
                break
            self._advance()
        content = self._source[content_start : self._pos]
        for _ in closing:
            self._advance()
        text = f'{prefix}{"#" * hashes}"{content}{closing}'
        self._emit(Literal(text, self._span_from(start)))


def tokenize(source: str, filename: str = "input.rs") -> tuple[TokenTree, ...]:
    """Convenience function: tokenize source text and return token trees."""
    return Lexer(source, filename).tokenize()

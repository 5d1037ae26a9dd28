"""Token tree types, source positions, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Spacing(Enum):
    ALONE = auto()  # followed by whitespace, a non-punct token, or nothing
    JOINT = auto()  # immediately followed by another punctuation character


class Delimiter(Enum):
    PARENTHESIS = auto()  # ( ... )
    BRACE = auto()  # { ... }
    BRACKET = auto()  # [ ... ]
    NONE = auto()  # invisible grouping


OPEN_DELIMITERS = {"(": Delimiter.PARENTHESIS, "{": Delimiter.BRACE, "[": Delimiter.BRACKET}
CLOSE_DELIMITERS = {")": Delimiter.PARENTHESIS, "}": Delimiter.BRACE, "]": Delimiter.BRACKET}
DELIMITER_CHARS = {
    Delimiter.PARENTHESIS: ("(", ")"),
    Delimiter.BRACE: ("{", "}"),
    Delimiter.BRACKET: ("[", "]"),
    Delimiter.NONE: ("", ""),
}


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Ident:
    """An identifier or keyword."""

    text: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Punct:
    """A single punctuation character with its adjacency to the next token."""

    char: str
    spacing: Spacing = Spacing.ALONE
    span: Span | None = None

    def __post_init__(self) -> None:
        if len(self.char) != 1:
            raise ValueError(f"punctuation must be a single character, got {self.char!r}")


@dataclass(frozen=True, slots=True)
class Literal:
    """A number, string, character, or byte literal, kept as source text."""

    text: str
    span: Span | None = None


@dataclass(frozen=True, slots=True)
class Group:
    """A delimited token sequence."""

    delimiter: Delimiter
    stream: tuple[TokenTree, ...]
    span: Span | None = None


TokenTree = Ident | Punct | Literal | Group


def token_text(token: TokenTree) -> str:
    """Return the textual form of a token (groups are rendered compactly)."""
    if isinstance(token, Ident):
        return token.text
    if isinstance(token, Punct):
        return token.char
    if isinstance(token, Literal):
        return token.text
    from multicall.render import render

    return render((token,))


def is_punct(token: TokenTree, char: str) -> bool:
    """Return True if token is the punctuation character char."""
    return isinstance(token, Punct) and token.char == char


def is_ident(token: TokenTree, text: str) -> bool:
    """Return True if token is the identifier text."""
    return isinstance(token, Ident) and token.text == text


# Punctuation characters recognised by the lexer
PUNCT_CHARS = frozenset("=<>!~+-*/%^&|@.,;:#$?'")


def is_ident_start(ch: str) -> bool:
    """Return True if ch may start an identifier."""
    return ch == "_" or ch.isalpha()


def is_ident_char(ch: str) -> bool:
    """Return True if ch may continue an identifier."""
    return ch == "_" or ch.isalnum()

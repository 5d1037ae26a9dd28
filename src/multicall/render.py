"""Renderer — converts token trees back to source text."""

from __future__ import annotations

from collections.abc import Iterable

from multicall.tokens import DELIMITER_CHARS, Delimiter, Group, Ident, Literal, Punct, Spacing, TokenTree

INDENT = "    "

_NO_SPACE_BEFORE = frozenset(".,;:?")
_PREFIX_OPERATORS = frozenset("&!*-")


def render(tokens: Iterable[TokenTree], *, pretty: bool = False) -> str:
    """Render token trees as source text.

    Compact mode keeps everything on one line. Pretty mode puts every
    statement of a brace group (and of the top level) on its own line.
    """
    renderer = _Renderer(pretty)
    tokens = tuple(tokens)
    if pretty:
        return "\n".join(renderer.seq(line, 0) for line in _split_lines(tokens))
    return renderer.seq(tokens, 0)


class _Renderer:
    def __init__(self, pretty: bool) -> None:
        self._pretty = pretty

    def seq(self, tokens: tuple[TokenTree, ...], depth: int) -> str:
        parts: list[str] = []
        before: TokenTree | None = None
        prev: TokenTree | None = None
        for tok in tokens:
            if prev is not None and _needs_space(before, prev, tok):
                parts.append(" ")
            parts.append(self.token(tok, depth))
            before, prev = prev, tok
        return "".join(parts)

    def token(self, tok: TokenTree, depth: int) -> str:
        if isinstance(tok, Ident):
            return tok.text
        if isinstance(tok, Punct):
            return tok.char
        if isinstance(tok, Literal):
            return tok.text
        return self.group(tok, depth)

    def group(self, group: Group, depth: int) -> str:
        if group.delimiter is Delimiter.BRACE:
            if not group.stream:
                return "{}"
            if self._pretty:
                pad = INDENT * (depth + 1)
                body = "".join(
                    f"{pad}{self.seq(line, depth + 1)}\n" for line in _split_lines(group.stream)
                )
                return "{\n" + body + INDENT * depth + "}"
            return "{ " + self.seq(group.stream, depth) + " }"
        opener, closer = DELIMITER_CHARS[group.delimiter]
        return opener + self.seq(group.stream, depth) + closer


def _needs_space(before: TokenTree | None, prev: TokenTree, cur: TokenTree) -> bool:
    if isinstance(prev, Punct):
        if prev.spacing is Spacing.JOINT or prev.char == ".":
            return False
        # Second half of '::'
        if prev.char == ":" and isinstance(before, Punct) and before.char == ":":
            return False
        # Unary operator: nothing, or another operator, in front of it
        if prev.char in _PREFIX_OPERATORS and (before is None or isinstance(before, Punct)):
            return False
    if isinstance(cur, Punct):
        if cur.char in _NO_SPACE_BEFORE:
            return False
        # Macro bang: name!(...)
        if cur.char == "!" and cur.spacing is Spacing.ALONE and isinstance(prev, Ident):
            return False
    if isinstance(cur, Group) and cur.delimiter in (Delimiter.PARENTHESIS, Delimiter.BRACKET):
        # Call, index, or macro arguments
        if isinstance(prev, (Ident, Group)) or (isinstance(prev, Punct) and prev.char in "!#"):
            return False
    return True


def _split_lines(tokens: tuple[TokenTree, ...]) -> list[tuple[TokenTree, ...]]:
    """Break a sequence after each ';' and after each free-standing brace group."""
    lines: list[tuple[TokenTree, ...]] = []
    current: list[TokenTree] = []
    for idx, tok in enumerate(tokens):
        current.append(tok)
        nxt = tokens[idx + 1] if idx + 1 < len(tokens) else None
        if isinstance(tok, Punct) and tok.char == ";":
            lines.append(tuple(current))
            current = []
        elif (
            isinstance(tok, Group)
            and tok.delimiter is Delimiter.BRACE
            and nxt is not None
            and not isinstance(nxt, Punct)
            and not (isinstance(nxt, Ident) and nxt.text == "else")
        ):
            lines.append(tuple(current))
            current = []
    if current:
        lines.append(tuple(current))
    return lines

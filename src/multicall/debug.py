"""--debug token tree dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from multicall.tokens import Group, Ident, Literal, Punct, Spacing, TokenTree


def dump_tokens(tokens: Iterable[TokenTree], *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable token tree to *file*."""
    for tok in tokens:
        _dump_token(tok, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_token(tok: TokenTree, depth: int, f: TextIO) -> None:
    if isinstance(tok, Ident):
        f.write(f"{_indent(depth)}Ident({tok.text!r}){_where(tok)}\n")
    elif isinstance(tok, Punct):
        joint = " joint" if tok.spacing is Spacing.JOINT else ""
        f.write(f"{_indent(depth)}Punct({tok.char!r}{joint}){_where(tok)}\n")
    elif isinstance(tok, Literal):
        f.write(f"{_indent(depth)}Literal({tok.text!r}){_where(tok)}\n")
    elif isinstance(tok, Group):
        f.write(f"{_indent(depth)}Group {tok.delimiter.name.lower()}{_where(tok)}\n")
        for child in tok.stream:
            _dump_token(child, depth + 1, f)


def _where(tok: TokenTree) -> str:
    if tok.span is None:
        return ""
    return f" @{tok.span.start.line}:{tok.span.start.column}"

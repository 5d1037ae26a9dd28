"""Shared test fixtures and helpers."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from multicall.expander import expand
from multicall.lexer import tokenize
from multicall.options import DEFAULT_BINDING, ExpandOptions
from multicall.render import render
from multicall.tokens import Group, Punct, TokenTree

B = DEFAULT_BINDING


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns the token trees."""

    def _lex(source: str) -> tuple[TokenTree, ...]:
        return tokenize(source, "test.rs")

    return _lex


@pytest.fixture
def expand_text():
    """Return a helper that expands one invocation body and renders it compactly."""

    def _expand(source: str, options: ExpandOptions | None = None) -> str:
        return render((expand(tokenize(source, "test.rs"), options),))

    return _expand


def walk(tokens: tuple[TokenTree, ...]) -> Iterator[TokenTree]:
    """Yield every token, descending into groups."""
    for tok in tokens:
        yield tok
        if isinstance(tok, Group):
            yield from walk(tok.stream)


def count_separators(tokens: tuple[TokenTree, ...]) -> int:
    """Count top-level ';' tokens."""
    return sum(1 for t in tokens if isinstance(t, Punct) and t.char == ";")


def assert_kinds(tokens: tuple[TokenTree, ...], expected: list[type]) -> None:
    """Assert that the token classes match the expected list."""
    actual = [type(t) for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"

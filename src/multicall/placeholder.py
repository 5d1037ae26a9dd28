"""Placeholder substitution — replaces the receiver marker with the binding."""

from __future__ import annotations

from collections.abc import Iterable

from multicall.errors import InvalidPlaceholder
from multicall.tokens import Group, Ident, Punct, TokenTree


def substitute(token: TokenTree, marker: str, target: str) -> TokenTree:
    """Return token with every occurrence of marker replaced by the identifier target.

    Groups are rewritten recursively, keeping their delimiter and span.
    Identifiers containing the marker have the substring replaced; a
    punctuation token equal to a one-character marker becomes ``Ident(target)``.
    Literals are never touched.
    """
    if not marker:
        raise InvalidPlaceholder("placeholder marker must not be empty")
    return _substitute(token, marker, target)


def substitute_all(
    tokens: Iterable[TokenTree], marker: str, target: str
) -> tuple[TokenTree, ...]:
    """Apply substitute() to each token of a sequence."""
    if not marker:
        raise InvalidPlaceholder("placeholder marker must not be empty")
    return tuple(_substitute(t, marker, target) for t in tokens)


def _substitute(token: TokenTree, marker: str, target: str) -> TokenTree:
    if isinstance(token, Group):
        stream = tuple(_substitute(t, marker, target) for t in token.stream)
        if stream == token.stream:
            return token
        return Group(token.delimiter, stream, token.span)
    if isinstance(token, Ident):
        if marker in token.text:
            return Ident(token.text.replace(marker, target), token.span)
        return token
    if isinstance(token, Punct) and len(marker) == 1 and token.char == marker:
        return Ident(target, token.span)
    return token

"""Header parser — reads the receiver expression up to the block's ':'."""

from __future__ import annotations

from dataclasses import dataclass

from multicall.errors import MissingSeparator
from multicall.options import ExpandOptions
from multicall.tokens import Ident, Punct, Span, Spacing, TokenTree, is_ident, is_punct

REFERENCE_MARKER = "&"
EXCLUSIVITY_MARKER = "mut"
FIELD_ACCESS_MARKER = "."


@dataclass(frozen=True, slots=True)
class Header:
    """A parsed block header and the body tokens that follow it."""

    receiver: tuple[TokenTree, ...]
    mutable: bool
    body: tuple[TokenTree, ...]


def reference_prefix(binding: str, mutable: bool) -> tuple[TokenTree, ...]:
    """Build ``& [mut] <binding> .`` for a nested block's receiver."""
    prefix: list[TokenTree] = [Punct(REFERENCE_MARKER)]
    if mutable:
        prefix.append(Ident(EXCLUSIVITY_MARKER))
    prefix.append(Ident(binding))
    prefix.append(Punct(FIELD_ACCESS_MARKER))
    return tuple(prefix)


def parse_header(
    tokens: tuple[TokenTree, ...],
    options: ExpandOptions,
    *,
    nested: bool = False,
    mutable: bool = False,
    span: Span | None = None,
) -> Header:
    """Split tokens into the receiver expression and the block body.

    At the top level the mutability flag is derived from the receiver
    (``&mut expr``). For nested blocks the receiver is synthesised from the
    enclosing binding and the inherited flag is kept as is.
    """
    receiver: list[TokenTree] = list(reference_prefix(options.binding, mutable)) if nested else []
    prev: TokenTree | None = None

    for idx, token in enumerate(tokens):
        if _is_separator(token, prev):
            return Header(tuple(receiver), mutable, tokens[idx + 1 :])
        if (
            not nested
            and len(receiver) == 1
            and is_punct(receiver[0], REFERENCE_MARKER)
            and is_ident(token, EXCLUSIVITY_MARKER)
        ):
            mutable = True
        receiver.append(token)
        prev = token

    if span is None and tokens:
        span = _covering_span(tokens)
    raise MissingSeparator("expected ':' after the multicall receiver", span)


def _is_separator(token: TokenTree, prev: TokenTree | None) -> bool:
    # The second ':' of a '::' path is lexed ALONE, so look behind as well.
    if not isinstance(token, Punct) or token.char != ":" or token.spacing != Spacing.ALONE:
        return False
    return not (isinstance(prev, Punct) and prev.char == ":" and prev.spacing == Spacing.JOINT)


def _covering_span(tokens: tuple[TokenTree, ...]) -> Span | None:
    spans = [t.span for t in tokens if t.span is not None]
    if not spans:
        return None
    return Span(spans[0].start, spans[-1].end)

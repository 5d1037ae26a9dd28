"""Expander — drives the header parser and rewriter, recursing into nested blocks."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from multicall.header import parse_header
from multicall.options import ExpandOptions
from multicall.rewrite import STATEMENT_SEPARATOR, RewriteContext, rewrite_body
from multicall.tokens import Delimiter, Group, Ident, Punct, Span, TokenTree

logger = logging.getLogger(__name__)

LET_KEYWORD = "let"


def expand(
    tokens: Iterable[TokenTree],
    options: ExpandOptions | None = None,
    *,
    span: Span | None = None,
) -> Group:
    """Expand the input of one multicall invocation into a brace-delimited scope.

    ``span`` locates the invocation for error reporting when the failing
    tokens carry no span of their own.
    """
    if options is None:
        options = ExpandOptions()
    return _expand_block(tuple(tokens), options, nested=False, mutable=False, span=span, depth=0)


def _expand_block(
    tokens: tuple[TokenTree, ...],
    options: ExpandOptions,
    *,
    nested: bool,
    mutable: bool,
    span: Span | None,
    depth: int,
) -> Group:
    header = parse_header(tokens, options, nested=nested, mutable=mutable, span=span)
    logger.debug(
        "expanding block at depth %d (mutable=%s, %d body tokens)",
        depth,
        header.mutable,
        len(header.body),
    )

    def expand_nested(group: Group) -> Group:
        return _expand_block(
            group.stream,
            options,
            nested=True,
            mutable=header.mutable,
            span=group.span or span,
            depth=depth + 1,
        )

    ctx = RewriteContext(options, header.mutable, expand_nested)
    body = rewrite_body(header.body, ctx, span=span)
    return emit(header.receiver, body, options, span=span)


def emit(
    receiver: tuple[TokenTree, ...],
    body: tuple[TokenTree, ...],
    options: ExpandOptions,
    *,
    span: Span | None = None,
) -> Group:
    """Wrap ``let <binding> = <receiver>;`` and the body in one brace group."""
    declaration: tuple[TokenTree, ...] = (
        Ident(LET_KEYWORD),
        Ident(options.binding),
        Punct("="),
        *receiver,
        Punct(STATEMENT_SEPARATOR),
    )
    return Group(Delimiter.BRACE, declaration + body, span)

"""Statement classifier — one left-to-right pass over a block body.

Each top-level statement is one of:

* a nested block ``{ sub: ...; };`` handed to the orchestrator,
* ``set target = rhs;`` where ``target`` is left alone and ``rhs`` is prefixed,
* ``exec tokens;`` copied through with placeholder substitution only,
* anything else, prefixed with ``<binding>.``.

The pass is a fold: ``step`` maps a ``RewriteState`` and one token to the
next ``RewriteState``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from functools import reduce

from multicall.errors import UnterminatedStatement
from multicall.header import FIELD_ACCESS_MARKER
from multicall.options import ExpandOptions
from multicall.placeholder import substitute
from multicall.tokens import Group, Ident, Punct, Span, TokenTree, is_ident, is_punct

STATEMENT_SEPARATOR = ";"
ASSIGNMENT = "="


class ParseState(Enum):
    AWAITING_STATEMENT = auto()
    CAPTURING_ASSIGNMENT_TARGET = auto()
    STATEMENT_OPEN = auto()


@dataclass(frozen=True, slots=True)
class RewriteState:
    """Fold state for the rewrite pass."""

    state: ParseState = ParseState.AWAITING_STATEMENT
    output: tuple[TokenTree, ...] = ()
    pending: bool = False  # a statement has started but not yet hit ';'
    start: Span | None = None  # first token of the pending statement


@dataclass(frozen=True, slots=True)
class RewriteContext:
    """Everything step() needs besides the state and the token."""

    options: ExpandOptions
    mutable: bool
    expand_nested: Callable[[Group], Group]


def step(current: RewriteState, token: TokenTree, ctx: RewriteContext) -> RewriteState:
    """Advance the rewrite by one top-level body token."""
    opts = ctx.options
    start = current.start if current.pending else token.span

    if current.state is ParseState.AWAITING_STATEMENT and isinstance(token, Group):
        return RewriteState(
            ParseState.STATEMENT_OPEN,
            current.output + (ctx.expand_nested(token),),
            True,
            start,
        )

    if is_punct(token, STATEMENT_SEPARATOR):
        return RewriteState(ParseState.AWAITING_STATEMENT, current.output + (token,))

    emitted = substitute(token, opts.placeholder, opts.binding)

    if current.state is ParseState.AWAITING_STATEMENT:
        if is_ident(token, opts.capture_keyword):
            return RewriteState(
                ParseState.CAPTURING_ASSIGNMENT_TARGET, current.output, True, start
            )
        if is_ident(token, opts.passthrough_keyword):
            return RewriteState(ParseState.STATEMENT_OPEN, current.output, True, start)
        prefix = (Ident(opts.binding), Punct(FIELD_ACCESS_MARKER))
        return RewriteState(
            ParseState.STATEMENT_OPEN, current.output + prefix + (emitted,), True, start
        )

    if current.state is ParseState.CAPTURING_ASSIGNMENT_TARGET:
        # '+=' arrives as '+' (joint) then '='; only the '=' ends the target.
        state = (
            ParseState.AWAITING_STATEMENT
            if is_punct(token, ASSIGNMENT)
            else ParseState.CAPTURING_ASSIGNMENT_TARGET
        )
        return RewriteState(state, current.output + (emitted,), True, start)

    return RewriteState(ParseState.STATEMENT_OPEN, current.output + (emitted,), True, start)


def rewrite_body(
    tokens: tuple[TokenTree, ...],
    ctx: RewriteContext,
    *,
    span: Span | None = None,
) -> tuple[TokenTree, ...]:
    """Rewrite every statement of a block body against the binding."""
    final = reduce(lambda acc, tok: step(acc, tok, ctx), tokens, RewriteState())
    if final.pending:
        raise UnterminatedStatement(
            f"expected '{STATEMENT_SEPARATOR}' after statement", final.start or span
        )
    return final.output

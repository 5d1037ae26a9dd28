"""Reference host — expands ``multicall! { ... }`` invocations found in source files."""

from __future__ import annotations

import logging

from multicall.errors import ExpandError
from multicall.expander import expand
from multicall.lexer import tokenize
from multicall.options import ExpandOptions
from multicall.render import render
from multicall.tokens import Group, Ident, TokenTree, is_punct

logger = logging.getLogger(__name__)

DEFAULT_MACRO_NAME = "multicall"


def expand_invocations(
    tokens: tuple[TokenTree, ...],
    options: ExpandOptions | None = None,
    macro_name: str = DEFAULT_MACRO_NAME,
) -> tuple[TokenTree, ...]:
    """Replace every ``<macro_name>!(...)`` invocation with its expansion.

    Invocations nested inside other groups are found too. The input of an
    invocation is scanned first, so inner invocations are expanded before
    the outer one sees them.
    """
    if options is None:
        options = ExpandOptions()
    out: list[TokenTree] = []
    idx = 0
    while idx < len(tokens):
        tok = tokens[idx]
        if _at_invocation(tokens, idx, macro_name):
            group = tokens[idx + 2]
            assert isinstance(group, Group)
            inner = expand_invocations(group.stream, options, macro_name)
            logger.debug("expanding %s! invocation at %s", macro_name, _where(group))
            out.append(expand(inner, options, span=group.span))
            idx += 3
            continue
        if isinstance(tok, Group):
            stream = expand_invocations(tok.stream, options, macro_name)
            if stream != tok.stream:
                tok = Group(tok.delimiter, stream, tok.span)
        out.append(tok)
        idx += 1
    return tuple(out)


def expand_tokens(
    tokens: tuple[TokenTree, ...],
    options: ExpandOptions | None = None,
    macro_name: str = DEFAULT_MACRO_NAME,
    *,
    block: bool = False,
) -> tuple[TokenTree, ...]:
    """Expand invocations; with ``block`` the whole input is one invocation body."""
    expanded = expand_invocations(tokens, options, macro_name)
    if block:
        return (expand(expanded, options),)
    return expanded


def expand_source(
    source: str,
    filename: str = "input.rs",
    options: ExpandOptions | None = None,
    macro_name: str = DEFAULT_MACRO_NAME,
    *,
    block: bool = False,
    pretty: bool = True,
) -> str:
    """Lex source, expand it, and render the result.

    Comments are not preserved. Expansion errors carry the source text so
    they format with a snippet.
    """
    tokens = tokenize(source, filename)
    try:
        expanded = expand_tokens(tokens, options, macro_name, block=block)
    except ExpandError as exc:
        raise exc.attach_source(source)
    return render(expanded, pretty=pretty) + "\n"


def _at_invocation(tokens: tuple[TokenTree, ...], idx: int, macro_name: str) -> bool:
    if idx + 2 >= len(tokens):
        return False
    name, bang, group = tokens[idx], tokens[idx + 1], tokens[idx + 2]
    return (
        isinstance(name, Ident)
        and name.text == macro_name
        and is_punct(bang, "!")
        and isinstance(group, Group)
    )


def _where(group: Group) -> str:
    if group.span is None:
        return "<unknown>"
    return f"{group.span.start.line}:{group.span.start.column}"

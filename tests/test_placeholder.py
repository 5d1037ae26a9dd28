"""Placeholder substitution tests."""

from __future__ import annotations

import pytest

from multicall.errors import InvalidPlaceholder
from multicall.placeholder import substitute, substitute_all
from multicall.tokens import Delimiter, Group, Ident, Literal, Position, Punct, Spacing, Span

from tests.conftest import B, walk

S = Span(Position(1, 1, 0), Position(1, 2, 1))


class TestSingleTokens:
    def test_punct_marker_becomes_binding(self):
        assert substitute(Punct("#", Spacing.JOINT, S), "#", B) == Ident(B, S)

    def test_other_punct_untouched(self):
        tok = Punct("&")
        assert substitute(tok, "#", B) is tok

    def test_marker_inside_identifier(self):
        assert substitute(Ident("my_ITEM_x", S), "ITEM", "b") == Ident("my_b_x", S)

    def test_identifier_without_marker(self):
        tok = Ident("plain")
        assert substitute(tok, "#", B) is tok

    def test_literal_never_touched(self):
        tok = Literal('"#"')
        assert substitute(tok, "#", B) is tok

    def test_multichar_marker_ignores_punct(self):
        tok = Punct("#")
        assert substitute(tok, "##", B) is tok


class TestGroups:
    def test_recurses_into_nested_groups(self):
        inner = Group(Delimiter.PARENTHESIS, (Punct("#"), Punct("."), Ident("a")))
        outer = Group(Delimiter.BRACKET, (Ident("f"), inner), S)
        result = substitute(outer, "#", B)
        assert isinstance(result, Group)
        assert result.delimiter is Delimiter.BRACKET
        assert result.span == S
        assert result.stream[1].stream[0] == Ident(B)

    def test_group_without_marker_is_returned_as_is(self):
        group = Group(Delimiter.PARENTHESIS, (Ident("a"),))
        assert substitute(group, "#", B) is group


class TestInvariants:
    def test_no_marker_left_after_one_pass(self, lex):
        tokens = substitute_all(lex("f(#, [#.a, {#}]) # x"), "#", B)
        assert not any(isinstance(t, Punct) and t.char == "#" for t in walk(tokens))

    def test_idempotent(self, lex):
        once = substitute_all(lex("print(#.a, g(#))"), "#", B)
        assert substitute_all(once, "#", B) == once


class TestErrors:
    def test_empty_marker(self):
        with pytest.raises(InvalidPlaceholder):
            substitute(Ident("x"), "", B)

    def test_empty_marker_for_sequences(self):
        with pytest.raises(InvalidPlaceholder):
            substitute_all((), "", B)

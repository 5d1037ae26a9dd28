"""Lexer tests: identifiers, punctuation spacing, literals, groups, comments."""

from __future__ import annotations

import pytest

from multicall.errors import LexError
from multicall.lexer import tokenize
from multicall.tokens import Delimiter, Group, Ident, Literal, Position, Punct, Spacing

from tests.conftest import assert_kinds


class TestIdentifiers:
    def test_words(self, lex):
        tokens = lex("foo bar_1 _x")
        assert [t.text for t in tokens] == ["foo", "bar_1", "_x"]
        assert_kinds(tokens, [Ident, Ident, Ident])

    def test_raw_identifier(self, lex):
        tokens = lex("r#type")
        assert tokens == (Ident("r#type", tokens[0].span),)

    def test_keywords_are_identifiers(self, lex):
        tokens = lex("set exec mut")
        assert_kinds(tokens, [Ident, Ident, Ident])


class TestPunctuation:
    def test_compound_assignment_is_joint_pair(self, lex):
        tokens = lex("a += 1")
        assert_kinds(tokens, [Ident, Punct, Punct, Literal])
        assert tokens[1].char == "+"
        assert tokens[1].spacing is Spacing.JOINT
        assert tokens[2].char == "="
        assert tokens[2].spacing is Spacing.ALONE

    def test_path_separator(self, lex):
        tokens = lex("a::b")
        assert tokens[1].spacing is Spacing.JOINT
        assert tokens[2].spacing is Spacing.ALONE

    def test_header_colon_is_alone(self, lex):
        tokens = lex("obj: x")
        assert tokens[1] == Punct(":", Spacing.ALONE, tokens[1].span)

    def test_placeholder_before_field_access(self, lex):
        tokens = lex("#.a")
        assert tokens[0].char == "#"
        assert tokens[0].spacing is Spacing.JOINT

    def test_lifetime(self, lex):
        tokens = lex("'a")
        assert_kinds(tokens, [Punct, Ident])
        assert tokens[0].spacing is Spacing.JOINT

    def test_punct_before_char_literal_is_alone(self, lex):
        tokens = lex("='x'")
        assert tokens[0].spacing is Spacing.ALONE
        assert tokens[1] == Literal("'x'", tokens[1].span)


class TestLiterals:
    @pytest.mark.parametrize(
        "source",
        [
            "42",
            "5u32",
            "0xFF_u8",
            "1.5",
            "1.5e-3",
            '"hello"',
            '"say \\"hi\\""',
            "'c'",
            "'\\n'",
            "'\\''",
            'b"bytes"',
            "b'x'",
            'r"raw"',
            'r#"a "quoted" b"#',
            'br"x"',
        ],
    )
    def test_single_literal(self, lex, source):
        tokens = lex(source)
        assert len(tokens) == 1
        assert isinstance(tokens[0], Literal)
        assert tokens[0].text == source

    def test_range_is_not_a_float(self, lex):
        tokens = lex("1..2")
        assert_kinds(tokens, [Literal, Punct, Punct, Literal])

    def test_method_on_integer(self, lex):
        tokens = lex("1.max(2)")
        assert_kinds(tokens, [Literal, Punct, Ident, Group])

    def test_multiline_string(self, lex):
        tokens = lex('"a\nb" c')
        assert tokens[1].span.start == Position(2, 4, 6)


class TestGroups:
    def test_nested_groups(self, lex):
        tokens = lex("(a [b] {c})")
        assert len(tokens) == 1
        outer = tokens[0]
        assert isinstance(outer, Group)
        assert outer.delimiter is Delimiter.PARENTHESIS
        assert [type(t) for t in outer.stream] == [Ident, Group, Group]
        assert outer.stream[1].delimiter is Delimiter.BRACKET
        assert outer.stream[2].delimiter is Delimiter.BRACE

    def test_group_span_covers_delimiters(self, lex):
        tokens = lex("x {a}")
        span = tokens[1].span
        assert span.start == Position(1, 3, 2)
        assert span.end == Position(1, 6, 5)

    def test_empty_group(self, lex):
        tokens = lex("()")
        assert tokens[0].stream == ()


class TestComments:
    def test_line_comment(self, lex):
        tokens = lex("a // comment\nb")
        assert [t.text for t in tokens] == ["a", "b"]

    def test_nested_block_comment(self, lex):
        tokens = lex("a /* x /* y */ z */ b")
        assert [t.text for t in tokens] == ["a", "b"]

    @pytest.mark.parametrize("source", ["obj:// note\nx", "obj:/* note */x"])
    def test_punct_before_comment_is_alone(self, lex, source):
        tokens = lex(source)
        assert_kinds(tokens, [Ident, Punct, Ident])
        assert tokens[1].spacing is Spacing.ALONE

    def test_division_stays_joint(self, lex):
        tokens = lex("a /= b")
        assert tokens[1].char == "/"
        assert tokens[1].spacing is Spacing.JOINT


class TestPositions:
    def test_second_line(self, lex):
        tokens = lex("ab\n  cd")
        assert tokens[1].span.start == Position(2, 3, 5)
        assert tokens[1].span.end == Position(2, 5, 7)


class TestLexErrors:
    def test_unclosed_delimiter(self):
        with pytest.raises(LexError, match="unclosed delimiter '\\('") as exc_info:
            tokenize("f(a")
        assert exc_info.value.position == Position(1, 2, 1)

    def test_unexpected_closer(self):
        with pytest.raises(LexError, match="unexpected closing delimiter"):
            tokenize("a)")

    def test_mismatched_closer(self):
        with pytest.raises(LexError, match="expected '\\]'"):
            tokenize("[a)")

    def test_unterminated_string(self):
        with pytest.raises(LexError, match="unterminated string"):
            tokenize('"abc')

    def test_unterminated_raw_string(self):
        with pytest.raises(LexError, match="unterminated raw string"):
            tokenize('r#"abc"')

    def test_unterminated_block_comment(self):
        with pytest.raises(LexError, match="unterminated block comment"):
            tokenize("/* never closed")

    def test_unexpected_character(self):
        with pytest.raises(LexError, match="unexpected character"):
            tokenize("a ` b")

# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the .proto lexical scanner."""

import pytest

from protoast.model.meta import Position
from protoast.parser.lexer import LexerError, Token, TokenKind, tokenize

# ###############
# Test Helpers
# ###############


def _tokens(source: str) -> list[Token]:
    """Return all tokens including the terminal EOF."""
    return tokenize(source)


def _tokens_no_eof(source: str) -> list[Token]:
    """Return all tokens except the terminal EOF token."""
    result = tokenize(source)
    assert result[-1].kind == TokenKind.EOF
    return result[:-1]


def _kinds(source: str) -> list[TokenKind]:
    """Return the token kinds for all tokens except EOF."""
    return [tok.kind for tok in _tokens_no_eof(source)]


def _texts(source: str) -> list[str]:
    """Return the token texts for all tokens except EOF."""
    return [tok.text for tok in _tokens_no_eof(source)]


# ###############
# EOF Handling
# ###############


class TestEof:
    def test_empty_string_produces_eof(self) -> None:
        tokens = _tokens("")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF
        assert tokens[0].text == ""

    def test_eof_at_offset_1_line_1_column_1_for_empty_input(self) -> None:
        tokens = _tokens("")
        assert tokens[0].position == Position(offset=1, line=1, column=1)

    def test_whitespace_only_produces_eof(self) -> None:
        tokens = _tokens("   \t\n  ")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.EOF

    def test_eof_position_follows_last_character(self) -> None:
        tokens = _tokens("ab\n")
        assert tokens[-1].position == Position(offset=4, line=2, column=1)


# ###############
# Identifiers
# ###############


class TestIdentifiers:
    def test_keywords_are_identifiers(self) -> None:
        assert _kinds("message enum service option") == [TokenKind.IDENTIFIER] * 4

    def test_underscore_prefix_identifier(self) -> None:
        tokens = _tokens_no_eof("_private")
        assert tokens[0].kind == TokenKind.IDENTIFIER
        assert tokens[0].text == "_private"

    def test_identifier_with_digits(self) -> None:
        assert _texts("int64") == ["int64"]

    def test_identifier_cannot_start_with_digit(self) -> None:
        assert _kinds("2service") == [TokenKind.INTEGER, TokenKind.IDENTIFIER]

    def test_dotted_name_splits_on_dots(self) -> None:
        assert _kinds("foo.bar") == [TokenKind.IDENTIFIER, TokenKind.PUNCTUATION, TokenKind.IDENTIFIER]
        assert _texts("foo.bar") == ["foo", ".", "bar"]

    def test_parenthesized_option_name(self) -> None:
        assert _texts("(my_option).a") == ["(", "my_option", ")", ".", "a"]


# ###############
# Numbers
# ###############


class TestNumbers:
    @pytest.mark.parametrize("source", ["0", "1", "42", "0755", "0x1F", "0XaB"])
    def test_integer_literals(self, source: str) -> None:
        tokens = _tokens_no_eof(source)
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.INTEGER
        assert tokens[0].text == source

    @pytest.mark.parametrize("source", ["1.5", ".5", "1.", "1e10", "1.5E-3", "2e+8"])
    def test_float_literals(self, source: str) -> None:
        tokens = _tokens_no_eof(source)
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.FLOAT
        assert tokens[0].text == source

    def test_exponent_without_digits_is_identifier(self) -> None:
        assert _kinds("1e") == [TokenKind.INTEGER, TokenKind.IDENTIFIER]

    def test_negative_number_is_punctuation_then_integer(self) -> None:
        assert _kinds("-1") == [TokenKind.PUNCTUATION, TokenKind.INTEGER]


# ###############
# Strings
# ###############


class TestStrings:
    def test_double_quoted_string_keeps_quotes(self) -> None:
        tokens = _tokens_no_eof('"com.example.foo"')
        assert tokens[0].kind == TokenKind.STRING
        assert tokens[0].text == '"com.example.foo"'

    def test_single_quoted_string(self) -> None:
        assert _texts("'bar'") == ["'bar'"]

    def test_escapes_are_kept_verbatim(self) -> None:
        assert _texts(r'"a\"b\n"') == [r'"a\"b\n"']

    def test_other_quote_inside_string(self) -> None:
        assert _texts("\"it's\"") == ["\"it's\""]

    def test_unterminated_string_raises(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            tokenize('option a = "oops;')
        assert exc_info.value.line == 1
        assert exc_info.value.column == 12

    def test_newline_inside_string_raises(self) -> None:
        with pytest.raises(LexerError):
            tokenize('"first\nsecond"')


# ###############
# Comments
# ###############


class TestComments:
    def test_line_comment_is_a_token(self) -> None:
        tokens = _tokens_no_eof("// hello\nmessage")
        assert tokens[0].kind == TokenKind.COMMENT
        assert tokens[0].text == "// hello"
        assert tokens[1].text == "message"

    def test_line_comment_excludes_carriage_return(self) -> None:
        assert _texts("// windows\r\nx") == ["// windows", "x"]

    def test_block_comment_is_a_token(self) -> None:
        tokens = _tokens_no_eof("/* one\n two */ x")
        assert tokens[0].kind == TokenKind.COMMENT
        assert tokens[0].text == "/* one\n two */"
        assert tokens[0].end_line == 2
        assert tokens[1].position == Position(offset=16, line=2, column=9)

    def test_unterminated_block_comment_raises(self) -> None:
        with pytest.raises(LexerError) as exc_info:
            tokenize("x\n  /* never closed")
        assert exc_info.value.line == 2
        assert exc_info.value.column == 3

    def test_single_slash_is_punctuation(self) -> None:
        assert _kinds("/") == [TokenKind.PUNCTUATION]


# ###############
# Punctuation
# ###############


class TestPunctuation:
    @pytest.mark.parametrize("source", ["{", "}", "(", ")", "[", "]", "<", ">", ",", ".", ";", "=", "-", ":"])
    def test_single_character_punctuation(self, source: str) -> None:
        tokens = _tokens_no_eof(source)
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.PUNCTUATION
        assert tokens[0].text == source

    def test_map_type_tokens(self) -> None:
        assert _texts("map<int32, string>") == ["map", "<", "int32", ",", "string", ">"]


# ###############
# Positions
# ###############


class TestPositions:
    def test_first_token_position(self) -> None:
        tokens = _tokens_no_eof("option java_package")
        assert tokens[0].position == Position(offset=1, line=1, column=1)
        assert tokens[1].position == Position(offset=8, line=1, column=8)

    def test_position_after_leading_newline(self) -> None:
        tokens = _tokens_no_eof("\nmessage Outer {")
        assert tokens[0].position == Position(offset=2, line=2, column=1)
        assert tokens[1].position == Position(offset=10, line=2, column=9)

    def test_offset_counts_utf8_bytes_and_column_counts_characters(self) -> None:
        tokens = _tokens_no_eof('"é" x')
        assert tokens[1].position == Position(offset=6, line=1, column=5)

    def test_index_and_end_index(self) -> None:
        tokens = _tokens_no_eof("ab  cd")
        assert tokens[1].index == 4
        assert tokens[1].end_index == 6

    def test_tab_counts_as_one_column(self) -> None:
        tokens = _tokens_no_eof("\tx")
        assert tokens[0].column == 2

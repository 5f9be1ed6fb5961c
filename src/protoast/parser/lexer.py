# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for .proto files.

Converts raw source text into a sequence of classified tokens. Comments are
kept as ordinary tokens so that the parser can attach them to the construct
they precede.
"""

import enum
from dataclasses import dataclass

from protoast.model.meta import Position

# ###############
# Public Interface
# ###############


class TokenKind(enum.Enum):
    """Token classes produced by the scanner."""

    IDENTIFIER = "IDENTIFIER"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    STRING = "STRING"
    PUNCTUATION = "PUNCTUATION"
    COMMENT = "COMMENT"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        kind: The class of the token.
        text: The literal source text of the token. String literals keep their
            quotes and escapes; comments keep their markers.
        position: Position of the first character of the token.
        index: 0-based character index of the first character in the source.
    """

    kind: TokenKind
    text: str
    position: Position
    index: int

    @property
    def line(self) -> int:
        return self.position.line

    @property
    def column(self) -> int:
        return self.position.column

    @property
    def end_index(self) -> int:
        """Character index one past the last character of the token."""
        return self.index + len(self.text)

    @property
    def end_line(self) -> int:
        """Line on which the token ends (differs from ``line`` for block comments)."""
        return self.position.line + self.text.count("\n")


class LexerError(Exception):
    """Raised when the scanner encounters an unterminated literal or comment.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def tokenize(source: str) -> list[Token]:
    """Tokenize .proto source text into a sequence of tokens.

    Whitespace is dropped; comments are returned as COMMENT tokens. Any
    character that does not start an identifier, number, string or comment is
    returned as a single-character PUNCTUATION token.

    Args:
        source: The full text of a .proto file.

    Returns:
        A list of Token objects ending with a single EOF token.

    Raises:
        LexerError: On unterminated string literals or block comments.
    """
    return _Lexer(source).tokenize()


# ################
# Implementation
# ################

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._offset = 1
        self._line = 1
        self._column = 1
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """Run the scanner and return all tokens including the terminal EOF."""
        while self._pos < len(self._source):
            self._skip_whitespace()
            if self._pos >= len(self._source):
                break
            self._scan_token()
        self._tokens.append(Token(TokenKind.EOF, "", self._position(), self._pos))
        return self._tokens

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self) -> str:
        """Return the character one position ahead, or '' at end of input."""
        if self._pos + 1 < len(self._source):
            return self._source[self._pos + 1]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        self._offset += len(ch.encode("utf-8"))
        if ch == "\n":
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _position(self) -> Position:
        return Position(offset=self._offset, line=self._line, column=self._column)

    def _emit(self, kind: TokenKind, start: int, position: Position) -> None:
        self._tokens.append(Token(kind, self._source[start : self._pos], position, start))

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._source) and self._current().isspace():
            self._advance()

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> None:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        start = self._pos
        position = self._position()

        if ch == "/" and self._peek() == "/":
            self._scan_line_comment()
            self._emit(TokenKind.COMMENT, start, position)
        elif ch == "/" and self._peek() == "*":
            self._scan_block_comment(position)
            self._emit(TokenKind.COMMENT, start, position)
        elif ch in ('"', "'"):
            self._scan_string(position)
            self._emit(TokenKind.STRING, start, position)
        elif ch.isdigit() or (ch == "." and self._peek().isdigit()):
            kind = self._scan_number()
            self._emit(kind, start, position)
        elif ch.isalpha() or ch == "_":
            while self._pos < len(self._source) and (self._current().isalnum() or self._current() == "_"):
                self._advance()
            self._emit(TokenKind.IDENTIFIER, start, position)
        else:
            self._advance()
            self._emit(TokenKind.PUNCTUATION, start, position)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _scan_line_comment(self) -> None:
        """Consume from '//' through end-of-line (exclusive of the line break)."""
        while self._pos < len(self._source) and self._current() not in "\r\n":
            self._advance()

    def _scan_block_comment(self, position: Position) -> None:
        """Consume from '/*' through the matching '*/'."""
        self._advance()  # /
        self._advance()  # *
        while self._pos < len(self._source):
            if self._current() == "*" and self._peek() == "/":
                self._advance()  # *
                self._advance()  # /
                return
            self._advance()
        raise LexerError("Unterminated block comment", position.line, position.column)

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_string(self, position: Position) -> None:
        """Scan a single- or double-quoted string literal, keeping escapes verbatim."""
        quote = self._advance()
        while self._pos < len(self._source):
            ch = self._current()
            if ch == quote:
                self._advance()
                return
            if ch == "\n":
                break
            if ch == "\\":
                self._advance()
                if self._pos >= len(self._source) or self._current() == "\n":
                    break
            self._advance()
        raise LexerError("Unterminated string literal", position.line, position.column)

    def _scan_number(self) -> TokenKind:
        """Scan an integer (decimal, octal, hex) or floating-point literal."""
        if self._current() == "0" and self._peek() in ("x", "X"):
            self._advance()  # 0
            self._advance()  # x
            while self._current() and self._current() in _HEX_DIGITS:
                self._advance()
            return TokenKind.INTEGER

        is_float = False
        self._scan_digits()
        if self._current() == ".":
            is_float = True
            self._advance()
            self._scan_digits()
        if self._current() in ("e", "E") and (
            self._peek().isdigit() or (self._peek() in ("+", "-") and self._peek_digit_after_sign())
        ):
            is_float = True
            self._advance()  # e
            if self._current() in ("+", "-"):
                self._advance()
            self._scan_digits()
        return TokenKind.FLOAT if is_float else TokenKind.INTEGER

    def _scan_digits(self) -> None:
        while self._pos < len(self._source) and self._current().isdigit():
            self._advance()

    def _peek_digit_after_sign(self) -> bool:
        return self._pos + 2 < len(self._source) and self._source[self._pos + 2].isdigit()

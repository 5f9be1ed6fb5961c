# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Token cursor over a scanned .proto source."""

from protoast.model.meta import Position
from protoast.parser.lexer import Token, TokenKind, tokenize

# ###############
# Public Interface
# ###############


class TokenSource:
    """A forward-only cursor over the tokens of one source text.

    The cursor starts on the first token. Comments are not skipped: they are
    ordinary tokens that the parser consumes explicitly. Once the cursor
    reaches the EOF token, ``advance()`` leaves it there.

    A TokenSource holds the only mutable state of a parse and must not be
    shared between parses.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._tokens = tokenize(source)
        self._pos = 0
        self._previous: Token | None = None

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def current(self) -> Token:
        """Return the token under the cursor."""
        return self._tokens[self._pos]

    def current_text(self) -> str:
        return self._tokens[self._pos].text

    def current_kind(self) -> TokenKind:
        return self._tokens[self._pos].kind

    def current_position(self) -> Position:
        return self._tokens[self._pos].position

    def is_eof(self) -> bool:
        """Return True if the cursor is on the EOF token."""
        return self._tokens[self._pos].kind == TokenKind.EOF

    def advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if tok.kind != TokenKind.EOF:
            self._pos += 1
            if tok.kind != TokenKind.COMMENT:
                self._previous = tok
        return tok

    def previous(self) -> Token | None:
        """Return the most recently consumed non-comment token, if any."""
        return self._previous

    def peek(self, distance: int = 1) -> Token:
        """Return the *distance*-th non-comment token after the current one.

        Returns the EOF token when the input ends first.
        """
        pos = self._pos
        remaining = distance
        while remaining > 0 and self._tokens[pos].kind != TokenKind.EOF:
            pos += 1
            if self._tokens[pos].kind != TokenKind.COMMENT:
                remaining -= 1
        return self._tokens[pos]

    # ------------------------------------------------------------------
    # Raw text
    # ------------------------------------------------------------------

    def slice_text(self, start: Token, end: Token) -> str:
        """Return the raw source text from the start of *start* through the end of *end*."""
        return self._source[start.index : end.end_index]

# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Collection of the comments that lead a construct."""

from protoast.model.meta import Comment
from protoast.parser.lexer import Token, TokenKind
from protoast.parser.source import TokenSource

# ###############
# Public Interface
# ###############


def collect_leading(source: TokenSource) -> tuple[Comment, ...]:
    """Consume the run of comment tokens under the cursor.

    Leaves the cursor on the first non-comment token and returns the comments
    that belong to it, in source order. Not every consumed comment belongs to
    the next construct:

    * a comment that starts on the line of a just-completed statement (the
      previous token is ``;`` or ``}``) trails that statement and is dropped;
    * a blank line between a comment and the next token detaches that comment
      and all comments before it.

    Returns an empty tuple when no comment leads the construct.
    """
    pending: list[Token] = []
    previous = source.previous()
    while source.current_kind() == TokenKind.COMMENT:
        tok = source.advance()
        if not pending and _trails_statement(tok, previous):
            continue
        pending.append(tok)
        if source.current().line > tok.end_line + 1:
            pending.clear()
    return tuple(Comment(raw=tok.text, position=tok.position) for tok in pending)


# ################
# Implementation
# ################

_STATEMENT_ENDS = frozenset({";", "}"})


def _trails_statement(comment: Token, previous: Token | None) -> bool:
    return previous is not None and previous.text in _STATEMENT_ENDS and comment.line == previous.line

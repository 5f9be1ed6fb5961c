# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Source positions and comments shared by every AST node."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############


class Position(BaseModel):
    """The location of the first character of a token.

    Attributes:
        offset: Byte offset into the UTF-8 encoded source, counted from 1.
        line: 1-based line number.
        column: 1-based column number, counted in characters.
    """

    model_config = ConfigDict(frozen=True)

    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class Comment(BaseModel):
    """A single `//` or `/* */` comment, kept verbatim including its markers."""

    model_config = ConfigDict(frozen=True)

    raw: str
    position: Position

# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for .proto files."""

from protoast.parser.comments import collect_leading
from protoast.parser.lexer import LexerError, Token, TokenKind, tokenize
from protoast.parser.parser import (
    DEFAULT_MAX_DEPTH,
    MAX_DEPTH_LIMIT,
    NestingDepthError,
    ParseError,
    Parser,
    ParserOptions,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
    parse_file,
    parse_message,
    parse_option,
)
from protoast.parser.source import TokenSource

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "MAX_DEPTH_LIMIT",
    "parse_file",
    "parse_message",
    "parse_option",
    "Parser",
    "ParserOptions",
    "ParseError",
    "UnexpectedTokenError",
    "UnexpectedEndOfInputError",
    "NestingDepthError",
    "LexerError",
    "Token",
    "TokenKind",
    "TokenSource",
    "tokenize",
    "collect_leading",
]

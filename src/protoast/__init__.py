# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Position-annotated AST front-end for Protocol Buffers schema files."""

from protoast.parser import ParseError, ParserOptions, parse_file, parse_message, parse_option

__all__ = [
    "parse_file",
    "parse_message",
    "parse_option",
    "ParserOptions",
    "ParseError",
]

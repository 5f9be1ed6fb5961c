# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for .proto files.

Pulls tokens from a TokenSource and builds the immutable AST defined in
``protoast.model``. Each grammar production is one method; every body-element
production starts by collecting the comments that lead it.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from protoast.model.entities import (
    RPC,
    Enum,
    EnumElement,
    EnumField,
    Extensions,
    Field,
    Import,
    MapField,
    Message,
    MessageElement,
    Oneof,
    OneofField,
    Option,
    Package,
    ProtocolFile,
    Reserved,
    RPCType,
    Service,
    ServiceElement,
    Syntax,
)
from protoast.model.meta import Comment, Position
from protoast.parser.comments import collect_leading
from protoast.parser.lexer import Token, TokenKind
from protoast.parser.source import TokenSource

# ###############
# Public Interface
# ###############

DEFAULT_MAX_DEPTH = 64
# Each nesting level costs two Python frames, so this stays well below the
# interpreter recursion limit.
MAX_DEPTH_LIMIT = 256


class ParseError(Exception):
    """Raised when the parser encounters a syntactically invalid construct.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
        position: Full position of the offending token.
        found: Text of the offending token ('' at end of input).
        production: Name of the grammar production that failed, if known.
    """

    def __init__(self, message: str, position: Position, found: str = "", production: str | None = None) -> None:
        super().__init__(f"Line {position.line}, column {position.column}: {message}")
        self.line = position.line
        self.column = position.column
        self.position = position
        self.found = found
        self.production = production


class UnexpectedTokenError(ParseError):
    """A token other than the one the grammar requires was found."""

    def __init__(self, expected: str, found: str, position: Position, production: str | None = None) -> None:
        message = f"Expected {expected}, got {found!r}"
        if production:
            message += f" in {production}"
        super().__init__(message, position, found, production)
        self.expected = expected


class UnexpectedEndOfInputError(ParseError):
    """The input ended in the middle of a construct."""

    def __init__(self, context: str, position: Position) -> None:
        super().__init__(f"Unexpected end of input in {context}", position, "", context)
        self.context = context


class NestingDepthError(ParseError):
    """Blocks are nested deeper than ParserOptions.max_depth allows."""

    def __init__(self, limit: int, position: Position) -> None:
        super().__init__(f"Nesting depth exceeds the limit of {limit}", position)
        self.limit = limit


@dataclass(frozen=True)
class ParserOptions:
    """Settings that change how the parser treats its input.

    Attributes:
        strict: Raise on unrecognised statements at file scope instead of
            skipping them one token at a time.
        max_depth: Maximum nesting of message, enum, oneof and service blocks,
            between 1 and MAX_DEPTH_LIMIT.
    """

    strict: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if not 1 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {self.max_depth}")


def parse_file(source: str, options: ParserOptions | None = None) -> ProtocolFile:
    """Parse the full text of a .proto file.

    Args:
        source: The full text of a .proto file.
        options: Parser settings; defaults to lenient parsing.

    Returns:
        The ProtocolFile AST. Empty input yields an empty ProtocolFile.

    Raises:
        LexerError: If the source contains an unterminated literal or comment.
        ParseError: If the source is syntactically invalid.
    """
    return Parser(TokenSource(source), options).parse_file()


def parse_message(source: str, options: ParserOptions | None = None) -> Message:
    """Parse text holding exactly one message declaration (comments allowed around it).

    Raises:
        LexerError: If the source contains an unterminated literal or comment.
        ParseError: If the text is not a single well-formed message.
    """
    parser = Parser(TokenSource(source), options)
    message = parser.parse_message()
    parser.expect_end_of_input()
    return message


def parse_option(source: str, options: ParserOptions | None = None) -> Option:
    """Parse text holding exactly one option statement (comments allowed around it).

    Raises:
        LexerError: If the source contains an unterminated literal or comment.
        ParseError: If the text is not a single well-formed option.
    """
    parser = Parser(TokenSource(source), options)
    option = parser.parse_option()
    parser.expect_end_of_input()
    return option


class Parser:
    """Recursive-descent parser over a single TokenSource.

    The entry points parse one construct starting at the cursor and leave the
    cursor just past it, so a Parser can be embedded in a larger one.
    """

    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._source = source
        self._options = options or ParserOptions()
        self._depth = 0

    def is_eof(self) -> bool:
        """Return True if the cursor is at end of input."""
        return self._source.is_eof()

    def expect_end_of_input(self) -> None:
        """Skip trailing comments and raise unless the input is exhausted."""
        collect_leading(self._source)
        if not self._source.is_eof():
            tok = self._source.current()
            raise UnexpectedTokenError("end of input", tok.text, tok.position)

    def parse_file(self) -> ProtocolFile:
        """Parse top-level statements until end of input."""
        syntax: Syntax | None = None
        package: Package | None = None
        imports: list[Import] = []
        options: list[Option] = []
        messages: list[Message] = []
        enums: list[Enum] = []
        services: list[Service] = []

        while True:
            comments = collect_leading(self._source)
            if self._source.is_eof():
                break
            text = self._source.current_text()
            if text in ("syntax", "edition"):
                syntax = self._parse_syntax(comments)
            elif text == "package":
                package = self._parse_package(comments)
            elif text == "import":
                imports.append(self._parse_import(comments))
            elif text == "option":
                options.append(self._parse_option(comments))
            elif text == "message":
                messages.append(self._parse_message(comments))
            elif text == "enum":
                enums.append(self._parse_enum(comments))
            elif text == "service":
                services.append(self._parse_service(comments))
            elif text == ";":
                self._source.advance()
            elif self._options.strict:
                tok = self._source.current()
                raise UnexpectedTokenError("top-level statement", tok.text, tok.position, "file")
            else:
                # Lenient mode: unknown top-level tokens are skipped one by one.
                self._source.advance()

        return ProtocolFile(
            syntax=syntax.value if syntax else None,
            package=package.name if package else None,
            syntax_statement=syntax,
            package_statement=package,
            imports=tuple(imports),
            options=tuple(options),
            messages=tuple(messages),
            enums=tuple(enums),
            services=tuple(services),
        )

    def parse_message(self) -> Message:
        """Parse one message declaration, together with its leading comments."""
        return self._parse_message(collect_leading(self._source))

    def parse_option(self) -> Option:
        """Parse one option statement, together with its leading comments."""
        return self._parse_option(collect_leading(self._source))

    def parse_enum(self) -> Enum:
        """Parse one enum declaration, together with its leading comments."""
        return self._parse_enum(collect_leading(self._source))

    def parse_service(self) -> Service:
        """Parse one service declaration, together with its leading comments."""
        return self._parse_service(collect_leading(self._source))

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the next significant token, consuming interior comments."""
        while self._source.current_kind() == TokenKind.COMMENT:
            self._source.advance()
        return self._source.current()

    def _check(self, text: str) -> bool:
        """Return True if the next significant token has the given text."""
        tok = self._current()
        return tok.kind != TokenKind.STRING and tok.text == text

    def _expect(self, text: str, production: str) -> Token:
        """Consume the next significant token if its text matches.

        Raises UnexpectedEndOfInputError at end of input and
        UnexpectedTokenError on any other token.
        """
        if self._check(text):
            return self._source.advance()
        raise self._error(repr(text), production)

    def _expect_kind(self, production: str, *kinds: TokenKind) -> Token:
        """Consume the next significant token if it is of one of the given kinds."""
        tok = self._current()
        if tok.kind in kinds:
            return self._source.advance()
        expected = " or ".join(kind.value.lower() for kind in kinds)
        raise self._error(expected, production)

    def _expect_identifier(self, production: str) -> str:
        return self._expect_kind(production, TokenKind.IDENTIFIER).text

    def _error(self, expected: str, production: str) -> ParseError:
        tok = self._current()
        if tok.kind == TokenKind.EOF:
            return UnexpectedEndOfInputError(production, tok.position)
        return UnexpectedTokenError(expected, tok.text, tok.position, production)

    @contextmanager
    def _nested(self, start: Token) -> Iterator[None]:
        """Track one level of block nesting opened by *start*."""
        self._depth += 1
        try:
            if self._depth > self._options.max_depth:
                raise NestingDepthError(self._options.max_depth, start.position)
            yield
        finally:
            self._depth -= 1

    def _body_element_start(self, production: str) -> tuple[tuple[Comment, ...], bool]:
        """Collect leading comments of a body element.

        Returns the comments and whether the closing brace has been reached.
        """
        comments = collect_leading(self._source)
        if self._source.is_eof():
            raise UnexpectedEndOfInputError(production, self._source.current_position())
        return comments, self._check("}")

    # ------------------------------------------------------------------
    # Shared sub-productions
    # ------------------------------------------------------------------

    def _parse_full_ident(self, production: str, *, allow_leading_dot: bool = False) -> str:
        """Parse: ['.'] ident ('.' ident)*"""
        parts: list[str] = []
        if allow_leading_dot and self._check("."):
            self._source.advance()
            parts.append("")
        parts.append(self._expect_identifier(production))
        while self._check("."):
            self._source.advance()
            parts.append(self._expect_identifier(production))
        return ".".join(parts)

    def _parse_option_name(self) -> str:
        """Parse: (ident | '(' fullIdent ')') ('.' ident)*"""
        if self._check("("):
            self._source.advance()
            extension = self._parse_full_ident("option name", allow_leading_dot=True)
            self._expect(")", "option name")
            name = f"({extension})"
        else:
            name = self._expect_identifier("option name")
        while self._check("."):
            self._source.advance()
            name += "." + self._expect_identifier("option name")
        return name

    def _parse_constant(self, production: str) -> str:
        """Parse an option value and return it as written in the source."""
        tok = self._current()
        if tok.kind == TokenKind.PUNCTUATION and tok.text in ("-", "+"):
            sign = self._source.advance()
            value = self._expect_kind(production, TokenKind.INTEGER, TokenKind.FLOAT, TokenKind.IDENTIFIER)
            return sign.text + value.text
        if tok.kind in (TokenKind.INTEGER, TokenKind.FLOAT):
            return self._source.advance().text
        if tok.kind == TokenKind.STRING:
            last = self._source.advance()
            while self._current().kind == TokenKind.STRING:
                last = self._source.advance()
            return self._source.slice_text(tok, last)
        if tok.kind == TokenKind.IDENTIFIER:
            return self._parse_full_ident(production)
        if tok.text == "{":
            return self._parse_balanced("{", "}", production)
        raise self._error("constant", production)

    def _parse_balanced(self, opener: str, closer: str, production: str) -> str:
        """Consume a bracketed span, nesting included, and return its raw text."""
        start = self._expect(opener, production)
        depth = 1
        while True:
            tok = self._source.current()
            if tok.kind == TokenKind.EOF:
                raise UnexpectedEndOfInputError(production, tok.position)
            self._source.advance()
            if tok.kind == TokenKind.PUNCTUATION and tok.text == opener:
                depth += 1
            elif tok.kind == TokenKind.PUNCTUATION and tok.text == closer:
                depth -= 1
                if depth == 0:
                    return self._source.slice_text(start, tok)

    def _parse_bracket_options(self, production: str) -> str | None:
        """Parse optional ``[ ... ]`` options, kept as raw source text."""
        if not self._check("["):
            return None
        return self._parse_balanced("[", "]", production)

    def _parse_field_number(self, production: str) -> str:
        return self._expect_kind(production, TokenKind.INTEGER).text

    # ------------------------------------------------------------------
    # File-level statements
    # ------------------------------------------------------------------

    def _parse_syntax(self, comments: tuple[Comment, ...]) -> Syntax:
        """Parse: ('syntax' | 'edition') '=' strLit ';'"""
        start = self._expect_kind("syntax", TokenKind.IDENTIFIER)
        keyword = start.text
        self._expect("=", keyword)
        value = self._expect_kind(keyword, TokenKind.STRING).text
        self._expect(";", keyword)
        return Syntax(comments=comments, position=start.position, keyword=keyword, value=value)

    def _parse_package(self, comments: tuple[Comment, ...]) -> Package:
        """Parse: 'package' fullIdent ';'"""
        start = self._expect("package", "package")
        name = self._parse_full_ident("package")
        self._expect(";", "package")
        return Package(comments=comments, position=start.position, name=name)

    def _parse_import(self, comments: tuple[Comment, ...]) -> Import:
        """Parse: 'import' ['public' | 'weak'] strLit ';'"""
        start = self._expect("import", "import")
        modifier = None
        if self._check("public") or self._check("weak"):
            modifier = self._source.advance().text
        location = self._expect_kind("import", TokenKind.STRING).text
        self._expect(";", "import")
        return Import(comments=comments, position=start.position, modifier=modifier, location=location)

    def _parse_option(self, comments: tuple[Comment, ...]) -> Option:
        """Parse: 'option' optionName '=' constant ';'"""
        start = self._expect("option", "option")
        name = self._parse_option_name()
        self._expect("=", "option")
        constant = self._parse_constant("option")
        self._expect(";", "option")
        return Option(comments=comments, position=start.position, option_name=name, constant=constant)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def _parse_message(self, comments: tuple[Comment, ...]) -> Message:
        """Parse: 'message' ident '{' messageBody '}'"""
        start = self._expect("message", "message")
        name = self._expect_identifier("message")
        self._expect("{", "message")
        body: list[MessageElement] = []
        with self._nested(start):
            while True:
                element_comments, closed = self._body_element_start("message body")
                if closed:
                    break
                element = self._parse_message_element(element_comments)
                if element is not None:
                    body.append(element)
        self._expect("}", "message")
        return Message(comments=comments, position=start.position, message_name=name, message_body=tuple(body))

    def _parse_message_element(self, comments: tuple[Comment, ...]) -> MessageElement | None:
        """Dispatch on the next token to the production for one message body element."""
        text = self._source.current_text()
        if text == "option":
            return self._parse_option(comments)
        if text == "message":
            return self._parse_message(comments)
        if text == "enum":
            return self._parse_enum(comments)
        if text == "oneof":
            return self._parse_oneof(comments)
        if text == "reserved":
            return self._parse_reserved(comments)
        if text == "extensions":
            return self._parse_extensions(comments)
        if text == ";":
            self._source.advance()
            return None
        if text == "map" and self._source.peek().text == "<":
            return self._parse_map_field(comments)
        return self._parse_field(comments)

    def _parse_field(self, comments: tuple[Comment, ...]) -> Field:
        """Parse: [label] type ident '=' intLit ['[' options ']'] ';'"""
        start = self._current()
        label = None
        if start.text in ("repeated", "optional", "required"):
            label = self._source.advance().text
        field_type = self._parse_full_ident("field", allow_leading_dot=True)
        name = self._expect_identifier("field")
        self._expect("=", "field")
        number = self._parse_field_number("field")
        field_options = self._parse_bracket_options("field")
        self._expect(";", "field")
        return Field(
            comments=comments,
            position=start.position,
            type=field_type,
            field_name=name,
            field_number=number,
            is_repeated=label == "repeated",
            is_optional=label == "optional",
            is_required=label == "required",
            field_options=field_options,
        )

    def _parse_map_field(self, comments: tuple[Comment, ...]) -> MapField:
        """Parse: 'map' '<' keyType ',' type '>' ident '=' intLit ['[' options ']'] ';'"""
        start = self._expect("map", "map field")
        self._expect("<", "map field")
        key_type = self._expect_identifier("map field")
        self._expect(",", "map field")
        value_type = self._parse_full_ident("map field", allow_leading_dot=True)
        self._expect(">", "map field")
        name = self._expect_identifier("map field")
        self._expect("=", "map field")
        number = self._parse_field_number("map field")
        field_options = self._parse_bracket_options("map field")
        self._expect(";", "map field")
        return MapField(
            comments=comments,
            position=start.position,
            key_type=key_type,
            type=value_type,
            map_name=name,
            field_number=number,
            field_options=field_options,
        )

    def _parse_oneof(self, comments: tuple[Comment, ...]) -> Oneof:
        """Parse: 'oneof' ident '{' (option | oneofField)* '}'"""
        start = self._expect("oneof", "oneof")
        name = self._expect_identifier("oneof")
        self._expect("{", "oneof")
        fields: list[OneofField] = []
        options: list[Option] = []
        with self._nested(start):
            while True:
                element_comments, closed = self._body_element_start("oneof body")
                if closed:
                    break
                if self._check("option"):
                    options.append(self._parse_option(element_comments))
                elif self._check(";"):
                    self._source.advance()
                else:
                    fields.append(self._parse_oneof_field(element_comments))
        self._expect("}", "oneof")
        return Oneof(
            comments=comments,
            position=start.position,
            oneof_name=name,
            oneof_fields=tuple(fields),
            options=tuple(options),
        )

    def _parse_oneof_field(self, comments: tuple[Comment, ...]) -> OneofField:
        """Parse: type ident '=' intLit ['[' options ']'] ';'"""
        start = self._current()
        field_type = self._parse_full_ident("oneof field", allow_leading_dot=True)
        name = self._expect_identifier("oneof field")
        self._expect("=", "oneof field")
        number = self._parse_field_number("oneof field")
        field_options = self._parse_bracket_options("oneof field")
        self._expect(";", "oneof field")
        return OneofField(
            comments=comments,
            position=start.position,
            type=field_type,
            field_name=name,
            field_number=number,
            field_options=field_options,
        )

    # ------------------------------------------------------------------
    # Reserved and extension ranges
    # ------------------------------------------------------------------

    def _parse_reserved(self, comments: tuple[Comment, ...]) -> Reserved:
        """Parse: 'reserved' (ranges | strFieldNames) ';'"""
        start = self._expect("reserved", "reserved")
        entries = self._parse_range_list("reserved", allow_names=True)
        self._expect(";", "reserved")
        return Reserved(comments=comments, position=start.position, entries=entries)

    def _parse_extensions(self, comments: tuple[Comment, ...]) -> Extensions:
        """Parse: 'extensions' ranges ';'"""
        start = self._expect("extensions", "extensions")
        entries = self._parse_range_list("extensions", allow_names=False)
        self._expect(";", "extensions")
        return Extensions(comments=comments, position=start.position, entries=entries)

    def _parse_range_list(self, production: str, *, allow_names: bool) -> tuple[str, ...]:
        """Parse a comma-separated list of names, numbers, or ``N to M`` ranges."""
        entries = [self._parse_range_entry(production, allow_names)]
        while self._check(","):
            self._source.advance()
            entries.append(self._parse_range_entry(production, allow_names))
        return tuple(entries)

    def _parse_range_entry(self, production: str, allow_names: bool) -> str:
        tok = self._current()
        if allow_names and tok.kind in (TokenKind.STRING, TokenKind.IDENTIFIER):
            return self._source.advance().text
        low = self._parse_signed_integer(production)
        if not self._check("to"):
            return low
        self._source.advance()
        if self._check("max"):
            high = self._source.advance().text
        else:
            high = self._parse_signed_integer(production)
        return f"{low} to {high}"

    def _parse_signed_integer(self, production: str) -> str:
        sign = ""
        if self._check("-"):
            sign = self._source.advance().text
        return sign + self._expect_kind(production, TokenKind.INTEGER).text

    # ------------------------------------------------------------------
    # Enums
    # ------------------------------------------------------------------

    def _parse_enum(self, comments: tuple[Comment, ...]) -> Enum:
        """Parse: 'enum' ident '{' (option | reserved | enumField)* '}'"""
        start = self._expect("enum", "enum")
        name = self._expect_identifier("enum")
        self._expect("{", "enum")
        body: list[EnumElement] = []
        with self._nested(start):
            while True:
                element_comments, closed = self._body_element_start("enum body")
                if closed:
                    break
                if self._check("option"):
                    body.append(self._parse_option(element_comments))
                elif self._check("reserved"):
                    body.append(self._parse_reserved(element_comments))
                elif self._check(";"):
                    self._source.advance()
                else:
                    body.append(self._parse_enum_field(element_comments))
        self._expect("}", "enum")
        return Enum(comments=comments, position=start.position, enum_name=name, enum_body=tuple(body))

    def _parse_enum_field(self, comments: tuple[Comment, ...]) -> EnumField:
        """Parse: ident '=' ['-'] intLit ['[' options ']'] ';'"""
        start = self._current()
        ident = self._expect_identifier("enum field")
        self._expect("=", "enum field")
        number = self._parse_signed_integer("enum field")
        value_options = self._parse_bracket_options("enum field")
        self._expect(";", "enum field")
        return EnumField(
            comments=comments,
            position=start.position,
            ident=ident,
            number=number,
            enum_value_options=value_options,
        )

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def _parse_service(self, comments: tuple[Comment, ...]) -> Service:
        """Parse: 'service' ident '{' (option | rpc)* '}'"""
        start = self._expect("service", "service")
        name = self._expect_identifier("service")
        self._expect("{", "service")
        body: list[ServiceElement] = []
        with self._nested(start):
            while True:
                element_comments, closed = self._body_element_start("service body")
                if closed:
                    break
                if self._check("option"):
                    body.append(self._parse_option(element_comments))
                elif self._check("rpc"):
                    body.append(self._parse_rpc(element_comments))
                elif self._check(";"):
                    self._source.advance()
                else:
                    raise self._error("'rpc' or 'option'", "service body")
        self._expect("}", "service")
        return Service(comments=comments, position=start.position, service_name=name, service_body=tuple(body))

    def _parse_rpc(self, comments: tuple[Comment, ...]) -> RPC:
        """Parse: 'rpc' ident '(' rpcType ')' 'returns' '(' rpcType ')' (';' | '{' option* '}')"""
        start = self._expect("rpc", "rpc")
        name = self._expect_identifier("rpc")
        self._expect("(", "rpc")
        request = self._parse_rpc_type()
        self._expect(")", "rpc")
        self._expect("returns", "rpc")
        self._expect("(", "rpc")
        response = self._parse_rpc_type()
        self._expect(")", "rpc")

        options: list[Option] = []
        if self._check("{"):
            opener = self._source.advance()
            with self._nested(opener):
                while True:
                    element_comments, closed = self._body_element_start("rpc body")
                    if closed:
                        break
                    if self._check("option"):
                        options.append(self._parse_option(element_comments))
                    elif self._check(";"):
                        self._source.advance()
                    else:
                        raise self._error("'option' or '}'", "rpc body")
            self._expect("}", "rpc")
        else:
            self._expect(";", "rpc")

        return RPC(
            comments=comments,
            position=start.position,
            rpc_name=name,
            rpc_request=request,
            rpc_response=response,
            options=tuple(options),
        )

    def _parse_rpc_type(self) -> RPCType:
        """Parse: ['stream'] messageType"""
        is_stream = False
        if self._check("stream") and self._source.peek().text not in (")", "."):
            self._source.advance()
            is_stream = True
        message_type = self._parse_full_ident("rpc type", allow_leading_dot=True)
        return RPCType(message_type=message_type, is_stream=is_stream)

# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""AST nodes for parsed .proto files.

Every node is an immutable pydantic model carrying the comments that lead it
and the position of its first significant token. Bodies that interleave
several kinds of element (messages, enums, services) are stored as a single
ordered tuple of a discriminated union, keyed on each node's ``kind``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

from protoast.model.meta import Comment, Position

# ###############
# Public Interface
# ###############


class Node(BaseModel):
    """Common base of every positioned AST node."""

    model_config = ConfigDict(frozen=True)

    comments: tuple[Comment, ...] = ()
    position: Position


class Option(Node):
    """An ``option <name> = <constant>;`` statement.

    Both slots keep the source text as written: ``(my_option).a`` and
    ``"com.example.foo"`` (quotes included).
    """

    kind: Literal["option"] = "option"
    option_name: str
    constant: str


class Field(Node):
    """A normal field: ``[repeated|optional|required] <type> <name> = <number> [opts];``"""

    kind: Literal["field"] = "field"
    type: str
    field_name: str
    field_number: str
    is_repeated: bool = False
    is_optional: bool = False
    is_required: bool = False
    field_options: str | None = None


class MapField(Node):
    """A map field: ``map<<key_type>, <type>> <map_name> = <number> [opts];``"""

    kind: Literal["map_field"] = "map_field"
    key_type: str
    type: str
    map_name: str
    field_number: str
    field_options: str | None = None


class OneofField(Node):
    """A member of a oneof; a field without a label."""

    kind: Literal["oneof_field"] = "oneof_field"
    type: str
    field_name: str
    field_number: str
    field_options: str | None = None


class Oneof(Node):
    """A ``oneof <name> { ... }`` block."""

    kind: Literal["oneof"] = "oneof"
    oneof_name: str
    oneof_fields: tuple[OneofField, ...] = ()
    options: tuple[Option, ...] = ()


class Reserved(Node):
    """A ``reserved`` statement.

    Entries are kept as written, in order: field names (``"bar"``, or ``bar``
    in editions), single numbers (``4``, ``-1``) and ranges (``9 to 11``,
    ``40 to max``).
    """

    kind: Literal["reserved"] = "reserved"
    entries: tuple[str, ...] = ()

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(e for e in self.entries if not _is_number_range(e))

    @property
    def ranges(self) -> tuple[str, ...]:
        return tuple(e for e in self.entries if _is_number_range(e))


class Extensions(Node):
    """An ``extensions`` statement declaring extension number ranges."""

    kind: Literal["extensions"] = "extensions"
    entries: tuple[str, ...] = ()


class EnumField(Node):
    """An enum value: ``<ident> = <number> [opts];``"""

    kind: Literal["enum_field"] = "enum_field"
    ident: str
    number: str
    enum_value_options: str | None = None


class Enum(Node):
    """An ``enum <name> { ... }`` declaration."""

    kind: Literal["enum"] = "enum"
    enum_name: str
    enum_body: tuple[EnumElement, ...] = ()

    @property
    def enum_fields(self) -> tuple[EnumField, ...]:
        return tuple(e for e in self.enum_body if isinstance(e, EnumField))

    @property
    def options(self) -> tuple[Option, ...]:
        return tuple(e for e in self.enum_body if isinstance(e, Option))


class Message(Node):
    """A ``message <name> { ... }`` declaration.

    ``message_body`` holds every element in declaration order. The typed
    properties are filtered views over it.
    """

    kind: Literal["message"] = "message"
    message_name: str
    message_body: tuple[MessageElement, ...] = ()

    @property
    def options(self) -> tuple[Option, ...]:
        return tuple(e for e in self.message_body if isinstance(e, Option))

    @property
    def fields(self) -> tuple[Field, ...]:
        return tuple(e for e in self.message_body if isinstance(e, Field))

    @property
    def map_fields(self) -> tuple[MapField, ...]:
        return tuple(e for e in self.message_body if isinstance(e, MapField))

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(e for e in self.message_body if isinstance(e, Message))

    @property
    def enums(self) -> tuple[Enum, ...]:
        return tuple(e for e in self.message_body if isinstance(e, Enum))

    @property
    def oneofs(self) -> tuple[Oneof, ...]:
        return tuple(e for e in self.message_body if isinstance(e, Oneof))


class RPCType(BaseModel):
    """The request or response type of an RPC."""

    model_config = ConfigDict(frozen=True)

    message_type: str
    is_stream: bool = False


class RPC(Node):
    """``rpc <name> ([stream] <req>) returns ([stream] <resp>) (; | { ... })``"""

    kind: Literal["rpc"] = "rpc"
    rpc_name: str
    rpc_request: RPCType
    rpc_response: RPCType
    options: tuple[Option, ...] = ()


class Service(Node):
    """A ``service <name> { ... }`` declaration."""

    kind: Literal["service"] = "service"
    service_name: str
    service_body: tuple[ServiceElement, ...] = ()

    @property
    def rpcs(self) -> tuple[RPC, ...]:
        return tuple(e for e in self.service_body if isinstance(e, RPC))

    @property
    def options(self) -> tuple[Option, ...]:
        return tuple(e for e in self.service_body if isinstance(e, Option))


class Syntax(Node):
    """A ``syntax = "proto3";`` or ``edition = "2023";`` statement. ``value`` keeps its quotes."""

    kind: Literal["syntax"] = "syntax"
    keyword: Literal["syntax", "edition"] = "syntax"
    value: str


class Package(Node):
    """A ``package foo.bar;`` statement."""

    kind: Literal["package"] = "package"
    name: str


class Import(Node):
    """An ``import [public|weak] "<path>";`` statement. ``location`` keeps its quotes."""

    kind: Literal["import"] = "import"
    modifier: Literal["public", "weak"] | None = None
    location: str


class ProtocolFile(BaseModel):
    """Top-level result of parsing a single .proto file.

    ``syntax`` and ``package`` hold the declared values; the matching
    statements, with their comments and positions, are kept in
    ``syntax_statement`` and ``package_statement``.
    """

    model_config = ConfigDict(frozen=True)

    syntax: str | None = None
    package: str | None = None
    syntax_statement: Syntax | None = None
    package_statement: Package | None = None
    imports: tuple[Import, ...] = ()
    options: tuple[Option, ...] = ()
    messages: tuple[Message, ...] = ()
    enums: tuple[Enum, ...] = ()
    services: tuple[Service, ...] = ()


# One element of a message body, in declaration order.
MessageElement = Annotated[
    Option | Field | MapField | Message | Enum | Oneof | Reserved | Extensions,
    _Field(discriminator="kind"),
]

EnumElement = Annotated[
    Option | EnumField | Reserved,
    _Field(discriminator="kind"),
]

ServiceElement = Annotated[
    Option | RPC,
    _Field(discriminator="kind"),
]

# Resolve forward references in self-referential and union-bodied models.
Enum.model_rebuild()
Message.model_rebuild()
Service.model_rebuild()
ProtocolFile.model_rebuild()


# ################
# Implementation
# ################


def _is_number_range(entry: str) -> bool:
    """Return True for reserved numbers and ranges, False for field names."""
    return entry[:1].isdigit() or entry[:1] == "-"

# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""AST model for parsed .proto files."""

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
    Node,
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

__all__ = [
    # Metadata
    "Position",
    "Comment",
    "Node",
    # Body elements
    "Option",
    "Field",
    "MapField",
    "OneofField",
    "Oneof",
    "Reserved",
    "Extensions",
    "EnumField",
    "Enum",
    "Message",
    "RPCType",
    "RPC",
    "Service",
    "Import",
    "Syntax",
    "Package",
    "MessageElement",
    "EnumElement",
    "ServiceElement",
    # Root
    "ProtocolFile",
]

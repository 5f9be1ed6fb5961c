# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Serialization and deserialization of parsed ProtocolFile artifacts.

Artifacts are JSON documents that keep every node's kind, comments and
position, so that a dump reads back into an equal AST. The format is
versioned so future schema changes can be detected. Artifacts written by the
build also record the parser settings they were produced with.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from protoast.model.entities import ProtocolFile
from protoast.parser.parser import ParserOptions

# ###############
# Public Interface
# ###############

ARTIFACT_FORMAT_VERSION = "1"
ARTIFACT_SUFFIX = ".proto.json"


def serialize(proto_file: ProtocolFile, indent: int | None = None, options: ParserOptions | None = None) -> str:
    """Serialize a ProtocolFile to a JSON string.

    Args:
        proto_file: The AST to serialize.
        indent: Indentation for pretty output; compact output when None.
        options: Parser settings the AST was produced with, recorded in the
            envelope when given.
    """
    payload: dict[str, Any] = {"v": ARTIFACT_FORMAT_VERSION}
    if options is not None:
        payload["options"] = _options_payload(options)
    payload["file"] = proto_file.model_dump(mode="json")
    if indent is None:
        return json.dumps(payload, separators=(",", ":"))
    return json.dumps(payload, indent=indent)


def deserialize(data: str, options: ParserOptions | None = None) -> ProtocolFile:
    """Deserialize a ProtocolFile from a JSON string.

    Args:
        data: JSON string produced by :func:`serialize`.
        options: When given, the artifact must have been produced with
            exactly these parser settings.

    Returns:
        The reconstructed :class:`ProtocolFile`.

    Raises:
        ValueError: If the artifact format version is not recognised, the
            recorded parser settings differ from *options*, or the payload
            does not describe a valid AST.
    """
    obj = json.loads(data)
    version = obj.get("v") if isinstance(obj, dict) else None
    if version != ARTIFACT_FORMAT_VERSION:
        raise ValueError(f"Unsupported artifact format version: {version!r}")
    if options is not None and obj.get("options") != _options_payload(options):
        raise ValueError(f"Artifact was built with different parser options: {obj.get('options')!r}")
    try:
        return ProtocolFile.model_validate(obj.get("file", {}))
    except ValidationError as exc:
        raise ValueError(f"Invalid artifact payload: {exc}") from exc


def write_artifact(proto_file: ProtocolFile, path: Path, options: ParserOptions | None = None) -> None:
    """Write an artifact to *path*, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(proto_file, options=options), encoding="utf-8")


def read_artifact(path: Path, options: ParserOptions | None = None) -> ProtocolFile:
    """Read and deserialize an artifact from *path*."""
    return deserialize(path.read_text(encoding="utf-8"), options)


# ################
# Implementation
# ################


def _options_payload(options: ParserOptions) -> dict[str, Any]:
    return {"strict": options.strict, "max_depth": options.max_depth}

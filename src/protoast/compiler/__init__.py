# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Batch parsing and JSON artifacts for parsed .proto files."""

from protoast.compiler.artifact import ARTIFACT_SUFFIX, deserialize, read_artifact, serialize, write_artifact
from protoast.compiler.build import CompilerError, compile_files, find_proto_files, load_source

__all__ = [
    "serialize",
    "deserialize",
    "write_artifact",
    "read_artifact",
    "ARTIFACT_SUFFIX",
    "compile_files",
    "find_proto_files",
    "load_source",
    "CompilerError",
]

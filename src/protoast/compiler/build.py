# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Batch parsing of .proto files with an on-disk artifact cache.

Implements a CMake-style cache: an artifact is reused when it already exists
and is strictly newer than the corresponding source file. Every file is
parsed independently; import statements are recorded in the AST but are not
followed.
"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path

from protoast.compiler.artifact import ARTIFACT_SUFFIX, read_artifact, write_artifact
from protoast.model.entities import ProtocolFile
from protoast.parser.lexer import LexerError
from protoast.parser.parser import ParseError, ParserOptions, parse_file

# ###############
# Public Interface
# ###############

PROTO_SUFFIX = ".proto"


class CompilerError(Exception):
    """Raised when a source file cannot be read or parsed.

    Attributes:
        path: The offending source file, if known.
        line: 1-based line of a syntax error, if any.
        column: 1-based column of a syntax error, if any.
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.line = line
        self.column = column


def find_proto_files(directory: Path, exclude: list[str] | None = None, skip: list[Path] | None = None) -> list[Path]:
    """Return every .proto file under *directory*, sorted.

    Args:
        directory: Root to search recursively.
        exclude: Glob patterns matched against the POSIX path relative to
            *directory* (e.g. ``third_party/**``).
        skip: Directories whose contents are ignored (e.g. the build directory).
    """
    patterns = exclude or []
    skipped = skip or []
    found: list[Path] = []
    for path in directory.rglob(f"*{PROTO_SUFFIX}"):
        if not path.is_file():
            continue
        if any(s in path.parents for s in skipped):
            continue
        rel = path.relative_to(directory).as_posix()
        if any(fnmatch(rel, pattern) for pattern in patterns):
            continue
        found.append(path)
    return sorted(found)


def load_source(source_file: Path, options: ParserOptions | None = None) -> ProtocolFile:
    """Read and parse one .proto file.

    Raises:
        CompilerError: If the file cannot be read or is syntactically invalid.
    """
    try:
        source_text = source_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise CompilerError(f"Cannot read source file '{source_file}': {exc}", source_file) from exc

    try:
        return parse_file(source_text, options)
    except (LexerError, ParseError) as exc:
        raise CompilerError(f"{source_file}: {exc}", source_file, exc.line, exc.column) from exc


def compile_files(
    files: list[Path],
    build_dir: Path,
    root: Path,
    options: ParserOptions | None = None,
) -> dict[str, ProtocolFile]:
    """Parse a list of .proto source files, caching results in *build_dir*.

    For each file, the compiler:
    1. Checks whether an up-to-date artifact already exists (cache hit).
    2. Parses the source file if no valid cache is found.
    3. Writes the artifact to *build_dir*, mirroring the source layout.

    Args:
        files: Paths to the .proto source files, all located under *root*.
        build_dir: Root directory for artifacts.
        root: Base directory used to compute each file's key.
        options: Parser settings for every file.

    Returns:
        A mapping from canonical keys (the path relative to *root* without the
        ``.proto`` suffix, e.g. ``"foo/bar"``) to parsed ProtocolFile models.

    Raises:
        CompilerError: On the first file that cannot be read or parsed.
    """
    compiled: dict[str, ProtocolFile] = {}
    for f in files:
        key = _rel_key(f, root)
        if key not in compiled:
            compiled[key] = _compile_file(f, _artifact_path(key, build_dir), options)
    return compiled


# ################
# Implementation
# ################


def _rel_key(source_file: Path, root: Path) -> str:
    """Return the canonical key for a source file (relative path without extension).

    Raises:
        CompilerError: If the file is not under *root*.
    """
    try:
        rel = source_file.resolve().relative_to(root.resolve())
    except ValueError:
        raise CompilerError(f"Source file '{source_file}' is not under '{root}'", source_file) from None
    return rel.with_suffix("").as_posix()


def _artifact_path(key: str, build_dir: Path) -> Path:
    """Return the artifact path for a canonical key.

    The key segments (split on ``/``) map directly to subdirectories under
    *build_dir* (e.g. ``"foo/bar"`` -> ``build_dir/foo/bar.proto.json``).
    """
    parts = key.split("/")
    artifact_dir = build_dir
    for part in parts[:-1]:
        artifact_dir = artifact_dir / part
    return artifact_dir / (parts[-1] + ARTIFACT_SUFFIX)


def _is_up_to_date(source_file: Path, artifact: Path) -> bool:
    """Return True if *artifact* exists and is strictly newer than *source_file*."""
    if not artifact.exists():
        return False
    return artifact.stat().st_mtime > source_file.stat().st_mtime


def _compile_file(source_file: Path, artifact: Path, options: ParserOptions | None) -> ProtocolFile:
    """Return the AST for *source_file*, from the cache when it is fresh and built with the same options."""
    effective = options or ParserOptions()
    if _is_up_to_date(source_file, artifact):
        try:
            return read_artifact(artifact, effective)
        except ValueError:
            # Artifact cannot be reused: re-parse.
            pass

    proto_file = load_source(source_file, effective)
    write_artifact(proto_file, artifact, effective)
    return proto_file

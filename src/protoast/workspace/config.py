# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the protoast configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from protoast.parser.parser import DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT, ParserOptions

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".protoast.yaml"
DEFAULT_BUILD_DIRECTORY = ".protoast-build"


class ConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class ProtoastConfig:
    """The parsed configuration of a directory of .proto files.

    Attributes:
        build_directory: Relative path (from the directory root) for artifacts.
        strict: Reject unrecognised top-level statements instead of skipping them.
        max_depth: Maximum nesting depth of blocks.
        exclude: Glob patterns of files to leave out, relative to the root.
    """

    build_directory: str = DEFAULT_BUILD_DIRECTORY
    strict: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    exclude: list[str] = field(default_factory=list)

    def parser_options(self) -> ParserOptions:
        """Return the parser settings described by this configuration."""
        return ParserOptions(strict=self.strict, max_depth=self.max_depth)


def load_config(path: Path) -> ProtoastConfig:
    """Load and parse a protoast configuration file.

    Args:
        path: Path to the `.protoast.yaml` file.

    Returns:
        A ProtoastConfig instance populated from the file.

    Raises:
        ConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file: {exc}") from exc

    return _parse_config(text, source_label=str(path))


def load_directory_config(directory: Path) -> ProtoastConfig:
    """Load ``.protoast.yaml`` from *directory*, or return defaults when absent."""
    path = directory / CONFIG_FILE_NAME
    if not path.exists():
        return ProtoastConfig()
    return load_config(path)


# ################
# Implementation
# ################


def _parse_config(text: str, source_label: str = "<string>") -> ProtoastConfig:
    """Parse configuration YAML text into a ProtoastConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Returns:
        A ProtoastConfig instance.

    Raises:
        ConfigError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return ProtoastConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{source_label}: config must be a YAML mapping")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{source_label}: unknown field(s): {', '.join(map(str, unknown))}")

    config = ProtoastConfig()
    if "build-directory" in data:
        config.build_directory = _require_string(data, "build-directory", source_label)
    if "strict" in data:
        config.strict = _require_bool(data, "strict", source_label)
    if "max-depth" in data:
        config.max_depth = _require_depth(data, "max-depth", source_label)
    if "exclude" in data:
        config.exclude = _require_string_list(data, "exclude", source_label)
    return config


_KNOWN_KEYS = frozenset({"build-directory", "strict", "max-depth", "exclude"})


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    value = mapping[key]
    if not isinstance(value, str):
        raise ConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _require_bool(mapping: dict[str, object], key: str, source_label: str) -> bool:
    value = mapping[key]
    if not isinstance(value, bool):
        raise ConfigError(f"{source_label}: '{key}' must be true or false")
    return value


def _require_depth(mapping: dict[str, object], key: str, source_label: str) -> int:
    value = mapping[key]
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_DEPTH_LIMIT:
        raise ConfigError(f"{source_label}: '{key}' must be an integer between 1 and {MAX_DEPTH_LIMIT}")
    return value


def _require_string_list(mapping: dict[str, object], key: str, source_label: str) -> list[str]:
    value = mapping[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{source_label}: '{key}' must be a list of strings")
    return list(value)

# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Configuration for directories of .proto files."""

from protoast.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_BUILD_DIRECTORY,
    ConfigError,
    ProtoastConfig,
    load_config,
    load_directory_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_BUILD_DIRECTORY",
    "ConfigError",
    "ProtoastConfig",
    "load_config",
    "load_directory_config",
]

# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the protoast command-line interface."""

import argparse
import sys
from pathlib import Path

from protoast.compiler.artifact import serialize
from protoast.compiler.build import CompilerError, compile_files, find_proto_files, load_source
from protoast.parser.parser import ParserOptions
from protoast.workspace.config import ConfigError, ProtoastConfig, load_directory_config

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the protoast CLI."""
    parser = argparse.ArgumentParser(
        prog="protoast",
        description="protoast - position-annotated AST for Protocol Buffers schemas",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # parse subcommand
    parse_parser = subparsers.add_parser(
        "parse",
        help="Print the AST of a .proto file as JSON",
        description="Parse a single .proto file and print its AST as JSON.",
    )
    parse_parser.add_argument("file", help="The .proto file to parse")
    parse_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation; 0 for compact output (default: 2)",
    )
    _add_parser_flags(parse_parser)

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check that every .proto file parses",
        description="Parse every .proto file under a directory and report syntax errors.",
    )
    check_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing .proto files (default: current directory)",
    )
    _add_parser_flags(check_parser)

    # build subcommand
    build_parser = subparsers.add_parser(
        "build",
        help="Write JSON artifacts for every .proto file",
        description="Parse every .proto file under a directory and write JSON artifacts to the build directory.",
    )
    build_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing .proto files (default: current directory)",
    )
    _add_parser_flags(build_parser)

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _add_parser_flags(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--strict",
        action="store_true",
        help="Reject unrecognised top-level statements instead of skipping them",
    )


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "parse":
        return _cmd_parse(args)
    if args.command == "check":
        return _cmd_check(args)
    if args.command == "build":
        return _cmd_build(args)
    return 0


def _options(config: ProtoastConfig, args: argparse.Namespace) -> ParserOptions:
    """Combine the configuration file with command-line overrides."""
    options = config.parser_options()
    if args.strict:
        options = ParserOptions(strict=True, max_depth=options.max_depth)
    return options


def _load_config(directory: Path) -> ProtoastConfig | None:
    try:
        return load_directory_config(directory)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse subcommand."""
    path = Path(args.file).resolve()

    if not path.is_file():
        print(f"Error: file '{path}' does not exist.", file=sys.stderr)
        return 1

    config = _load_config(path.parent)
    if config is None:
        return 1

    try:
        proto_file = load_source(path, _options(config, args))
    except CompilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(serialize(proto_file, indent=args.indent or None))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the check subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.is_dir():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config = _load_config(directory)
    if config is None:
        return 1
    options = _options(config, args)

    proto_files = find_proto_files(directory, config.exclude, [directory / config.build_directory])
    if not proto_files:
        print("No .proto files found.")
        return 0

    print(f"Checking {len(proto_files)} .proto file(s)...")
    has_errors = False
    for path in proto_files:
        try:
            load_source(path, options)
        except CompilerError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            has_errors = True

    if has_errors:
        return 1

    print("No issues found.")
    return 0


def _cmd_build(args: argparse.Namespace) -> int:
    """Handle the build subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.is_dir():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config = _load_config(directory)
    if config is None:
        return 1

    build_dir = directory / config.build_directory
    proto_files = find_proto_files(directory, config.exclude, [build_dir])
    if not proto_files:
        print("No .proto files found.")
        return 0

    print(f"Building {len(proto_files)} .proto file(s)...")
    try:
        compiled = compile_files(proto_files, build_dir, directory, _options(config, args))
    except CompilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Wrote {len(compiled)} artifact(s) to '{build_dir}'.")
    return 0

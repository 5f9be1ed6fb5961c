#!/usr/bin/env python3
# Copyright 2026 protoast Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the protoast CI checks locally: format, lint, type check, tests, fixtures, and build."""

import argparse
import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=protoast", "--cov-report=term-missing"]),
    ("Fixtures", ["uv", "run", "protoast", "check", "--strict", "tests/data"]),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and report results."""
    parser = argparse.ArgumentParser(description="Run the protoast CI checks.")
    parser.add_argument(
        "--only",
        action="append",
        metavar="STEP",
        help="Run only the named step; may be repeated (e.g. --only Tests)",
    )
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first failing step")
    args = parser.parse_args()

    selected = [(name, cmd) for name, cmd in STEPS if not args.only or name in args.only]
    if not selected:
        print(chalk.red(f"No such step: {', '.join(args.only)}"), file=sys.stderr)
        return 2

    results: list[tuple[str, bool, float]] = []
    for name, cmd in selected:
        passed, elapsed = _run_step(name, cmd)
        results.append((name, passed, elapsed))
        if not passed and args.fail_fast:
            break

    return _print_summary(results)


# ################
# Implementation
# ################


def _run_step(name: str, cmd: list[str]) -> tuple[bool, float]:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(name))
    print(sep)
    start = time.monotonic()
    proc = subprocess.run(cmd, cwd=_repo_root())
    return proc.returncode == 0, time.monotonic() - start


def _print_summary(results: list[tuple[str, bool, float]]) -> int:
    sep = "=" * 60
    print(f"\n{chalk.blue(sep)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(sep))
    for name, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        status = "PASS" if passed else "FAIL"
        print(color(f"  {status}  {name} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


def _repo_root() -> str:
    return str(pathlib.Path(__file__).parent.parent)


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Generate a compile_commands.json for a Please repository.

PURPOSE:
    Editors, static analyzers and indexers (clangd, clang-tidy, ...) need to
    know the exact compiler invocation of every C/C++ source. Please does not
    write a compilation database itself, so this tool derives one from the
    build graph.

WHAT IT DOES:
    - Runs 'plz query reporoot' to find the repository root
    - Runs 'plz query graph' to get every target's command template
    - Keeps targets whose command starts with $TOOLS_CC and that have srcs
    - Drops everything after the first ' && ' (archiving steps)
    - Binds $TOOLS_CC and ${SRCS_SRCS} for each source file
    - Writes one entry per source file to compile_commands.json

REQUIREMENTS:
    - Python 3.8+
    - Please (plz) on PATH, or ./pleasew in the working directory
    - colorama, packaging: pip install colorama packaging (checked at startup)

EXAMPLES:
    # Database for the whole repository (dbg config)
    ./plzCompDb.py

    # Only //src/..., without the clang profile
    ./plzCompDb.py --no-profile //src/...

    # Build the database from a saved graph
    plz query graph > graph.json
    ./plzCompDb.py --graph graph.json --repo-root "$(plz query reporoot)"

Exit Codes:
    0: Success
    1: Invalid arguments
    2: plz failed, the graph is malformed, or the database could not be written
    130: Interrupted
"""

import sys
import signal
import logging
import argparse
from typing import Any, List, Optional

__version__ = "1.0.0"

# Check dependencies before importing modules that need them
from compdb.package_verification import require_package

require_package("packaging", "plz-compdb")
require_package("colorama", "colored output")

from compdb.color_utils import Colors, print_error, print_info, print_success, print_warning, should_use_color
from compdb.constants import (
    COMPILE_COMMANDS_JSON, DEFAULT_BUILD_CONFIG, DEFAULT_PROFILE,
    EXIT_SUCCESS, EXIT_INVALID_ARGS, EXIT_RUNTIME_ERROR, EXIT_KEYBOARD_INTERRUPT,
    ArgumentError, CompDbError, ExternalToolFailure,
)
from compdb.database_writer import entries_to_json
from compdb.pipeline import PipelineConfig, build_entries, run_pipeline
from compdb.please_utils import query_graph, query_repo_root
from compdb.tool_detection import find_please

__all__ = ["EXIT_SUCCESS", "main", "cli"]

logger = logging.getLogger(__name__)


def signal_handler(signum: int, frame: Any) -> None:
    """Handle interrupt signals gracefully."""
    print_warning("\nInterrupted by user. Exiting...", prefix=False)
    sys.exit(EXIT_KEYBOARD_INTERRUPT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate compile_commands.json from the Please build graph.",
        epilog=f"Version {__version__}\n\nExamples:\n"
        f"  %(prog)s\n"
        f"  %(prog)s --no-profile //src/...\n"
        f"  %(prog)s --graph graph.json --repo-root /path/to/repo\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("targets", nargs="*", metavar="TARGET", help="Build labels to restrict the graph query to (default: whole repository)")

    parser.add_argument("--plz", metavar="CMD", help="Please command to run (default: first of plz, please, ./pleasew found)")

    parser.add_argument("--config", "-c", default=DEFAULT_BUILD_CONFIG, help=f"Build config passed to 'plz query graph' (default: {DEFAULT_BUILD_CONFIG})")

    profile = parser.add_mutually_exclusive_group()
    profile.add_argument("--profile", default=DEFAULT_PROFILE, help=f"Config profile passed to 'plz query graph' (default: {DEFAULT_PROFILE})")
    profile.add_argument("--no-profile", dest="profile", action="store_const", const=None, help="Query the graph without a config profile")

    parser.add_argument("--repo-root", metavar="PATH", help="Repository root (default: ask 'plz query reporoot')")

    parser.add_argument("--graph", metavar="FILE", help="Read the build graph from FILE ('-' for stdin) instead of running 'plz query graph'")

    parser.add_argument("--output", "-o", metavar="FILE", default=COMPILE_COMMANDS_JSON, help=f"Output file (default: ./{COMPILE_COMMANDS_JSON})")

    parser.add_argument("--stdout", action="store_true", help="Print the compile database instead of writing it")

    parser.add_argument("--label", action="append", default=[], metavar="LABEL", help="Only include targets carrying LABEL (repeatable)")

    parser.add_argument("--absolute-sources", action="store_true", help="Use absolute source paths in commands")

    parser.add_argument("--timeout", type=float, metavar="SECONDS", help="Give up on plz queries after SECONDS (default: wait forever)")

    color = parser.add_mutually_exclusive_group()
    color.add_argument("--color", action="store_true", help="Force colored output even when not writing to a terminal")
    color.add_argument("--no-color", action="store_true", help="Disable colored output")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only print warnings and errors")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def resolve_plz(requested: Optional[str]) -> str:
    """Return the Please command to run.

    Raises:
        ExternalToolFailure: If no Please executable can be found
    """
    if requested:
        return requested

    tool_info = find_please()
    if not tool_info.is_found():
        raise ExternalToolFailure(f"Please not found: {tool_info.error_message}. Use --plz to point at it.")
    assert tool_info.command is not None  # For type checker
    logger.debug("Using %s (%s)", tool_info.command, tool_info.version)
    return tool_info.command


def read_graph_file(path: str) -> bytes:
    """Read a saved build graph, '-' meaning stdin.

    Raises:
        ArgumentError: If the file cannot be read
    """
    if path == "-":
        return sys.stdin.buffer.read()
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ArgumentError(f"Cannot read graph file '{path}': {e}") from e


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the script.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    args = build_parser().parse_args(argv)

    if not should_use_color(force_color=args.color, no_color=args.no_color):
        Colors.disable()

    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    if args.graph and args.targets:
        print_error("TARGET arguments cannot be combined with --graph")
        return EXIT_INVALID_ARGS
    if args.timeout is not None and args.timeout <= 0:
        print_error("--timeout must be positive")
        return EXIT_INVALID_ARGS

    try:
        plz: Optional[str] = None
        if not args.repo_root or not args.graph:
            plz = resolve_plz(args.plz)

        # Resolved exactly once; everything below receives it explicitly
        if args.repo_root:
            repo_root = args.repo_root.rstrip()
        else:
            assert plz is not None  # For type checker
            repo_root = query_repo_root(plz, args.timeout)

        if args.graph:
            raw_graph = read_graph_file(args.graph)
        else:
            assert plz is not None  # For type checker
            if not args.quiet:
                print_info(f"Querying build graph from {plz}...", file=sys.stderr)
            raw_graph = query_graph(plz, args.config, args.profile, args.targets, args.timeout)

        config = PipelineConfig(repo_root=repo_root, output_path=args.output, labels=args.label, absolute_sources=args.absolute_sources)

        if args.stdout:
            result = build_entries(raw_graph, config)
            sys.stdout.write(entries_to_json(result.entries))
        else:
            result = run_pipeline(raw_graph, config)
    except CompDbError as e:
        print_error(str(e))
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        return e.exit_code

    if result.skipped_targets:
        print_warning(f"Skipped {len(result.skipped_targets)} compile target(s) without a compiler tool path")

    if not args.stdout and not args.quiet:
        print_success(f"Wrote {len(result.entries)} entries to {args.output}", prefix=False)

    return EXIT_SUCCESS


def cli() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print_warning("Interrupted.", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except CompDbError as e:
        print_error(str(e))
        sys.exit(e.exit_code)
    except Exception as e:  # pylint: disable=broad-except
        print_error(f"Fatal error: {e}", prefix=False)
        sys.exit(EXIT_RUNTIME_ERROR)


if __name__ == "__main__":
    cli()

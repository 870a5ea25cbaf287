#!/usr/bin/env python3
# -*- coding: utf-8 -*-
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
"""Detection of the Please build orchestrator executable.

Tries the usual ways Please is installed (a 'plz' or 'please' binary on PATH,
or the repository-local './pleasew' wrapper) and reports the first one that
answers '--version'.

Detection results are cached within the Python process session to avoid
repeated subprocess calls.

CLI Interface:
    python3 -m compdb.tool_detection --find-please    # Output command name, exit 0/1
    python3 -m compdb.tool_detection --check-all      # Output JSON with all tools
"""

import sys
import json
import shutil
import logging
import argparse
import subprocess
from typing import Optional, Dict, List
from dataclasses import dataclass

from compdb.constants import PLZ_VERSION_TIMEOUT

logger = logging.getLogger(__name__)

# Tool command variants to try (in order of preference)
PLEASE_COMMANDS = ["plz", "please", "./pleasew"]

# Session-level cache for tool detection results (keyed by function name)
_tool_cache: Dict[str, "ToolInfo"] = {}


@dataclass
class ToolInfo:
    """Information about a detected external tool.

    Attributes:
        command: Command used to invoke the tool (e.g., "plz", "./pleasew")
        version: First line of the tool's --version output (e.g., "Please version 17.8.0")
        error_message: Why the tool was not found, when command is None
    """

    command: Optional[str]
    version: Optional[str]
    error_message: Optional[str] = None

    def is_found(self) -> bool:
        """Check if tool was found."""
        return self.command is not None


def clear_cache() -> None:
    """Clear the tool detection cache."""
    _tool_cache.clear()
    logger.debug("Tool detection cache cleared")


def _try_command(cmd_parts: List[str], timeout: int = PLZ_VERSION_TIMEOUT) -> Optional[str]:
    """Run a command with --version and return its output, or None on failure."""
    try:
        result = subprocess.run(cmd_parts + ["--version"], capture_output=True, text=True, check=True, timeout=timeout)
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError, PermissionError, subprocess.TimeoutExpired):
        return None


def _extract_version(output: str) -> str:
    """Return the first line of a --version output."""
    lines = output.split("\n")
    return lines[0].strip() if lines else output.strip()


def find_please() -> ToolInfo:
    """Find an available Please executable.

    Tries commands in order: plz, please, ./pleasew

    Returns:
        ToolInfo with command and version if found, or empty ToolInfo with an
        error message listing the commands that were tried
    """
    cache_key = "find_please"
    if cache_key in _tool_cache:
        return _tool_cache[cache_key]

    for cmd in PLEASE_COMMANDS:
        logger.debug("Trying %s...", cmd)
        if not shutil.which(cmd):
            logger.debug("%s not found", cmd)
            continue

        version_output = _try_command([cmd])
        if version_output is None:
            logger.debug("%s is on PATH but did not answer --version", cmd)
            continue

        version = _extract_version(version_output)
        logger.debug("Found %s version %s", cmd, version)
        tool_info = ToolInfo(command=cmd, version=version)
        _tool_cache[cache_key] = tool_info
        return tool_info

    logger.debug("plz not found")
    tool_info = ToolInfo(command=None, version=None, error_message=f"not in PATH (tried: {', '.join(PLEASE_COMMANDS)})")
    _tool_cache[cache_key] = tool_info
    return tool_info


def check_all_tools() -> Dict[str, Dict[str, str]]:
    """Check all known tools and return their status.

    Returns:
        Dictionary with tool names as keys, each containing command and version.
        Missing tools are omitted from the result.
    """
    tools: Dict[str, Dict[str, str]] = {}

    tool_info = find_please()
    if tool_info.is_found():
        assert tool_info.command is not None  # For type checker
        tools["please"] = {"command": tool_info.command, "version": tool_info.version or "unknown"}

    return tools


def main() -> int:
    """Main entry point for CLI usage.

    Returns:
        Exit code: 0 if tool found (or check-all succeeds), 1 if not found
    """
    parser = argparse.ArgumentParser(description="Detect the Please build tool", formatter_class=argparse.RawDescriptionHelpFormatter)

    parser.add_argument("--find-please", action="store_true", help="Find the plz command")
    parser.add_argument("--check-all", action="store_true", help="Check all tools and output JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose debug logging")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", stream=sys.stderr)
    else:
        logging.basicConfig(level=logging.WARNING)

    if args.check_all:
        print(json.dumps({"tools": check_all_tools()}, indent=2))
        return 0

    if args.find_please:
        tool_info = find_please()
        if tool_info.is_found():
            print(tool_info.command)
            return 0
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())

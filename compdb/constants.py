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
"""Shared constants for the plz compile database tools.

This module provides centralized constants used across the compdb modules and
the plzCompDb.py script so that placeholder tokens, output locations and exit
codes are defined in exactly one place.
"""

from typing import Optional, Tuple

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_TOOL_FAILED = 2  # plz command failed or not found
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Command Template Tokens
# =============================================================================

# Placeholders plz leaves in a target's command until build time
PLACEHOLDER_COMPILER = "$TOOLS_CC"  # Resolved to the first "cc" tool path
PLACEHOLDER_SOURCES = "${SRCS_SRCS}"  # Resolved to the source file being compiled

# Everything after the first separator archives or post-processes the object file
STEP_SEPARATOR = " && "

# Characters stripped from the end of a truncated command
TRIM_CHARACTERS = " \n"

# Tool roles searched (in order) for the compiler path of a target
COMPILER_TOOL_ROLES: Tuple[str, ...] = ("cc", "compiler")

# =============================================================================
# Build System Constants
# =============================================================================

COMPILE_COMMANDS_JSON = "compile_commands.json"  # Standard compilation database filename
PLZ_OUT_GEN = "plz-out/gen"  # Generated output directory, relative to the repo root
JSON_INDENT = 4

DEFAULT_BUILD_CONFIG = "dbg"  # Passed to 'plz query graph -c'
DEFAULT_PROFILE: Optional[str] = "clang"  # Passed to 'plz query graph --profile'; --no-profile drops it

# Timeouts (seconds)
PLZ_VERSION_TIMEOUT = 10  # Timeout for 'plz --version' during tool detection

# =============================================================================
# Exception Classes
# =============================================================================


class CompDbError(Exception):
    """Base exception for all compdb errors.

    All compdb exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ArgumentError(CompDbError):
    """Raised when command-line arguments are invalid."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class ExternalToolFailure(CompDbError):
    """Raised when plz is missing, exits non-zero or produces unusable output."""

    def __init__(self, message: str):  # pylint: disable=useless-parent-delegation
        super().__init__(message, EXIT_TOOL_FAILED)


class ParseError(CompDbError):
    """Raised when the build graph document is malformed."""


class MissingToolPath(CompDbError):
    """Raised when a compile target declares no compiler tool path."""


class DatabaseWriteError(CompDbError):
    """Raised when the compile database cannot be written."""

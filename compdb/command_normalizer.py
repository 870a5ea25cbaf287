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
"""Rewriting of plz command templates into literal per-source compile commands.

A compile target's command looks like

    $TOOLS_CC -c ${SRCS_SRCS} -o foo.o && $TOOLS_AR rcs foo.a foo.o

Only the part before the first step separator is the compile step. The
placeholders in it are then bound to the compiler path and to one source file.
"""

import logging
from typing import Dict, Mapping

from compdb.constants import PLACEHOLDER_COMPILER, PLACEHOLDER_SOURCES, STEP_SEPARATOR, TRIM_CHARACTERS

logger = logging.getLogger(__name__)


def truncate_command(command: str, separator: str = STEP_SEPARATOR) -> str:
    """Return the command up to the first step separator, right-trimmed of spaces and newlines.

    Example:
        >>> truncate_command("$TOOLS_CC -c a.cc && ar out.a out.o")
        '$TOOLS_CC -c a.cc'
    """
    index = command.find(separator)
    if index != -1:
        command = command[:index]
    return command.rstrip(TRIM_CHARACTERS)


def placeholder_bindings(tool_path: str, source_path: str) -> Dict[str, str]:
    """Map each recognized placeholder to its value for one source file.

    Bindings are applied in order: sources first, then the compiler.
    """
    return {
        PLACEHOLDER_SOURCES: source_path,
        PLACEHOLDER_COMPILER: tool_path,
    }


def resolve_placeholders(command: str, bindings: Mapping[str, str]) -> str:
    """Replace the first occurrence of each placeholder with its bound value.

    Placeholders absent from the command are ignored.
    """
    for placeholder, value in bindings.items():
        command = command.replace(placeholder, value, 1)
    return command


def normalize(raw_command: str, tool_path: str, source_path: str) -> str:
    """Turn a raw command template into the literal command compiling one source.

    Args:
        raw_command: Target command template from the build graph
        tool_path: Compiler path bound to $TOOLS_CC
        source_path: Source file bound to ${SRCS_SRCS}

    Returns:
        Compile command with the trailing steps removed and placeholders resolved
    """
    command = resolve_placeholders(truncate_command(raw_command), placeholder_bindings(tool_path, source_path))
    logger.debug("Normalized command for %s: %s", source_path, command)
    return command

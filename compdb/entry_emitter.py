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
"""Emission of one compile database entry per (compile target, source file) pair.

Entries follow the build graph's order exactly: packages, then targets within
a package, then sources within a target. Nothing is sorted or deduplicated.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence

from compdb.command_normalizer import normalize
from compdb.constants import COMPILER_TOOL_ROLES, PLZ_OUT_GEN, MissingToolPath
from compdb.graph_parser import BuildGraph, Target
from compdb.target_classifier import CommandPrefixClassifier, TargetClassifier

logger = logging.getLogger(__name__)


@dataclass
class CompileEntry:
    """One compile_commands.json record.

    Attributes:
        directory: Working directory the command runs from
        command: Literal compiler invocation
        file: Absolute path of the compiled source file
    """

    directory: str
    command: str
    file: str

    def to_dict(self) -> Dict[str, str]:
        return {"directory": self.directory, "command": self.command, "file": self.file}


@dataclass
class EmitResult:
    """Entries produced from a build graph, plus the compile targets that were skipped."""

    entries: List[CompileEntry] = field(default_factory=list)
    skipped_targets: List[str] = field(default_factory=list)


def gen_directory(repo_root: str) -> str:
    """Return the directory plz runs compile commands from."""
    return f"{repo_root}/{PLZ_OUT_GEN}"


def compiler_tool_path(target: Target, roles: Sequence[str] = COMPILER_TOOL_ROLES) -> str:
    """Return the compiler path of a target.

    The first role with a non-empty tool list wins, and only the first path
    of that list is used.

    Raises:
        MissingToolPath: If no role lists a tool path
    """
    for role in roles:
        paths = target.tool_paths.get(role)
        if paths:
            return paths[0]
    raise MissingToolPath(f"Target {target.name} has no compiler tool path (looked for: {', '.join(roles)})")


def target_entries(target: Target, repo_root: str, directory: str, tool_path: str, absolute_sources: bool = False) -> Iterator[CompileEntry]:
    """Yield one entry per source of a compile target, in source order.

    Args:
        target: Compile target
        repo_root: Repository root the sources are relative to
        directory: Value for every entry's directory field
        tool_path: Compiler bound to the command
        absolute_sources: Bind the absolute source path into the command
            instead of the repo-relative one
    """
    assert target.command is not None  # Guaranteed by the classifier
    for source in target.sources:
        file = f"{repo_root}/{source}"
        command = normalize(target.command, tool_path, file if absolute_sources else source)
        yield CompileEntry(directory=directory, command=command, file=file)


def emit_entries(
    graph: BuildGraph,
    repo_root: str,
    classifier: Optional[TargetClassifier] = None,
    absolute_sources: bool = False,
    compiler_roles: Sequence[str] = COMPILER_TOOL_ROLES,
) -> EmitResult:
    """Build the compile database entries of a whole build graph.

    A compile target without a compiler tool path is skipped with a warning
    rather than failing the run.

    Args:
        graph: Parsed build graph
        repo_root: Repository root, resolved once by the caller
        classifier: Compile target predicate (default: CommandPrefixClassifier)
        absolute_sources: Bind absolute source paths into commands
        compiler_roles: Tool roles searched for the compiler path

    Returns:
        EmitResult with entries in graph order and labels of skipped targets
    """
    if classifier is None:
        classifier = CommandPrefixClassifier()

    directory = gen_directory(repo_root)
    result = EmitResult()
    compile_targets = 0

    for package, target in graph.targets():
        if not classifier.is_compile_target(target):
            continue
        compile_targets += 1

        label = f"//{package.name}:{target.name}"
        try:
            tool_path = compiler_tool_path(target, compiler_roles)
        except MissingToolPath as e:
            logger.warning("Skipping %s: %s", label, e)
            result.skipped_targets.append(label)
            continue

        result.entries.extend(target_entries(target, repo_root, directory, tool_path, absolute_sources))

    logger.info("Found %s compile targets, emitted %s entries", compile_targets, len(result.entries))
    return result

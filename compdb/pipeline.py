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
"""End-to-end compile database generation from a raw build graph.

The pipeline is a single linear pass:

    graph_parser.parse -> entry_emitter.emit_entries -> database_writer.write_database

Parsing and emission complete before anything is written, so a malformed
graph never clobbers an existing compile_commands.json.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Tuple, Union

from compdb.constants import COMPILE_COMMANDS_JSON, COMPILER_TOOL_ROLES
from compdb.database_writer import write_database
from compdb.entry_emitter import EmitResult, emit_entries
from compdb.graph_parser import parse
from compdb.target_classifier import CommandPrefixClassifier, LabelClassifier, TargetClassifier

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Settings for one compile database run.

    Attributes:
        repo_root: Repository root, resolved once before the pipeline starts
        output_path: Where the compile database is written
        labels: If set, only targets carrying one of these labels are included
        absolute_sources: Bind absolute source paths into commands
        compiler_roles: Tool roles searched for the compiler path
    """

    repo_root: str
    output_path: str = COMPILE_COMMANDS_JSON
    labels: List[str] = field(default_factory=list)
    absolute_sources: bool = False
    compiler_roles: Tuple[str, ...] = COMPILER_TOOL_ROLES

    def classifier(self) -> TargetClassifier:
        if self.labels:
            return LabelClassifier(self.labels)
        return CommandPrefixClassifier()


def build_entries(raw_graph: Union[bytes, str], config: PipelineConfig) -> EmitResult:
    """Parse a raw build graph and emit its compile database entries.

    Raises:
        ParseError: If the graph document is malformed
    """
    graph = parse(raw_graph)
    return emit_entries(graph, config.repo_root, config.classifier(), config.absolute_sources, config.compiler_roles)


def run_pipeline(raw_graph: Union[bytes, str], config: PipelineConfig) -> EmitResult:
    """Generate and write the compile database for a raw build graph.

    Raises:
        ParseError: If the graph document is malformed (nothing is written)
        DatabaseWriteError: If the database cannot be written
    """
    result = build_entries(raw_graph, config)
    path = write_database(result.entries, config.output_path)
    logger.info("Wrote %s entries to %s", len(result.entries), path)
    return result

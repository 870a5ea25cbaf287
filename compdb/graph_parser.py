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
"""Decoding of the 'plz query graph' JSON document.

plz prints packages and targets as JSON objects keyed by name. Arrays are
accepted in their place, in which case the position is used as the name.
Decoding is purely structural: a target missing a command, sources or tools
still decodes (with empty fields) and is left for the classifier to reject.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from compdb.constants import ParseError

logger = logging.getLogger(__name__)


@dataclass
class Target:
    """One build target of a package.

    Attributes:
        name: Target name within its package
        command: Command template, or None if the target has no (string) command
        sources: Source paths from srcs.srcs, relative to the repo root
        tool_paths: Tool role (e.g. "cc") to resolved tool paths
        labels: Labels declared on the target
    """

    name: str
    command: Optional[str] = None
    sources: List[str] = field(default_factory=list)
    tool_paths: Dict[str, List[str]] = field(default_factory=dict)
    labels: List[str] = field(default_factory=list)


@dataclass
class Package:
    """A package and its targets, in graph order."""

    name: str
    targets: List[Target] = field(default_factory=list)


@dataclass
class BuildGraph:
    """All packages of a build graph, in graph order."""

    packages: List[Package] = field(default_factory=list)

    def targets(self) -> Iterator[Tuple[Package, Target]]:
        """Yield (package, target) pairs in package order, then target order."""
        for package in self.packages:
            for target in package.targets:
                yield package, target


def _named_items(value: Any) -> List[Tuple[str, Any]]:
    """Return (name, item) pairs of an object or array, preserving order."""
    if isinstance(value, dict):
        return [(str(name), item) for name, item in value.items()]
    if isinstance(value, list):
        return [(str(index), item) for index, item in enumerate(value)]
    return []


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _parse_target(name: str, data: Dict[str, Any]) -> Target:
    command = data.get("command")
    if not isinstance(command, str):
        command = None

    # Only named "srcs" sources are compiled; unnamed srcs arrive as a plain list
    srcs = data.get("srcs")
    sources = _string_list(srcs.get("srcs")) if isinstance(srcs, dict) else []

    tools = data.get("tools")
    tool_paths: Dict[str, List[str]] = {}
    if isinstance(tools, dict):
        tool_paths = {str(role): _string_list(paths) for role, paths in tools.items()}

    return Target(name=name, command=command, sources=sources, tool_paths=tool_paths, labels=_string_list(data.get("labels")))


def _parse_package(name: str, data: Dict[str, Any]) -> Package:
    package = Package(name=name)
    for target_name, target_data in _named_items(data.get("targets")):
        if not isinstance(target_data, dict):
            logger.debug("Skipping malformed target %s:%s", name, target_name)
            continue
        package.targets.append(_parse_target(target_name, target_data))
    return package


def parse(raw_document: Union[bytes, str]) -> BuildGraph:
    """Decode a raw build graph document.

    Args:
        raw_document: JSON text as printed by 'plz query graph'

    Returns:
        BuildGraph with packages and targets in document order

    Raises:
        ParseError: If the document is not JSON, is not an object, or has no
            "packages" object or array
    """
    try:
        document = json.loads(raw_document)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Build graph is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ParseError(f"Build graph must be a JSON object, got {type(document).__name__}")
    if "packages" not in document:
        raise ParseError("Build graph has no 'packages' field")

    packages = document["packages"]
    if not isinstance(packages, (dict, list)):
        raise ParseError(f"Build graph 'packages' must be an object or array, got {type(packages).__name__}")

    graph = BuildGraph()
    for package_name, package_data in _named_items(packages):
        if not isinstance(package_data, dict):
            logger.debug("Skipping malformed package %s", package_name)
            continue
        graph.packages.append(_parse_package(package_name, package_data))

    logger.debug("Parsed %s packages with %s targets", len(graph.packages), sum(len(p.targets) for p in graph.packages))
    return graph

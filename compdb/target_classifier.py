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
"""Classification of build targets as compilation steps.

The graph mixes compile, archive, link and codegen targets without a "kind"
field, so the default rule is a cheap check of the command's first token. A
compile step with an unusual command shape is silently skipped.
"""

import logging
from typing import Iterable, Optional

from compdb.constants import PLACEHOLDER_COMPILER
from compdb.graph_parser import Target

logger = logging.getLogger(__name__)


class TargetClassifier:
    """Predicate deciding which targets get compile database entries."""

    def is_compile_target(self, target: Target) -> bool:
        raise NotImplementedError

    def __call__(self, target: Target) -> bool:
        return self.is_compile_target(target)


class CommandPrefixClassifier(TargetClassifier):
    """Accepts targets whose command starts with the compiler placeholder and that have sources."""

    def __init__(self, prefix: str = PLACEHOLDER_COMPILER):
        self.prefix = prefix

    def is_compile_target(self, target: Target) -> bool:
        if not target.command or not target.command.startswith(self.prefix):
            return False
        if not target.sources:
            logger.debug("Skipping %s: compile command but no sources", target.name)
            return False
        return True


class LabelClassifier(TargetClassifier):
    """Narrows another classifier to targets carrying at least one of the given labels.

    Example:
        >>> classifier = LabelClassifier(["cc"])
    """

    def __init__(self, labels: Iterable[str], base: Optional[TargetClassifier] = None):
        self.labels = frozenset(labels)
        self.base = base if base is not None else CommandPrefixClassifier()

    def is_compile_target(self, target: Target) -> bool:
        if not self.base.is_compile_target(target):
            return False
        return not self.labels.isdisjoint(target.labels)


def is_compile_target(target: Target) -> bool:
    """Return True if the target is a compilation step under the default rule."""
    return CommandPrefixClassifier().is_compile_target(target)

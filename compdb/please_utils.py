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
"""Queries against the Please build orchestrator.

Both queries are blocking subprocess calls. Any failure to run plz or to
read its output is reported as ExternalToolFailure so the caller can abort
before anything is written.
"""

import logging
import subprocess
from typing import List, Optional, Sequence

from compdb.constants import DEFAULT_BUILD_CONFIG, DEFAULT_PROFILE, ExternalToolFailure

logger = logging.getLogger(__name__)


def _run_plz(cmd: List[str], timeout: Optional[float]) -> bytes:
    """Run a plz command and return its raw stdout.

    Raises:
        ExternalToolFailure: If plz is not found, times out or exits non-zero
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, check=True, timeout=timeout)
    except FileNotFoundError as e:
        raise ExternalToolFailure(f"'{cmd[0]}' not found. Is Please installed?") from e
    except subprocess.TimeoutExpired as e:
        raise ExternalToolFailure(f"'{' '.join(cmd)}' timed out after {timeout} seconds") from e
    except subprocess.CalledProcessError as e:
        stderr = e.stderr.decode("utf-8", errors="replace").strip() if e.stderr else ""
        raise ExternalToolFailure(f"'{' '.join(cmd)}' failed with exit code {e.returncode}: {stderr}") from e
    except OSError as e:
        raise ExternalToolFailure(f"Cannot execute '{cmd[0]}': {e}") from e
    return result.stdout


def query_repo_root(plz: str = "plz", timeout: Optional[float] = None) -> str:
    """Return the repository root reported by 'plz query reporoot'.

    The repo root is not necessarily the current working directory, so it is
    always asked for rather than derived.

    Args:
        plz: Please command to invoke
        timeout: Optional timeout in seconds (None blocks until plz exits)

    Returns:
        Repository root path with trailing whitespace removed

    Raises:
        ExternalToolFailure: If plz fails or prints nothing usable
    """
    output = _run_plz([plz, "query", "reporoot"], timeout)
    try:
        repo_root = output.decode("utf-8").rstrip()
    except UnicodeDecodeError as e:
        raise ExternalToolFailure(f"Unreadable output from '{plz} query reporoot': {e}") from e

    if not repo_root:
        raise ExternalToolFailure(f"'{plz} query reporoot' printed no repository root")

    logger.debug("Repository root: %s", repo_root)
    return repo_root


def graph_query_command(
    plz: str = "plz", config: Optional[str] = DEFAULT_BUILD_CONFIG, profile: Optional[str] = DEFAULT_PROFILE, targets: Sequence[str] = ()
) -> List[str]:
    """Build the argument list for 'plz query graph'.

    Example:
        >>> graph_query_command("plz", "dbg", "clang")
        ['plz', 'query', 'graph', '-c', 'dbg', '--profile', 'clang']
    """
    cmd = [plz, "query", "graph"]
    if config:
        cmd += ["-c", config]
    if profile:
        cmd += ["--profile", profile]
    cmd += list(targets)
    return cmd


def query_graph(
    plz: str = "plz",
    config: Optional[str] = DEFAULT_BUILD_CONFIG,
    profile: Optional[str] = DEFAULT_PROFILE,
    targets: Sequence[str] = (),
    timeout: Optional[float] = None,
) -> bytes:
    """Return the raw JSON build graph printed by 'plz query graph'.

    Args:
        plz: Please command to invoke
        config: Build config (-c), or None for the repository default
        profile: Config profile (--profile), or None
        targets: Optional build labels restricting the graph
        timeout: Optional timeout in seconds

    Returns:
        Undecoded graph document, handed to graph_parser.parse

    Raises:
        ExternalToolFailure: If plz fails or prints nothing
    """
    output = _run_plz(graph_query_command(plz, config, profile, targets), timeout)
    if not output.strip():
        raise ExternalToolFailure(f"'{plz} query graph' printed no build graph")

    logger.info("Read %s bytes of build graph from %s", len(output), plz)
    return output

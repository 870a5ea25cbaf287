#!/usr/bin/env python3
#****************************************************************************************************************************************************
#* BSD 3-Clause License
#*
#* Copyright (c) 2025, Mana Battery
#* All rights reserved.
#*
#* Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
#*
#* 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
#* 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
#*    documentation and/or other materials provided with the distribution.
#* 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
#*    software without specific prior written permission.
#*
#* THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
#* THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
#* CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
#* PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
#* LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
#* EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#****************************************************************************************************************************************************
"""Pytest configuration and shared fixtures for plz-compdb tests.

Graph fixtures mirror the shape printed by 'plz query graph': packages and
targets keyed by name, named sources under srcs.srcs and tools under their role.
"""

import sys
import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

REPO_ROOT = "/repo"
CLANG = "/usr/bin/clang++"


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Scope: function (default)
    Use for: Writing compile databases in isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="compdb_test_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def example_graph() -> Dict[str, Any]:
    """One package with one compile target of two sources (array form)."""
    return {
        "packages": [
            {
                "targets": [
                    {
                        "command": "$TOOLS_CC -c ${SRCS_SRCS} -o out.o && ar out.a out.o",
                        "srcs": {"srcs": ["a.cc", "b.cc"]},
                        "tools": {"compiler": [CLANG]},
                    }
                ]
            }
        ]
    }


@pytest.fixture
def plz_graph() -> Dict[str, Any]:
    """A mixed graph as plz prints it: compile, archive, codegen and broken targets."""
    return {
        "packages": {
            "src/core": {
                "targets": {
                    "_core#lib_cc": {
                        "command": "$TOOLS_CC -c -I. ${SRCS_SRCS} -fPIC && $TOOLS_AR rcs $OUT *.o\n",
                        "srcs": {"srcs": ["src/core/core.cc", "src/core/util.cc"], "hdrs": ["src/core/core.h"]},
                        "tools": {"cc": ["/usr/bin/g++"], "ar": ["/usr/bin/ar"]},
                        "labels": ["cc"],
                    },
                    "core": {
                        "command": "$TOOLS_ARCAT ar --combine",
                        "srcs": {"srcs": ["src/core/_core#lib_cc.a"]},
                        "tools": {"arcat": ["//tools:arcat"]},
                    },
                }
            },
            "src/gen": {
                "targets": {
                    "_gen#srcs": {"command": "$TOOLS_GEN > $OUT", "srcs": ["gen.in"], "tools": {"gen": ["/bin/gen"]}},
                    "_gen#lib_cc": {
                        "command": "$TOOLS_CC -c ${SRCS_SRCS}",
                        "srcs": {"srcs": ["src/gen/gen.cc"]},
                        "tools": {"cc": []},
                    },
                }
            },
            "src/main": {
                "targets": {
                    "_main#lib_cc": {
                        "command": "$TOOLS_CC -c ${SRCS_SRCS} -o main.o",
                        "srcs": {"srcs": ["src/main/main.cc"]},
                        "tools": {"cc": ["/usr/bin/clang++", "/usr/bin/g++"]},
                        "labels": ["cc", "bin"],
                    },
                }
            },
        }
    }


@pytest.fixture
def graph_file(temp_dir: str, plz_graph: Dict[str, Any]) -> str:
    """Write plz_graph to graph.json in temp_dir and return its path."""
    path = Path(temp_dir) / "graph.json"
    path.write_text(json.dumps(plz_graph))
    return str(path)

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
"""Serialization of compile database entries to compile_commands.json."""

import os
import json
import logging
from typing import Iterable

from compdb.constants import COMPILE_COMMANDS_JSON, JSON_INDENT, DatabaseWriteError
from compdb.entry_emitter import CompileEntry

logger = logging.getLogger(__name__)


def entries_to_json(entries: Iterable[CompileEntry]) -> str:
    """Return the compile database text for the entries, in the given order."""
    return json.dumps([entry.to_dict() for entry in entries], indent=JSON_INDENT, ensure_ascii=False) + "\n"


def write_database(entries: Iterable[CompileEntry], output_path: str = COMPILE_COMMANDS_JSON) -> str:
    """Write the compile database, replacing any existing file.

    Uses atomic write (temp file + rename) so a failed run never leaves a
    truncated database behind.

    Args:
        entries: Entries in output order
        output_path: Path of the database file

    Returns:
        Absolute path of the written file

    Raises:
        DatabaseWriteError: If the file cannot be written
    """
    output_path = os.path.abspath(output_path)
    content = entries_to_json(entries)
    temp_path = output_path + ".tmp"

    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(temp_path, output_path)
    except OSError as e:
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError:
                logger.debug("Could not remove temp file %s", temp_path)
        raise DatabaseWriteError(f"Cannot write '{output_path}': {e}") from e

    logger.debug("Wrote %s bytes to %s", len(content), output_path)
    return output_path

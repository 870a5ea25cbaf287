#!/usr/bin/env python3
"""Tests for compdb/tool_detection.py"""

import json
import subprocess
from typing import Any, List
from unittest.mock import MagicMock, Mock

import pytest

from compdb import tool_detection
from compdb.tool_detection import PLEASE_COMMANDS, ToolInfo, _tool_cache, check_all_tools, clear_cache, find_please


@pytest.fixture(autouse=True)
def fresh_cache() -> Any:
    clear_cache()
    yield
    clear_cache()


class TestToolInfo:
    """Tests for ToolInfo dataclass."""

    def test_is_found_with_command(self) -> None:
        """Test is_found returns True when command is set."""
        assert ToolInfo(command="plz", version="Please version 17.8.0").is_found() is True

    def test_is_found_without_command(self) -> None:
        """Test is_found returns False when command is None."""
        tool_info = ToolInfo(command=None, version=None, error_message="not in PATH")
        assert tool_info.is_found() is False
        assert tool_info.error_message == "not in PATH"


class TestFindPlease:
    """Tests for find_please."""

    def test_commands(self) -> None:
        """Test the commands tried, in order."""
        assert PLEASE_COMMANDS == ["plz", "please", "./pleasew"]

    def test_found_on_path(self, monkeypatch: Any) -> None:
        """Test plz on PATH is found with its version line."""
        result = MagicMock()
        result.stdout = "Please version 17.8.0\nextra\n"
        monkeypatch.setattr(subprocess, "run", Mock(return_value=result))
        monkeypatch.setattr("shutil.which", lambda x: f"/usr/local/bin/{x}")

        tool_info = find_please()
        assert tool_info.command == "plz"
        assert tool_info.version == "Please version 17.8.0"

    def test_falls_back_to_wrapper(self, monkeypatch: Any) -> None:
        """Test ./pleasew is used when no binary is on PATH."""
        calls: List[List[str]] = []

        def mock_run(cmd: List[str], **kwargs: Any) -> MagicMock:
            calls.append(cmd)
            result = MagicMock()
            result.stdout = "Please version 17.0.0"
            return result

        monkeypatch.setattr(subprocess, "run", mock_run)
        monkeypatch.setattr("shutil.which", lambda x: x if x == "./pleasew" else None)

        assert find_please().command == "./pleasew"
        assert calls == [["./pleasew", "--version"]]

    def test_version_failure_skips_command(self, monkeypatch: Any) -> None:
        """Test a command that fails --version is not chosen."""

        def mock_run(cmd: List[str], **kwargs: Any) -> MagicMock:
            if cmd[0] == "plz":
                raise subprocess.CalledProcessError(1, cmd)
            result = MagicMock()
            result.stdout = "Please version 16.0.0"
            return result

        monkeypatch.setattr(subprocess, "run", mock_run)
        monkeypatch.setattr("shutil.which", lambda x: f"/bin/{x}")

        assert find_please().command == "please"

    def test_not_found(self, monkeypatch: Any) -> None:
        """Test the error message lists the commands tried."""
        monkeypatch.setattr("shutil.which", lambda x: None)
        tool_info = find_please()
        assert not tool_info.is_found()
        assert tool_info.error_message is not None
        assert "tried: plz, please, ./pleasew" in tool_info.error_message

    def test_uses_cache(self, monkeypatch: Any) -> None:
        """Test a second call does not run plz again."""
        result = MagicMock()
        result.stdout = "Please version 17.8.0"
        mock_run = Mock(return_value=result)
        monkeypatch.setattr(subprocess, "run", mock_run)
        monkeypatch.setattr("shutil.which", lambda x: f"/usr/bin/{x}")

        first = find_please()
        second = find_please()
        assert mock_run.call_count == 1
        assert second is first

    def test_clear_cache(self) -> None:
        """Test clear_cache empties the cache."""
        _tool_cache["find_please"] = ToolInfo(command="plz", version="x")
        clear_cache()
        assert len(_tool_cache) == 0


class TestCheckAllTools:
    """Tests for check_all_tools and the CLI."""

    def test_reports_found_tool(self, monkeypatch: Any) -> None:
        """Test a found tool is reported with command and version."""
        monkeypatch.setattr(tool_detection, "find_please", lambda: ToolInfo(command="plz", version=None))
        assert check_all_tools() == {"please": {"command": "plz", "version": "unknown"}}

    def test_omits_missing_tool(self, monkeypatch: Any) -> None:
        """Test a missing tool is left out."""
        monkeypatch.setattr(tool_detection, "find_please", lambda: ToolInfo(command=None, version=None))
        assert check_all_tools() == {}

    def test_cli_check_all(self, monkeypatch: Any, capsys: Any) -> None:
        """Test --check-all prints JSON."""
        monkeypatch.setattr(tool_detection, "find_please", lambda: ToolInfo(command="plz", version="17"))
        monkeypatch.setattr("sys.argv", ["tool_detection.py", "--check-all"])
        assert tool_detection.main() == 0
        assert json.loads(capsys.readouterr().out) == {"tools": {"please": {"command": "plz", "version": "17"}}}

    def test_cli_find_please_missing(self, monkeypatch: Any, capsys: Any) -> None:
        """Test --find-please exits 1 and prints nothing when plz is missing."""
        monkeypatch.setattr(tool_detection, "find_please", lambda: ToolInfo(command=None, version=None))
        monkeypatch.setattr("sys.argv", ["tool_detection.py", "--find-please"])
        assert tool_detection.main() == 1
        assert capsys.readouterr().out == ""

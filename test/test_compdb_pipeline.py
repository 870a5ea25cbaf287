#!/usr/bin/env python3
"""Tests for compdb/pipeline.py"""

import os
import json
from pathlib import Path
from typing import Any, Dict

import pytest

from compdb.constants import ParseError
from compdb.pipeline import PipelineConfig, build_entries, run_pipeline
from compdb.target_classifier import CommandPrefixClassifier, LabelClassifier


class TestPipelineConfig:
    """Tests for PipelineConfig defaults and classifier selection."""

    def test_defaults(self) -> None:
        """Test the default output and compiler roles."""
        config = PipelineConfig(repo_root="/repo")
        assert config.output_path == "compile_commands.json"
        assert config.compiler_roles == ("cc", "compiler")
        assert config.absolute_sources is False

    def test_default_classifier(self) -> None:
        """Test the command prefix rule is used without labels."""
        assert isinstance(PipelineConfig(repo_root="/repo").classifier(), CommandPrefixClassifier)

    def test_label_classifier(self) -> None:
        """Test labels switch to the label classifier."""
        classifier = PipelineConfig(repo_root="/repo", labels=["cc"]).classifier()
        assert isinstance(classifier, LabelClassifier)
        assert classifier.labels == frozenset(["cc"])


class TestRunPipeline:
    """End-to-end tests from raw graph to compile_commands.json."""

    def test_end_to_end_example(self, temp_dir: str, example_graph: Dict[str, Any]) -> None:
        """Test the documented two-source example produces exactly two entries in order."""
        output = os.path.join(temp_dir, "compile_commands.json")
        run_pipeline(json.dumps(example_graph).encode(), PipelineConfig(repo_root="/repo", output_path=output))

        data = json.loads(Path(output).read_text())
        assert data == [
            {"directory": "/repo/plz-out/gen", "command": "/usr/bin/clang++ -c a.cc -o out.o", "file": "/repo/a.cc"},
            {"directory": "/repo/plz-out/gen", "command": "/usr/bin/clang++ -c b.cc -o out.o", "file": "/repo/b.cc"},
        ]

    def test_idempotent(self, temp_dir: str, plz_graph: Dict[str, Any]) -> None:
        """Test two runs over the same graph write byte-identical files."""
        output = Path(temp_dir) / "compile_commands.json"
        raw = json.dumps(plz_graph).encode()
        config = PipelineConfig(repo_root="/repo", output_path=str(output))

        run_pipeline(raw, config)
        first = output.read_bytes()
        run_pipeline(raw, config)
        assert output.read_bytes() == first

    def test_parse_error_writes_nothing(self, temp_dir: str) -> None:
        """Test a malformed graph aborts before the database is touched."""
        output = Path(temp_dir) / "compile_commands.json"
        output.write_text("[]\n")
        with pytest.raises(ParseError):
            run_pipeline(b"{not json", PipelineConfig(repo_root="/repo", output_path=str(output)))
        assert output.read_text() == "[]\n"

    def test_returns_skipped_targets(self, temp_dir: str, plz_graph: Dict[str, Any]) -> None:
        """Test skipped targets are reported while the rest is written."""
        output = os.path.join(temp_dir, "compile_commands.json")
        result = run_pipeline(json.dumps(plz_graph), PipelineConfig(repo_root="/repo", output_path=output))
        assert result.skipped_targets == ["//src/gen:_gen#lib_cc"]
        assert len(json.loads(Path(output).read_text())) == 3


class TestBuildEntries:
    """Tests for building entries without writing."""

    def test_no_file_written(self, temp_dir: str, example_graph: Dict[str, Any], monkeypatch: Any) -> None:
        """Test build_entries leaves the working directory untouched."""
        monkeypatch.chdir(temp_dir)
        result = build_entries(json.dumps(example_graph), PipelineConfig(repo_root="/repo"))
        assert len(result.entries) == 2
        assert os.listdir(temp_dir) == []

    def test_absolute_sources(self, example_graph: Dict[str, Any]) -> None:
        """Test absolute source binding flows through the config."""
        result = build_entries(json.dumps(example_graph), PipelineConfig(repo_root="/repo", absolute_sources=True))
        assert result.entries[0].command == "/usr/bin/clang++ -c /repo/a.cc -o out.o"

    def test_labels(self, plz_graph: Dict[str, Any]) -> None:
        """Test label filtering flows through the config."""
        result = build_entries(json.dumps(plz_graph), PipelineConfig(repo_root="/repo", labels=["bin"]))
        assert [e.file for e in result.entries] == ["/repo/src/main/main.cc"]

#!/usr/bin/env python3
"""Tests for compdb/target_classifier.py"""

import pytest

from compdb.graph_parser import Target
from compdb.target_classifier import CommandPrefixClassifier, LabelClassifier, TargetClassifier, is_compile_target


def make_target(command: object = "$TOOLS_CC -c ${SRCS_SRCS}", sources: object = None, labels: object = None) -> Target:
    return Target(
        name="t",
        command=command,  # type: ignore[arg-type]
        sources=["a.cc"] if sources is None else sources,  # type: ignore[arg-type]
        labels=labels or [],  # type: ignore[arg-type]
    )


class TestCommandPrefixClassifier:
    """Tests for the default $TOOLS_CC prefix rule."""

    def test_compile_target(self) -> None:
        """Test a $TOOLS_CC command with sources is a compile target."""
        assert CommandPrefixClassifier().is_compile_target(make_target()) is True

    def test_no_command(self) -> None:
        """Test a target without command is rejected."""
        assert CommandPrefixClassifier().is_compile_target(make_target(command=None)) is False

    def test_empty_command(self) -> None:
        """Test an empty command is rejected."""
        assert CommandPrefixClassifier().is_compile_target(make_target(command="")) is False

    def test_no_sources(self) -> None:
        """Test a compile command without sources is rejected."""
        assert CommandPrefixClassifier().is_compile_target(make_target(sources=[])) is False

    @pytest.mark.parametrize(
        "command",
        [
            "$TOOLS_AR rcs $OUT ${SRCS_SRCS}",
            "$TOOLS_LD -o $OUT ${SRCS_SRCS}",
            " $TOOLS_CC -c ${SRCS_SRCS}",
            "ccache $TOOLS_CC -c ${SRCS_SRCS}",
            "echo $TOOLS_CC",
        ],
    )
    def test_command_not_starting_with_placeholder(self, command: str) -> None:
        """Test non-compile commands are rejected regardless of sources."""
        target = make_target(command=command, sources=["a.cc", "b.cc"])
        assert CommandPrefixClassifier().is_compile_target(target) is False

    def test_callable(self) -> None:
        """Test classifiers can be used as plain predicates."""
        classifier = CommandPrefixClassifier()
        assert list(filter(classifier, [make_target(), make_target(command=None)])) == [make_target()]

    def test_custom_prefix(self) -> None:
        """Test a different compiler placeholder can be matched."""
        target = make_target(command="$TOOLS_CXX -c ${SRCS_SRCS}")
        assert CommandPrefixClassifier("$TOOLS_CXX").is_compile_target(target) is True
        assert CommandPrefixClassifier().is_compile_target(target) is False

    def test_module_level_helper(self) -> None:
        """Test is_compile_target applies the default rule."""
        assert is_compile_target(make_target()) is True
        assert is_compile_target(make_target(command="$TOOLS_AR")) is False


class TestLabelClassifier:
    """Tests for label-restricted classification."""

    def test_matching_label(self) -> None:
        """Test a compile target with a wanted label is accepted."""
        assert LabelClassifier(["cc"]).is_compile_target(make_target(labels=["cc", "x"])) is True

    def test_missing_label(self) -> None:
        """Test a compile target without any wanted label is rejected."""
        assert LabelClassifier(["cc"]).is_compile_target(make_target(labels=["go"])) is False

    def test_label_does_not_override_command_rule(self) -> None:
        """Test labels alone do not make a non-compile target compilable."""
        assert LabelClassifier(["cc"]).is_compile_target(make_target(command="$TOOLS_AR", labels=["cc"])) is False

    def test_custom_base(self) -> None:
        """Test the wrapped classifier can be replaced."""
        classifier = LabelClassifier(["cc"], base=CommandPrefixClassifier("$TOOLS_CXX"))
        assert classifier.is_compile_target(make_target(command="$TOOLS_CXX -c x", labels=["cc"])) is True


class TestTargetClassifierBase:
    """Tests for the abstract classifier."""

    def test_base_not_implemented(self) -> None:
        """Test the base class must be subclassed."""
        with pytest.raises(NotImplementedError):
            TargetClassifier().is_compile_target(make_target())

"""
Tests for the two-phase run: ordering, input errors, determinism and cancellation.
"""

import threading

import pytest
from conftest import CARD_CSS, CARD_PATH, THEME_CSS, THEME_PATH, component

from beam_checker.config import CheckerConfig
from beam_checker.errors import ConfigurationError
from beam_checker.main_checker import BeamChecker
from beam_checker.reporter import ReportGenerator, RunStatus
from beam_checker.rules import (
    INPUT_ERROR,
    LAYOUT_BLOCK_MUTEX,
    STATE_IN_CLASS,
    VARIABLE_UNRESOLVED,
)


class CancelAfter:
    """Cancel token that reports set after a number of checks."""

    def __init__(self, checks: int):
        self.checks = checks
        self.calls = 0

    def is_set(self) -> bool:
        self.calls += 1
        return self.calls > self.checks


def many_sources(count: int = 40):
    sources = [(THEME_PATH, THEME_CSS)]
    for i in range(count):
        sources.append((f"components/part{i}.css", component("  --x: var(--undeclared);", selector=f".Part{i}-a-b")))
    return sources


# =============================================================================
# Phase 1
# =============================================================================


class TestCheckSource:
    """Single-file phase 1."""

    def test_markup_runs_per_file_rules(self, checker):
        """Verify naming and layout rules run on one markup file."""
        facts = checker.check_source("p.html", '<div class="l_stack user_profile button-active">')
        assert sorted(d.rule_id for d in facts.diagnostics) == [LAYOUT_BLOCK_MUTEX, STATE_IN_CLASS]

    def test_unresolved_waits_for_phase_two(self, checker):
        """Verify a per-file pass never reports unresolved references."""
        facts = checker.check_source(CARD_PATH, component("  --card-bg: var(--missing);"))
        assert facts.diagnostics == []
        assert [d.name for d in facts.declarations] == ["--card-bg"]


# =============================================================================
# Full run
# =============================================================================


class TestCheckSources:
    """Both phases over a set of files."""

    def test_cross_file_resolution(self, checker):
        """Verify a component resolves tokens declared in a later file."""
        report = checker.check_sources([(CARD_PATH, CARD_CSS), (THEME_PATH, THEME_CSS)])
        assert report.status is RunStatus.CLEAN

    def test_empty_input(self, checker):
        assert checker.check_sources([]).status is RunStatus.CLEAN

    def test_input_error_excludes_file(self, checker):
        """Verify an unreadable file is reported and contributes nothing to the graph."""
        report = checker.check_sources([
            ("tokens.css", b"\xff\xfe:root { --brand: red; }"),
            (CARD_PATH, component("  color: var(--brand);")),
        ])
        assert sorted(d.rule_id for d in report.diagnostics) == [INPUT_ERROR, VARIABLE_UNRESOLVED]
        assert report.status is RunStatus.FAILED

    def test_empty_file_is_input_error(self, checker):
        report = checker.check_sources([("empty.css", "   \n")])
        assert [d.rule_id for d in report.diagnostics] == [INPUT_ERROR]

    def test_unknown_files_are_ignored(self, checker):
        report = checker.check_sources([("README.md", "# .Bad-a-b"), (CARD_PATH, CARD_CSS), (THEME_PATH, THEME_CSS)])
        assert report.diagnostics == ()

    def test_idempotent(self, checker):
        """Verify repeated runs give byte-identical JSON."""
        sources = many_sources(12)
        first = ReportGenerator.generate_json_report(checker.check_sources(sources))
        second = ReportGenerator.generate_json_report(checker.check_sources(sources))
        assert first == second

    def test_worker_count_does_not_change_output(self):
        """Verify the result is the same with one worker or many."""
        sources = many_sources(12)
        serial = BeamChecker(CheckerConfig(max_workers=1)).check_sources(sources)
        parallel = BeamChecker(CheckerConfig(max_workers=8)).check_sources(sources)
        assert serial == parallel

    def test_file_order_does_not_change_output(self, checker):
        sources = many_sources(6)
        assert checker.check_sources(sources) == checker.check_sources(list(reversed(sources)))


# =============================================================================
# Cancellation
# =============================================================================


class TestCancellation:
    """A cancelled run reports nothing."""

    def test_cancelled_before_start(self, checker):
        event = threading.Event()
        event.set()
        report = checker.check_sources(many_sources(3), cancel=event)
        assert report.status is RunStatus.CANCELLED
        assert report.diagnostics == ()

    def test_cancelled_mid_run(self, checker):
        """Verify cancelling while phase 1 is in progress discards partial results."""
        token = CancelAfter(3)
        report = checker.check_sources(many_sources(), cancel=token)
        assert report.status is RunStatus.CANCELLED
        assert report.diagnostics == ()
        assert token.calls == 4

    def test_unset_token_runs_normally(self, checker):
        report = checker.check_sources(many_sources(2), cancel=threading.Event())
        assert report.status is RunStatus.FAILED

    def test_invalid_config_rejected(self):
        """Verify construction validates the configuration."""
        with pytest.raises(ConfigurationError):
            BeamChecker(CheckerConfig(max_workers=0))

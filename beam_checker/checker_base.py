"""
Base checker class for per-file BEAM rules.
"""

from typing import List, Optional, Sequence

from .config import CheckerConfig
from .facts import FileFacts
from .issue import Diagnostic, Severity, SourceLocation
from .rules import RULES


class BaseChecker:
    """Base class for per-file checkers.

    A checker instance holds the state of one check() call, so each worker
    creates its own instances.
    """

    def __init__(self, config: CheckerConfig):
        self.config = config
        self.diagnostics: List[Diagnostic] = []
        self.facts: Optional[FileFacts] = None

    def check(self, facts: FileFacts) -> List[Diagnostic]:
        """Run checks on the facts collected for one file."""
        self.facts = facts
        self.diagnostics = []
        self._run_checks()
        return self.diagnostics

    def _run_checks(self):
        """Override in subclasses to implement specific checks."""
        pass

    def _add_diagnostic(
        self,
        rule_id: str,
        message: str,
        locations: Sequence[SourceLocation],
        suggestion: Optional[str] = None,
        severity: Optional[Severity] = None,
    ):
        """Add a diagnostic; severity defaults to the rule's registered one."""
        self.diagnostics.append(
            Diagnostic(
                rule_id,
                severity or RULES[rule_id].severity,
                message,
                tuple(locations),
                suggestion,
            )
        )

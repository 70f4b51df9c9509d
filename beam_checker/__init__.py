"""
BEAM conformance checker: Block / Element / Attribute / Module naming and
variable-tier rules for stylesheets and markup.
"""

from .config import CheckerConfig
from .issue import Diagnostic, Severity, SourceLocation
from .main_checker import BeamChecker
from .reporter import Report, ReportGenerator, RunStatus, aggregate, exit_code

__all__ = [
    "BeamChecker",
    "CheckerConfig",
    "Diagnostic",
    "Report",
    "ReportGenerator",
    "RunStatus",
    "Severity",
    "SourceLocation",
    "aggregate",
    "exit_code",
]

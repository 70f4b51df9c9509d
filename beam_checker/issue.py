"""
Diagnostic data models for the BEAM conformance checker.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Severity(Enum):
    """Diagnostic severity levels."""
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True, order=True)
class SourceLocation:
    """A position in a source file. Line and column are 1-based; 0 means the whole file."""
    file: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding. The first location is the primary one."""
    rule_id: str
    severity: Severity
    message: str
    locations: Tuple[SourceLocation, ...]
    suggestion: Optional[str] = None

    @property
    def primary(self) -> SourceLocation:
        return self.locations[0]

    @property
    def key(self) -> Tuple[str, SourceLocation, str]:
        """Identity used for deduplication."""
        return (self.rule_id, self.primary, self.message)

    @property
    def sort_key(self) -> Tuple[str, int, int, str, str]:
        loc = self.primary
        return (loc.file, loc.line, loc.column, self.rule_id, self.message)

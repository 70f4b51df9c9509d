"""
Checker configuration.
"""

from dataclasses import dataclass, field, replace
from fnmatch import fnmatch
from typing import FrozenSet, Iterable, Optional

from .errors import ConfigurationError

DEFAULT_STATE_WORDS: FrozenSet[str] = frozenset({
    "active",
    "checked",
    "current",
    "danger",
    "disabled",
    "error",
    "expanded",
    "focused",
    "hidden",
    "loading",
    "open",
    "selected",
    "success",
    "visible",
    "warning",
})

DEFAULT_THEME_PATTERN = "*theme.css"
DEFAULT_LAYOUT_PREFIX = "l_"
DEFAULT_PRIMITIVE_PREFIX = "--primitive-"


@dataclass(frozen=True)
class CheckerConfig:
    """Options recognized by the checker.

    strict: treat warnings as errors when mapping a report to an exit code.
    state_words: vocabulary for rule:state-in-class.
    theme_artifact_matcher: glob matched against file paths to find the global theme.
    """
    strict: bool = False
    state_words: FrozenSet[str] = field(default_factory=lambda: DEFAULT_STATE_WORDS)
    theme_artifact_matcher: str = DEFAULT_THEME_PATTERN
    layout_prefix: str = DEFAULT_LAYOUT_PREFIX
    primitive_prefix: str = DEFAULT_PRIMITIVE_PREFIX
    max_workers: int = 4

    def validate(self) -> "CheckerConfig":
        if not self.layout_prefix:
            raise ConfigurationError("layout_prefix", "must not be empty")
        if not self.primitive_prefix.startswith("--"):
            raise ConfigurationError("primitive_prefix", "must start with '--'")
        if not self.theme_artifact_matcher:
            raise ConfigurationError("theme_artifact_matcher", "must not be empty")
        if self.max_workers < 1:
            raise ConfigurationError("max_workers", "must be at least 1")
        return self

    def is_theme_artifact(self, path: str) -> bool:
        normalized = path.replace("\\", "/")
        return fnmatch(normalized, self.theme_artifact_matcher)

    def with_overrides(
        self,
        strict: Optional[bool] = None,
        state_words: Optional[Iterable[str]] = None,
        theme_artifact_matcher: Optional[str] = None,
        max_workers: Optional[int] = None,
    ) -> "CheckerConfig":
        """Return a copy with any non-None option replaced."""
        changes = {}
        if strict is not None:
            changes["strict"] = strict
        if state_words is not None:
            changes["state_words"] = frozenset(w.strip().lower() for w in state_words if w.strip())
        if theme_artifact_matcher:
            changes["theme_artifact_matcher"] = theme_artifact_matcher
        if max_workers is not None:
            changes["max_workers"] = max_workers
        return replace(self, **changes).validate()

"""
Shared pytest fixtures for BEAM checker tests.

Sample sources follow one small design system: a global theme declaring
primitive and semantic tokens, plus component stylesheets and markup.
"""

from typing import Generator, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from beam_app.main import create_app
from beam_app.routes.check import get_checker_service
from beam_app.services import CheckerService
from beam_checker.config import CheckerConfig
from beam_checker.extractors import ArtifactKind
from beam_checker.facts import ClassListObservation, FileFacts
from beam_checker.issue import SourceLocation
from beam_checker.main_checker import BeamChecker
from beam_checker.selector_parser import ParsedSelector, parse_selector


# =============================================================================
# Sample Sources
# =============================================================================

THEME_PATH = "styles/theme.css"

THEME_CSS = """\
:root {
  --primitive-slate-50: #f8fafc;
  --primitive-space-4: 1rem;
  --bg-surface: var(--primitive-slate-50);
  --space-m: var(--primitive-space-4);
}
"""

CARD_PATH = "components/card.css"

CARD_CSS = """\
.card {
  --card-bg: var(--bg-surface);
  background: var(--card-bg);
}

.card-title {
  padding: var(--space-m);
}
"""


def component(body: str, selector: str = ".card") -> str:
    """Wrap declarations in a single component rule."""
    return f"{selector} {{\n{body}\n}}\n"


# =============================================================================
# Fact Builders
# =============================================================================


def loc(line: int = 1, column: int = 1, file: str = "page.html") -> SourceLocation:
    return SourceLocation(file, line, column)


def parsed(raw: str, line: int = 1, column: int = 1, file: str = "page.html") -> ParsedSelector:
    return parse_selector(raw, loc(line, column, file))


def make_facts(
    selectors: Sequence[str] = (),
    class_lists: Sequence[Sequence[str]] = (),
    path: str = "page.html",
) -> FileFacts:
    """FileFacts with the given selectors and class-list observations, one per line."""
    facts = FileFacts(path=path, kind=ArtifactKind.MARKUP)
    for i, raw in enumerate(selectors, start=1):
        facts.selectors.append(parsed(raw, i, 1, path))
    for i, tokens in enumerate(class_lists, start=1):
        selectors_on_line: List[ParsedSelector] = [
            parsed(token, i, 10 + n, path) for n, token in enumerate(tokens)
        ]
        facts.observations.append(
            ClassListObservation(tuple(tokens), tuple(selectors_on_line), loc(i, 5, path))
        )
    return facts


# =============================================================================
# Checker Fixtures
# =============================================================================


@pytest.fixture
def config() -> CheckerConfig:
    return CheckerConfig()


@pytest.fixture
def checker(config: CheckerConfig) -> BeamChecker:
    return BeamChecker(config)


@pytest.fixture
def run_check(checker: BeamChecker):
    """Check a component stylesheet together with the shared theme."""

    def _run(css: str, path: str = CARD_PATH, with_theme: bool = True, cancel: Optional[object] = None):
        sources = [(THEME_PATH, THEME_CSS)] if with_theme else []
        sources.append((path, css))
        return checker.check_sources(sources, cancel=cancel)

    return _run


# =============================================================================
# API Fixtures
# =============================================================================


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """TestClient whose checker service ignores the process environment."""
    app = create_app()
    app.dependency_overrides[get_checker_service] = lambda: CheckerService(CheckerConfig())
    yield TestClient(app)
    app.dependency_overrides.clear()

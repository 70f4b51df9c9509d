"""
Tests for the text scanners and per-file fact collection.
"""

from beam_checker.config import CheckerConfig
from beam_checker.extractors import (
    ArtifactKind,
    LineIndex,
    detect_artifact_kind,
    scan_markup,
    scan_stylesheet,
)
from beam_checker.facts import collect_facts, decode_source
from beam_checker.rules import INPUT_ERROR, SELECTOR_SYNTAX
from beam_checker.variable_graph import VariableTier


STYLESHEET = """\
/* .commented { color: red; } */
.nav_bar-page_link:hover, .card > .card-title {
  --card-bg: var(--bg, #fff);
  color: var(--fg);
  margin: 0;
}
@media (min-width: 40em) {
  .l_stack { gap: 1rem; }
}
a[href$=".pdf"] { color: blue; }
"""

MARKUP = """\
<style>
  .hero { --hero-bg: var(--bg-surface); }
</style>
<div class="l_stack user_profile" style="--gap: 2px">
  <!-- <span class="ignored"></span> -->
  <a class="nav_bar-page_link {{ extra }}">Home</a>
</div>
"""


# =============================================================================
# Helpers
# =============================================================================


class TestHelpers:
    """Artifact detection and offset mapping."""

    def test_detect_artifact_kind(self):
        """Verify extensions map to artifact kinds, case-insensitively."""
        assert detect_artifact_kind("a/b.CSS") is ArtifactKind.STYLESHEET
        assert detect_artifact_kind("x.scss") is ArtifactKind.STYLESHEET
        assert detect_artifact_kind("x.vue") is ArtifactKind.MARKUP
        assert detect_artifact_kind("x.tsx") is ArtifactKind.MARKUP
        assert detect_artifact_kind("README.md") is ArtifactKind.UNKNOWN

    def test_indented_sass_is_not_scanned(self):
        """Verify brace-less .sass files are skipped rather than scanned as CSS."""
        assert detect_artifact_kind("theme.sass") is ArtifactKind.UNKNOWN
        facts = collect_facts("x.sass", ".card\n  color: red\n", CheckerConfig())
        assert facts.kind is ArtifactKind.UNKNOWN
        assert facts.diagnostics == []

    def test_line_index(self):
        """Verify offsets map to 1-based lines and columns."""
        index = LineIndex("ab\ncd\n")
        assert (index.location("f", 0).line, index.location("f", 0).column) == (1, 1)
        assert (index.location("f", 3).line, index.location("f", 3).column) == (2, 1)
        assert (index.location("f", 4).line, index.location("f", 4).column) == (2, 2)

    def test_decode_source(self):
        """Verify empty and undecodable content is rejected."""
        assert decode_source(".a {}") == ".a {}"
        assert decode_source(".a {}".encode("utf-8")) == ".a {}"
        assert decode_source("  \n ") is None
        assert decode_source(b"\xff\xfe.a {}") is None
        assert decode_source("bad \ufffd char".encode("utf-8")) is None

    def test_decode_source_keeps_replacement_char_in_text(self):
        """Verify text handed over as str is accepted even if it holds U+FFFD."""
        assert decode_source(".a { content: \"\ufffd\"; }") == ".a { content: \"\ufffd\"; }"


# =============================================================================
# Stylesheets
# =============================================================================


class TestScanStylesheet:
    """Class selectors, declarations and usages in stylesheet text."""

    def test_class_tokens(self):
        """Verify class tokens come from preludes, skipping comments and attribute values."""
        scan = scan_stylesheet(STYLESHEET)
        assert [t.text for t in scan.class_tokens] == [
            "nav_bar-page_link",
            "card",
            "card-title",
            "l_stack",
        ]

    def test_class_token_offset_points_at_dot(self):
        """Verify token offsets point at the '.' of the selector."""
        scan = scan_stylesheet(STYLESHEET)
        first = scan.class_tokens[0]
        assert STYLESHEET[first.offset:first.offset + 18] == ".nav_bar-page_link"

    def test_declarations_and_usages(self):
        """Verify custom properties are declarations and var() properties are usages."""
        scan = scan_stylesheet(STYLESHEET)
        assert [d.name for d in scan.declarations] == ["--card-bg"]
        assert scan.declarations[0].value.strip() == "var(--bg, #fff)"
        assert [u.name for u in scan.usages] == ["color"]

    def test_inline(self):
        """Verify inline text is read as the body of one rule."""
        scan = scan_stylesheet("--gap: 2px; color: var(--fg)", inline=True)
        assert [d.name for d in scan.declarations] == ["--gap"]
        assert [u.name for u in scan.usages] == ["color"]


# =============================================================================
# Markup
# =============================================================================


class TestScanMarkup:
    """Class attributes, style blocks and inline styles in markup."""

    def test_class_attributes(self):
        """Verify each class attribute becomes one site, with interpolations and comments dropped."""
        scan = scan_markup(MARKUP)
        token_lists = [[t.text for t in site.tokens] for site in scan.class_attributes]
        assert token_lists == [["l_stack", "user_profile"], ["nav_bar-page_link"]]

    def test_style_block(self):
        """Verify <style> contents are scanned as a stylesheet."""
        scan = scan_markup(MARKUP)
        assert [t.text for t in scan.style_blocks.class_tokens] == ["hero"]
        assert [d.name for d in scan.style_blocks.declarations] == ["--hero-bg"]

    def test_inline_style(self):
        """Verify style attributes contribute declarations with absolute offsets."""
        scan = scan_markup(MARKUP)
        (site,) = scan.inline_styles.declarations
        assert site.name == "--gap"
        assert MARKUP[site.offset:site.offset + 5] == "--gap"

    def test_jsx_class_name(self):
        """Verify className and braced string values are recognized."""
        scan = scan_markup('<div className={"card card-body"} />')
        assert [t.text for t in scan.class_attributes[0].tokens] == ["card", "card-body"]


# =============================================================================
# Fact collection
# =============================================================================


class TestCollectFacts:
    """collect_facts ties scanners, the selector parser and tiers together."""

    def test_markup_facts(self):
        """Verify markup yields observations, selectors and tiered declarations."""
        facts = collect_facts("page.html", MARKUP, CheckerConfig())
        assert [o.tokens for o in facts.observations] == [
            ("l_stack", "user_profile"),
            ("nav_bar-page_link",),
        ]
        assert facts.observations[0].location.line == 4
        tiers = {d.name: d.tier for d in facts.declarations}
        assert tiers == {"--hero-bg": VariableTier.LOCAL, "--gap": VariableTier.UNKNOWN}
        assert facts.diagnostics == []

    def test_theme_tiers(self):
        """Verify theme declarations are primitive or semantic by prefix."""
        css = ":root { --primitive-red: #f00; --danger: var(--primitive-red); }"
        facts = collect_facts("theme.css", css, CheckerConfig())
        assert facts.is_theme
        assert [d.tier for d in facts.declarations] == [VariableTier.PRIMITIVE, VariableTier.SEMANTIC]

    def test_reference_locations(self):
        """Verify reference locations point at the referenced name."""
        css = ".card {\n  --card-bg: var(--bg-surface);\n}\n"
        facts = collect_facts("card.css", css, CheckerConfig())
        (decl,) = facts.declarations
        assert (decl.location.line, decl.location.column) == (2, 3)
        ref = decl.references[0].location
        assert (ref.line, ref.column) == (2, 18)

    def test_duplicate_tokens_collapse(self):
        """Verify a token repeated in one class list is observed once."""
        facts = collect_facts("a.html", '<div class="card card">', CheckerConfig())
        assert facts.observations[0].tokens == ("card",)

    def test_unparseable_token(self):
        """Verify a malformed token becomes a selector-syntax diagnostic, not an exception."""
        facts = collect_facts("a.html", '<div class="sm:p-4 card">', CheckerConfig())
        assert [d.rule_id for d in facts.diagnostics] == [SELECTOR_SYNTAX]
        assert facts.observations[0].tokens == ("sm:p-4", "card")
        assert [s.raw for s in facts.observations[0].selectors] == ["card"]

    def test_unreadable_input(self):
        """Verify undecodable content is excluded with a file-level input error."""
        facts = collect_facts("broken.css", b"\xff\xfe--x: 1", CheckerConfig())
        assert facts.excluded
        (diagnostic,) = facts.diagnostics
        assert diagnostic.rule_id == INPUT_ERROR
        assert (diagnostic.primary.line, diagnostic.primary.column) == (0, 0)

    def test_unknown_kind_is_skipped(self):
        """Verify files of unknown kind produce no facts."""
        facts = collect_facts("notes.txt", ".card-a-b {}", CheckerConfig())
        assert facts.kind is ArtifactKind.UNKNOWN
        assert facts.selectors == [] and facts.diagnostics == []

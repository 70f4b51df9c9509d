"""
Text scanners that locate class selectors, class lists and custom properties.

Scanners work on raw text and report absolute character offsets; LineIndex turns
offsets into SourceLocations. Comments are blanked in place (newlines kept) so
offsets stay valid.
"""

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from typing import List, NamedTuple, Tuple

from .issue import SourceLocation

STYLESHEET_EXTENSIONS = frozenset({".css", ".scss", ".less", ".pcss", ".postcss"})
MARKUP_EXTENSIONS = frozenset({
    ".html", ".htm", ".vue", ".svelte", ".astro", ".jsx", ".tsx",
    ".erb", ".njk", ".hbs", ".twig", ".php",
})

CSS_COMMENT = re.compile(r"/\*.*?(?:\*/|$)", re.DOTALL)
MARKUP_COMMENT = re.compile(r"<!--.*?(?:-->|$)", re.DOTALL)
STYLE_BLOCK = re.compile(r"<style\b[^>]*>(.*?)</style\s*>", re.DOTALL | re.IGNORECASE)
CLASS_ATTRIBUTE = re.compile(r"""(?<![\w:.@-])(?:class|className)\s*=\s*(?:\{\s*)?(["'])(.*?)\1""", re.DOTALL)
STYLE_ATTRIBUTE = re.compile(r"""(?<![\w:.@-])style\s*=\s*(["'])(.*?)\1""", re.DOTALL)
INTERPOLATION = re.compile(r"\{\{.*?\}\}|\$\{[^}]*\}|\{[^{}]*\}", re.DOTALL)

_CLASS_IN_PRELUDE = re.compile(r"\.((?:[A-Za-z_-]|\\.)(?:[\w-]|\\.)*)")
_PRELUDE_NOISE = re.compile(r"\[[^\]]*\]|\"[^\"]*\"|'[^']*'|#\{[^}]*\}")
_CUSTOM_PROPERTY = re.compile(r"\s*(--[A-Za-z0-9_-]+)\s*:")
_PROPERTY = re.compile(r"\s*([A-Za-z-][A-Za-z0-9_-]*)\s*:")


class ArtifactKind(Enum):
    STYLESHEET = "stylesheet"
    MARKUP = "markup"
    UNKNOWN = "unknown"


def detect_artifact_kind(path: str) -> ArtifactKind:
    """Detect artifact kind from the file extension."""
    ext = PurePosixPath(path.replace("\\", "/")).suffix.lower()
    if ext in STYLESHEET_EXTENSIONS:
        return ArtifactKind.STYLESHEET
    if ext in MARKUP_EXTENSIONS:
        return ArtifactKind.MARKUP
    return ArtifactKind.UNKNOWN


class LineIndex:
    """Maps character offsets to 1-based line/column positions."""

    def __init__(self, text: str):
        self._starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def location(self, file: str, offset: int) -> SourceLocation:
        line = bisect_right(self._starts, offset)
        column = offset - self._starts[line - 1] + 1
        return SourceLocation(file, line, column)


class TokenSite(NamedTuple):
    text: str
    offset: int


class DeclarationSite(NamedTuple):
    name: str
    value: str
    offset: int
    value_offset: int


class ClassAttributeSite(NamedTuple):
    offset: int
    tokens: Tuple[TokenSite, ...]


@dataclass
class StylesheetScan:
    class_tokens: List[TokenSite] = field(default_factory=list)
    declarations: List[DeclarationSite] = field(default_factory=list)
    usages: List[DeclarationSite] = field(default_factory=list)

    def extend(self, other: "StylesheetScan") -> None:
        self.class_tokens.extend(other.class_tokens)
        self.declarations.extend(other.declarations)
        self.usages.extend(other.usages)


@dataclass
class MarkupScan:
    class_attributes: List[ClassAttributeSite] = field(default_factory=list)
    style_blocks: StylesheetScan = field(default_factory=StylesheetScan)
    inline_styles: StylesheetScan = field(default_factory=StylesheetScan)


def blank(text: str, pattern: "re.Pattern[str]") -> str:
    """Replace every match of pattern with spaces, keeping newlines."""
    return pattern.sub(lambda m: re.sub(r"[^\n]", " ", m.group(0)), text)


def keep_only(text: str, spans: List[Tuple[int, int]]) -> str:
    """Blank everything outside spans, keeping newlines."""
    out = [ch if ch == "\n" else " " for ch in text]
    for start, end in spans:
        out[start:end] = text[start:end]
    return "".join(out)


def scan_stylesheet(text: str, base_offset: int = 0, inline: bool = False) -> StylesheetScan:
    """Scan stylesheet text.

    Class selectors come from rule preludes (text before '{'); custom property
    declarations and var() usages come from declaration segments. With
    inline=True the text is treated as the body of a single rule, as in a
    `style` attribute.
    """
    clean = blank(text, CSS_COMMENT)
    scan = StylesheetScan()
    depth = 1 if inline else 0
    parens = 0
    quote = None
    start = 0
    for i, ch in enumerate(clean):
        if quote:
            if ch == quote and clean[i - 1] != "\\":
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == "(":
            parens += 1
        elif ch == ")":
            parens = max(0, parens - 1)
        elif parens:
            continue
        elif ch == "{":
            _scan_prelude(clean, start, i, base_offset, scan)
            depth += 1
            start = i + 1
        elif ch == ";":
            if depth > 0:
                _scan_declaration(clean, start, i, base_offset, scan)
            start = i + 1
        elif ch == "}":
            if depth > 0:
                _scan_declaration(clean, start, i, base_offset, scan)
                depth -= 1
            start = i + 1
    if depth > 0 and start < len(clean):
        _scan_declaration(clean, start, len(clean), base_offset, scan)
    return scan


def _scan_prelude(text: str, start: int, end: int, base_offset: int, scan: StylesheetScan) -> None:
    prelude = text[start:end]
    if prelude.strip().startswith("@"):
        return
    prelude = blank(prelude, _PRELUDE_NOISE)
    for match in _CLASS_IN_PRELUDE.finditer(prelude):
        scan.class_tokens.append(TokenSite(match.group(1), base_offset + start + match.start()))


def _scan_declaration(text: str, start: int, end: int, base_offset: int, scan: StylesheetScan) -> None:
    segment = text[start:end]
    if not segment.strip():
        return
    match = _CUSTOM_PROPERTY.match(segment)
    if match:
        scan.declarations.append(DeclarationSite(
            match.group(1),
            segment[match.end():],
            base_offset + start + match.start(1),
            base_offset + start + match.end(),
        ))
        return
    match = _PROPERTY.match(segment)
    if match and "var(" in segment[match.end():]:
        scan.usages.append(DeclarationSite(
            match.group(1),
            segment[match.end():],
            base_offset + start + match.start(1),
            base_offset + start + match.end(),
        ))


def scan_markup(text: str) -> MarkupScan:
    """Scan markup text for class attributes, <style> blocks and inline styles."""
    clean = blank(text, MARKUP_COMMENT)
    scan = MarkupScan()

    style_spans = [m.span(1) for m in STYLE_BLOCK.finditer(clean)]
    if style_spans:
        scan.style_blocks = scan_stylesheet(keep_only(clean, style_spans))

    outside_styles = blank(clean, STYLE_BLOCK)
    for match in CLASS_ATTRIBUTE.finditer(outside_styles):
        value = blank(match.group(2), INTERPOLATION)
        value_start = match.start(2)
        tokens = tuple(
            TokenSite(token.group(0), value_start + token.start())
            for token in re.finditer(r"\S+", value)
        )
        if tokens:
            scan.class_attributes.append(ClassAttributeSite(match.start(), tokens))

    for match in STYLE_ATTRIBUTE.finditer(outside_styles):
        scan.inline_styles.extend(scan_stylesheet(match.group(2), base_offset=match.start(2), inline=True))
    return scan

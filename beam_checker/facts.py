"""
Per-file fact collection (phase 1): parsed selectors, class-list observations,
variable declarations and usages, each with its source location.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from .config import CheckerConfig
from .errors import MalformedSelectorError
from .extractors import (
    ArtifactKind,
    DeclarationSite,
    LineIndex,
    StylesheetScan,
    detect_artifact_kind,
    scan_markup,
    scan_stylesheet,
)
from .issue import Diagnostic, Severity, SourceLocation
from .rules import INPUT_ERROR, SELECTOR_SYNTAX
from .selector_parser import ParsedSelector, parse_selector
from .variable_graph import (
    VariableDeclaration,
    VariableReference,
    VariableTier,
    VariableUsage,
    classify_tier,
    parse_value,
)

SourceText = Union[str, bytes]


@dataclass(frozen=True)
class ClassListObservation:
    """Class tokens co-occurring on one markup element."""
    tokens: Tuple[str, ...]
    selectors: Tuple[ParsedSelector, ...]
    location: SourceLocation


@dataclass
class FileFacts:
    """Everything phase 1 learned about one file."""
    path: str
    kind: ArtifactKind
    is_theme: bool = False
    selectors: List[ParsedSelector] = field(default_factory=list)
    observations: List[ClassListObservation] = field(default_factory=list)
    declarations: List[VariableDeclaration] = field(default_factory=list)
    usages: List[VariableUsage] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    excluded: bool = False


def decode_source(text: SourceText) -> Optional[str]:
    """Return usable text, or None when the content is empty or undecodable."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError:
            return None
        # Replacement characters in raw bytes mean an earlier lossy decode.
        if "\ufffd" in text:
            return None
    if not text.strip():
        return None
    return text


def collect_facts(path: str, text: SourceText, config: CheckerConfig) -> FileFacts:
    kind = detect_artifact_kind(path)
    facts = FileFacts(path=path, kind=kind, is_theme=config.is_theme_artifact(path))
    if kind is ArtifactKind.UNKNOWN:
        return facts

    decoded = decode_source(text)
    if decoded is None:
        facts.excluded = True
        facts.diagnostics.append(Diagnostic(
            INPUT_ERROR,
            Severity.ERROR,
            f"Cannot read '{path}': content is empty or not valid UTF-8",
            (SourceLocation(path, 0, 0),),
            "Check the file encoding and contents",
        ))
        return facts

    index = LineIndex(decoded)
    if kind is ArtifactKind.STYLESHEET:
        _collect_stylesheet(facts, scan_stylesheet(decoded), index, config, local_tier=None)
    else:
        markup = scan_markup(decoded)
        _collect_stylesheet(facts, markup.style_blocks, index, config, local_tier=None)
        _collect_stylesheet(facts, markup.inline_styles, index, config, local_tier=VariableTier.UNKNOWN)
        for attribute in markup.class_attributes:
            _collect_class_list(facts, attribute.offset, attribute.tokens, index, config)
    return facts


def _parse_token(facts: FileFacts, raw: str, location: SourceLocation, config: CheckerConfig) -> Optional[ParsedSelector]:
    try:
        return parse_selector(raw, location, layout_prefix=config.layout_prefix)
    except MalformedSelectorError as e:
        facts.diagnostics.append(Diagnostic(
            SELECTOR_SYNTAX,
            Severity.ERROR,
            f"Class '{e.raw}' is not a BEAM selector: {e.reason} ('{e.substring}')",
            (location,),
            "Use lower snake case blocks joined to elements by a single hyphen",
        ))
        return None


def _collect_stylesheet(
    facts: FileFacts,
    scan: StylesheetScan,
    index: LineIndex,
    config: CheckerConfig,
    local_tier: Optional[VariableTier],
) -> None:
    for token in scan.class_tokens:
        parsed = _parse_token(facts, token.text, index.location(facts.path, token.offset), config)
        if parsed is not None:
            facts.selectors.append(parsed)

    for site in scan.declarations:
        parsed_value = parse_value(site.value)
        tier = local_tier or classify_tier(site.name, facts.is_theme, config.primitive_prefix)
        facts.declarations.append(VariableDeclaration(
            name=site.name,
            tier=tier,
            references=_references(parsed_value.references, site, index, facts.path),
            terminal_literal=parsed_value.terminal_literal,
            file=facts.path,
            location=index.location(facts.path, site.offset),
        ))

    for site in scan.usages:
        parsed_value = parse_value(site.value)
        if not parsed_value.references:
            continue
        facts.usages.append(VariableUsage(
            property_name=site.name,
            references=_references(parsed_value.references, site, index, facts.path),
            file=facts.path,
            location=index.location(facts.path, site.offset),
            from_theme=facts.is_theme,
        ))


def _references(raw_refs: Iterable, site: DeclarationSite, index: LineIndex, path: str) -> Tuple[VariableReference, ...]:
    return tuple(
        VariableReference(ref.name, index.location(path, site.value_offset + ref.offset), ref.has_fallback)
        for ref in raw_refs
    )


def _collect_class_list(facts: FileFacts, offset: int, tokens, index: LineIndex, config: CheckerConfig) -> None:
    seen: List[str] = []
    parsed: List[ParsedSelector] = []
    for token in tokens:
        if token.text in seen:
            continue
        seen.append(token.text)
        selector = _parse_token(facts, token.text, index.location(facts.path, token.offset), config)
        if selector is not None:
            parsed.append(selector)
            facts.selectors.append(selector)
    facts.observations.append(ClassListObservation(
        tokens=tuple(seen),
        selectors=tuple(parsed),
        location=index.location(facts.path, offset),
    ))

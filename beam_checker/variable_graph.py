"""
Variable graph: custom-property declarations, their fallback chains and tiers.

Phase 1 parses declarations file by file and feeds them to a
VariableGraphBuilder. Once every file has been merged the builder is frozen
into a read-only VariableGraph that the tier checker walks in phase 2.
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import GraphFrozenError, UnresolvedReferenceError
from .issue import SourceLocation

HEX_COLOR_PATTERN = re.compile(r"#(?:[0-9a-fA-F]{8}|[0-9a-fA-F]{6}|[0-9a-fA-F]{3,4})\b")

_NAME_PATTERN = re.compile(r"--[A-Za-z0-9_-]+")
_VAR_OPEN = re.compile(r"var\(")
_IMPORTANT = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)


class VariableTier(Enum):
    PRIMITIVE = "primitive"
    SEMANTIC = "semantic"
    LOCAL = "local"
    UNKNOWN = "unknown"


# Higher wins when a name is declared in several tiers.
_TIER_PRECEDENCE = {
    VariableTier.UNKNOWN: 0,
    VariableTier.LOCAL: 1,
    VariableTier.SEMANTIC: 2,
    VariableTier.PRIMITIVE: 3,
}


@dataclass(frozen=True)
class RawReference:
    """A reference found while parsing a value; offset is relative to the value text."""
    name: str
    offset: int
    has_fallback: bool


@dataclass(frozen=True)
class ParsedValue:
    references: Tuple[RawReference, ...]
    terminal_literal: Optional[str]


@dataclass(frozen=True)
class VariableReference:
    name: str
    location: SourceLocation
    has_fallback: bool


@dataclass(frozen=True)
class VariableDeclaration:
    """One `--name: value` declaration."""
    name: str
    tier: VariableTier
    references: Tuple[VariableReference, ...]
    terminal_literal: Optional[str]
    file: str
    location: SourceLocation

    @property
    def fallback_names(self) -> Tuple[str, ...]:
        return tuple(r.name for r in self.references)

    @property
    def has_hex_terminal(self) -> bool:
        return bool(self.terminal_literal and HEX_COLOR_PATTERN.search(self.terminal_literal))


@dataclass(frozen=True)
class VariableUsage:
    """var() references inside an ordinary property such as `color: var(--fg)`."""
    property_name: str
    references: Tuple[VariableReference, ...]
    file: str
    location: SourceLocation
    from_theme: bool


def classify_tier(name: str, in_theme: bool, primitive_prefix: str) -> VariableTier:
    """Tier of a stylesheet declaration, decided by where it is declared."""
    if not in_theme:
        return VariableTier.LOCAL
    if name.startswith(primitive_prefix):
        return VariableTier.PRIMITIVE
    return VariableTier.SEMANTIC


def parse_value(value: str) -> ParsedValue:
    """Parse a custom-property value into its fallback chain.

    `var(--a, var(--b, #fff))` yields references --a and --b (both with a
    fallback after them) and terminal literal `#fff`. Compound values that merely
    contain var() calls yield their references and no terminal literal.

    Nesting depth is unbounded: the chain is followed in a loop and compound
    parts are queued on an explicit stack.
    """
    important = _IMPORTANT.search(value)
    if important:
        value = value[:important.start()]
    pairs = _paren_pairs(value)
    references: List[RawReference] = []
    literal: Optional[str] = None
    # (start, end, is the top-level chain)
    pending: List[Tuple[int, int, bool]] = [(0, len(value), True)]
    while pending:
        start, end, top = pending.pop()
        nested, tail = _parse_chain(value, start, end, pairs, references)
        if top:
            literal = tail
        pending.extend((s, e, False) for s, e in reversed(nested))
    return ParsedValue(tuple(references), literal)


def _parse_chain(
    text: str,
    start: int,
    end: int,
    pairs: Dict[int, int],
    references: List[RawReference],
) -> Tuple[List[Tuple[int, int]], Optional[str]]:
    """Follow one var() fallback chain in text[start:end].

    Returns the spans of var() calls inside a compound tail, and the terminal
    literal when the chain ends in one.
    """
    while True:
        while start < end and text[start].isspace():
            start += 1
        while end > start and text[end - 1].isspace():
            end -= 1
        if start >= end:
            return [], None

        if text.startswith("var(", start, end) and pairs.get(start + 3) == end - 1:
            inner_end = end - 1
            name_start = start + 4
            while name_start < inner_end and text[name_start].isspace():
                name_start += 1
            match = _NAME_PATTERN.match(text, name_start, inner_end)
            if match is None:
                return [], text[start:end]
            rest = match.end()
            while rest < inner_end and text[rest].isspace():
                rest += 1
            if rest >= inner_end or text[rest] != ",":
                references.append(RawReference(match.group(0), match.start(), False))
                return [], None
            references.append(RawReference(match.group(0), match.start(), True))
            start, end = rest + 1, inner_end
            continue

        spans: List[Tuple[int, int]] = []
        last_end = -1
        for opener in _VAR_OPEN.finditer(text, start, end):
            if opener.start() <= last_end:
                continue
            close = pairs.get(opener.end() - 1, -1)
            if close < 0 or close >= end:
                break
            spans.append((opener.start(), close + 1))
            last_end = close
        if spans or _VAR_OPEN.search(text, start, end):
            return spans, None
        return [], text[start:end]


def _paren_pairs(text: str) -> Dict[int, int]:
    """Map each '(' index to the index of its closing ')', ignoring quoted text."""
    pairs: Dict[int, int] = {}
    opened: List[int] = []
    quote = None
    for i, ch in enumerate(text):
        if quote:
            if ch == quote and text[i - 1] != "\\":
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == "(":
            opened.append(i)
        elif ch == ")" and opened:
            pairs[opened.pop()] = i
    return pairs


class VariableGraph:
    """Frozen view of every declaration and usage across the input set."""

    def __init__(
        self,
        declarations: Dict[str, Tuple[VariableDeclaration, ...]],
        usages: Tuple[VariableUsage, ...],
    ):
        self._declarations: Mapping[str, Tuple[VariableDeclaration, ...]] = MappingProxyType(dict(declarations))
        self._usages = usages

    @property
    def declarations(self) -> Mapping[str, Tuple[VariableDeclaration, ...]]:
        return self._declarations

    @property
    def usages(self) -> Tuple[VariableUsage, ...]:
        return self._usages

    def __contains__(self, name: str) -> bool:
        return name in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)

    def names(self) -> List[str]:
        return sorted(self._declarations)

    def resolve(self, name: str) -> Tuple[VariableDeclaration, ...]:
        """All declarations of name, in input order."""
        try:
            return self._declarations[name]
        except KeyError:
            raise UnresolvedReferenceError(name) from None

    def tier_of(self, name: str) -> VariableTier:
        decls = self._declarations.get(name)
        if not decls:
            return VariableTier.UNKNOWN
        return max((d.tier for d in decls), key=_TIER_PRECEDENCE.__getitem__)

    def edges(self, name: str) -> Tuple[str, ...]:
        """Referenced names, deduplicated, in declaration order."""
        seen: Dict[str, None] = {}
        for decl in self._declarations.get(name, ()):
            for ref_name in decl.fallback_names:
                seen.setdefault(ref_name, None)
        return tuple(seen)


class VariableGraphBuilder:
    """Accumulates per-file contributions until frozen."""

    def __init__(self):
        self._declarations: Dict[str, List[VariableDeclaration]] = {}
        self._usages: List[VariableUsage] = []
        self._frozen = False

    def merge(self, declarations: Iterable[VariableDeclaration], usages: Iterable[VariableUsage] = ()) -> None:
        if self._frozen:
            raise GraphFrozenError("variable graph is frozen; phase 2 has started")
        for decl in declarations:
            self._declarations.setdefault(decl.name, []).append(decl)
        self._usages.extend(usages)

    def freeze(self) -> VariableGraph:
        self._frozen = True
        return VariableGraph(
            {name: tuple(decls) for name, decls in self._declarations.items()},
            tuple(self._usages),
        )

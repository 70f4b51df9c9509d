"""
Selector parser: turns one class selector or class-list token into a ParsedSelector.

Grammar (after an optional leading '.'):

    token     := layout | component
    layout    := LAYOUT_PREFIX identifier
    component := block ( '-' path_part )*
    block     := lower snake case   e.g. nav_bar
    path_part := lower snake case   e.g. page_link

The first hyphen separates the block from the element. Every further hyphen is
one more nesting level; such tokens are still returned (kind ``malformed``,
defect ``excess-depth``) so the naming rules can report the exact violation.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .config import DEFAULT_LAYOUT_PREFIX
from .errors import MalformedSelectorError
from .issue import SourceLocation

BLOCK_PATTERN = re.compile(r"^[a-z0-9]+(?:_[a-z0-9]+)*$")
ELEMENT_PATTERN = re.compile(r"^[a-z0-9]+(?:[_-][a-z0-9]+)*$")

_INVALID_CHAR = re.compile(r"[^A-Za-z0-9_-]")
_UNDERSCORE_HYPHEN = re.compile(r"_-|-_")


class SelectorKind(Enum):
    BLOCK = "block"
    ELEMENT = "element"
    LAYOUT_PRIMITIVE = "layout-primitive"
    MALFORMED = "malformed"


class SelectorDefect(Enum):
    BLOCK_CASE = "block-case"
    ELEMENT_CASE = "element-case"
    EXCESS_DEPTH = "excess-depth"


@dataclass(frozen=True)
class ParsedSelector:
    """Structural form of a class token."""
    raw: str
    kind: SelectorKind
    block: Optional[str] = None
    element: Optional[str] = None
    depth: int = 0
    defects: Tuple[SelectorDefect, ...] = ()
    identifier: Optional[str] = None
    location: Optional[SourceLocation] = None

    @property
    def is_layout(self) -> bool:
        return self.kind is SelectorKind.LAYOUT_PRIMITIVE

    @property
    def is_component(self) -> bool:
        return self.kind in (SelectorKind.BLOCK, SelectorKind.ELEMENT)

    @property
    def path(self) -> List[str]:
        """Element path segments, one per hyphen join."""
        return self.element.split("-") if self.element else []

    def flattened(self) -> str:
        """Single-hyphen form: block plus the last path segment."""
        path = self.path
        if not path:
            return self.block or self.raw
        return f"{self.block}-{path[-1]}"


def parse_selector(
    raw: str,
    location: Optional[SourceLocation] = None,
    layout_prefix: str = DEFAULT_LAYOUT_PREFIX,
) -> ParsedSelector:
    """Parse a class token.

    Raises:
        MalformedSelectorError: the token has no recoverable structure
            (empty, foreign characters, stray or doubled hyphens).
    """
    text = raw.strip()
    if text.startswith("."):
        text = text[1:]
    if not text:
        raise MalformedSelectorError(raw, raw, "empty selector")

    bad = _INVALID_CHAR.search(text)
    if bad:
        raise MalformedSelectorError(raw, bad.group(0), "unexpected character")
    if text.startswith("-") or text.endswith("-"):
        raise MalformedSelectorError(raw, "-", "leading or trailing hyphen")
    if "--" in text:
        raise MalformedSelectorError(raw, "--", "consecutive hyphens")
    joint = _UNDERSCORE_HYPHEN.search(text)
    if joint:
        raise MalformedSelectorError(raw, joint.group(0), "hyphen adjacent to an underscore")

    if text.startswith(layout_prefix):
        return _parse_layout(raw, text[len(layout_prefix):], location)
    return _parse_component(raw, text, location)


def _parse_layout(raw: str, identifier: str, location: Optional[SourceLocation]) -> ParsedSelector:
    if not identifier:
        raise MalformedSelectorError(raw, raw, "layout prefix without identifier")
    if ELEMENT_PATTERN.match(identifier):
        return ParsedSelector(
            raw=raw,
            kind=SelectorKind.LAYOUT_PRIMITIVE,
            identifier=identifier,
            location=location,
        )
    return ParsedSelector(
        raw=raw,
        kind=SelectorKind.MALFORMED,
        block=raw.strip().lstrip("."),
        defects=(SelectorDefect.BLOCK_CASE,),
        identifier=identifier,
        location=location,
    )


def _parse_component(raw: str, text: str, location: Optional[SourceLocation]) -> ParsedSelector:
    block, _, element = text.partition("-")
    element_or_none = element or None
    depth = len(element.split("-")) if element else 0

    defects: List[SelectorDefect] = []
    if not BLOCK_PATTERN.match(block):
        defects.append(SelectorDefect.BLOCK_CASE)
    if element_or_none is not None and not ELEMENT_PATTERN.match(element):
        defects.append(SelectorDefect.ELEMENT_CASE)
    if depth > 1:
        defects.append(SelectorDefect.EXCESS_DEPTH)

    if defects:
        kind = SelectorKind.MALFORMED
    elif element_or_none is not None:
        kind = SelectorKind.ELEMENT
    else:
        kind = SelectorKind.BLOCK

    return ParsedSelector(
        raw=raw,
        kind=kind,
        block=block,
        element=element_or_none,
        depth=depth,
        defects=tuple(defects),
        location=location,
    )

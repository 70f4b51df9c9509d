"""
Naming rules: casing, flat nesting and state words in class names.
"""

import re

from ..checker_base import BaseChecker
from ..rules import BLOCK_CASE, ELEMENT_CASE, FLAT_NESTING, STATE_IN_CLASS
from ..selector_parser import ParsedSelector, SelectorDefect

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_snake_case(name: str) -> str:
    """NavBar -> nav_bar, Page_Link -> page_link."""
    snake = _WORD_BOUNDARY.sub("_", name).lower()
    return re.sub(r"_+", "_", snake).strip("_")


class NamingChecker(BaseChecker):
    """Checks every parsed selector of a file against the naming rules."""

    def _run_checks(self):
        for selector in self.facts.selectors:
            self._check_casing(selector)
            self._check_flat_nesting(selector)
            self._check_state_words(selector)

    def _check_casing(self, selector: ParsedSelector):
        if SelectorDefect.BLOCK_CASE in selector.defects:
            segment = selector.block or selector.raw
            self._add_diagnostic(
                BLOCK_CASE,
                f"Block segment '{segment}' of '{selector.raw}' must be lower snake case",
                [selector.location],
                f"Rename the block to '{to_snake_case(segment)}'",
            )
        if SelectorDefect.ELEMENT_CASE in selector.defects:
            self._add_diagnostic(
                ELEMENT_CASE,
                f"Element segment '{selector.element}' of '{selector.raw}' must be lower case",
                [selector.location],
                f"Rename the element to '{to_snake_case(selector.element)}'",
            )

    def _check_flat_nesting(self, selector: ParsedSelector):
        if SelectorDefect.EXCESS_DEPTH not in selector.defects:
            return
        flat = selector.flattened()
        self._add_diagnostic(
            FLAT_NESTING,
            f"Selector '{selector.raw}' nests {selector.depth} levels deep; "
            f"elements are flat, use '{flat}'",
            [selector.location],
            f"Rename '{selector.raw}' to '{flat}'",
        )

    def _check_state_words(self, selector: ParsedSelector):
        if not selector.element:
            return
        words = re.split(r"[-_]", selector.element.lower())
        for word in words:
            if word in self.config.state_words:
                self._add_diagnostic(
                    STATE_IN_CLASS,
                    f"Class '{selector.raw}' encodes the state '{word}' in its name",
                    [selector.location],
                    f"Use a data attribute instead, e.g. [data-state=\"{word}\"]",
                )
                return

"""
Rule identifiers and their default severities.
"""

from dataclasses import dataclass
from typing import Dict

from .issue import Severity

BLOCK_CASE = "rule:block-case"
ELEMENT_CASE = "rule:element-case"
FLAT_NESTING = "rule:flat-nesting"
STATE_IN_CLASS = "rule:state-in-class"
SELECTOR_SYNTAX = "rule:selector-syntax"
LAYOUT_BLOCK_MUTEX = "rule:layout-block-mutex"
VARIABLE_CYCLE = "rule:variable-cycle"
VARIABLE_UNRESOLVED = "rule:variable-unresolved"
HARDCODED_COLOR = "rule:hardcoded-color"
MISSING_SEMANTIC_FALLBACK = "rule:missing-semantic-fallback"
PRIMITIVE_LEAK = "rule:primitive-leak"
INPUT_ERROR = "rule:input-error"


@dataclass(frozen=True)
class Rule:
    rule_id: str
    severity: Severity
    description: str


RULES: Dict[str, Rule] = {
    r.rule_id: r
    for r in (
        Rule(BLOCK_CASE, Severity.ERROR, "Block segment must be lower snake case"),
        Rule(ELEMENT_CASE, Severity.ERROR, "Element segment must be lower case words joined by '_' or '-'"),
        Rule(FLAT_NESTING, Severity.ERROR, "Elements are named flat: one hyphen between block and element"),
        Rule(STATE_IN_CLASS, Severity.WARNING, "State or variant encoded in a class name instead of a data attribute"),
        Rule(SELECTOR_SYNTAX, Severity.ERROR, "Class token cannot be parsed as a BEAM selector"),
        Rule(LAYOUT_BLOCK_MUTEX, Severity.ERROR, "Layout primitive and block/element classes on the same element"),
        Rule(VARIABLE_CYCLE, Severity.ERROR, "Custom property fallback chain forms a cycle"),
        Rule(VARIABLE_UNRESOLVED, Severity.ERROR, "Custom property reference is never declared"),
        Rule(HARDCODED_COLOR, Severity.ERROR, "Component-local custom property falls back to a hex color"),
        Rule(MISSING_SEMANTIC_FALLBACK, Severity.ERROR, "Component-local custom property never reaches a semantic or primitive token"),
        Rule(PRIMITIVE_LEAK, Severity.WARNING, "Component references a primitive token directly instead of a semantic one"),
        Rule(INPUT_ERROR, Severity.ERROR, "Source file is empty or cannot be decoded"),
    )
}

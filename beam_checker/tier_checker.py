"""
Tier consistency (phase 2): walks the frozen variable graph for cycles,
unresolved references, hard-coded colors, missing semantic fallbacks and
primitive leaks.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .config import CheckerConfig
from .errors import UnresolvedReferenceError
from .issue import Diagnostic, SourceLocation
from .rules import (
    HARDCODED_COLOR,
    MISSING_SEMANTIC_FALLBACK,
    PRIMITIVE_LEAK,
    RULES,
    VARIABLE_CYCLE,
    VARIABLE_UNRESOLVED,
)
from .variable_graph import VariableDeclaration, VariableGraph, VariableReference, VariableTier

_TOKEN_TIERS = (VariableTier.SEMANTIC, VariableTier.PRIMITIVE)

_WHITE, _GRAY, _BLACK = 0, 1, 2


class TierConsistencyChecker:
    """Checks the whole variable graph once every file has been merged."""

    def __init__(self, graph: VariableGraph, config: CheckerConfig):
        self.graph = graph
        self.config = config
        self.diagnostics: List[Diagnostic] = []

    def check(self) -> List[Diagnostic]:
        self.diagnostics = []
        on_cycle = self._check_cycles()
        for name in self.graph.names():
            for decl in self.graph.declarations[name]:
                self._check_references(decl.name, decl.file, decl.references)
                if decl.tier is VariableTier.LOCAL:
                    self._check_hex_terminal(decl)
                    # A cycle has no terminus, so tier ordering is moot for its members.
                    if name not in on_cycle:
                        self._check_tier_order(decl)
        for usage in self.graph.usages:
            self._check_references(usage.property_name, usage.file, usage.references)
        return self.diagnostics

    def _add(self, rule_id: str, message: str, locations: Sequence[SourceLocation], suggestion: Optional[str] = None):
        self.diagnostics.append(
            Diagnostic(rule_id, RULES[rule_id].severity, message, tuple(locations), suggestion)
        )

    def find_cycles(self) -> List[List[str]]:
        """Detect cycles with path-coloring DFS. Each cycle is returned once, rotated to start at its smallest name.

        The walk keeps its own stack of (node, remaining neighbors), so chain
        length is not limited by the interpreter's recursion limit.
        """
        color: Dict[str, int] = {name: _WHITE for name in self.graph.names()}
        cycles: List[List[str]] = []
        seen: Set[Tuple[str, ...]] = set()

        for root in self.graph.names():
            if color[root] != _WHITE:
                continue
            color[root] = _GRAY
            path: List[str] = [root]
            stack: List[Tuple[str, Iterator[str]]] = [(root, iter(self.graph.edges(root)))]
            while stack:
                node, neighbors = stack[-1]
                descended = False
                for neighbor in neighbors:
                    if neighbor not in color:
                        continue
                    if color[neighbor] == _GRAY:
                        cycle = path[path.index(neighbor):]
                        pivot = cycle.index(min(cycle))
                        canonical = tuple(cycle[pivot:] + cycle[:pivot])
                        if canonical not in seen:
                            seen.add(canonical)
                            cycles.append(list(canonical))
                    elif color[neighbor] == _WHITE:
                        color[neighbor] = _GRAY
                        path.append(neighbor)
                        stack.append((neighbor, iter(self.graph.edges(neighbor))))
                        descended = True
                        break
                if not descended:
                    stack.pop()
                    path.pop()
                    color[node] = _BLACK
        return cycles

    def _check_cycles(self) -> Set[str]:
        members: Set[str] = set()
        for cycle in self.find_cycles():
            members.update(cycle)
            locations = [self.graph.resolve(name)[0].location for name in cycle]
            chain = " -> ".join(cycle + [cycle[0]])
            self._add(
                VARIABLE_CYCLE,
                f"Custom property fallback cycle: {chain}",
                locations,
                "Break the cycle so the chain ends in a semantic token or literal",
            )
        return members

    def _check_references(self, owner: str, file: str, references: Sequence[VariableReference]):
        from_theme = self.config.is_theme_artifact(file)
        for ref in references:
            try:
                self.graph.resolve(ref.name)
            except UnresolvedReferenceError as e:
                self._add(
                    VARIABLE_UNRESOLVED,
                    f"'{owner}' references '{e.name}', which is never declared",
                    [ref.location],
                    "Declare the token in the theme or remove the reference",
                )
                continue
            if not from_theme and self.graph.tier_of(ref.name) is VariableTier.PRIMITIVE:
                self._add(
                    PRIMITIVE_LEAK,
                    f"'{owner}' references primitive token '{ref.name}' directly",
                    [ref.location],
                    f"Reference a semantic token that wraps '{ref.name}' instead",
                )

    def _check_hex_terminal(self, decl: VariableDeclaration):
        if decl.has_hex_terminal:
            self._add(
                HARDCODED_COLOR,
                f"Component token '{decl.name}' falls back to hard-coded color '{decl.terminal_literal}'",
                [decl.location],
                "Fall back to a semantic token from the theme instead of a hex value",
            )

    def _check_tier_order(self, decl: VariableDeclaration):
        """Every edge out of a Local node lands on a Semantic or Primitive node, skipping only Unknown ones."""
        reached = False
        for ref in decl.references:
            landing = self.landing_node(ref.name)
            if landing is None:
                continue
            if self.graph.tier_of(landing) in _TOKEN_TIERS:
                reached = True
                continue
            if self.graph.tier_of(landing) is VariableTier.LOCAL:
                via = "" if landing == ref.name else f" (through '{ref.name}')"
                self._add(
                    MISSING_SEMANTIC_FALLBACK,
                    f"Component token '{decl.name}' falls back to component token '{landing}'{via} "
                    f"instead of a semantic or primitive token",
                    [ref.location],
                    f"Point '{decl.name}' at a semantic token from the theme",
                )
                return
        if decl.terminal_literal is not None and not reached:
            self._add(
                MISSING_SEMANTIC_FALLBACK,
                f"Component token '{decl.name}' ends in literal '{decl.terminal_literal}' "
                f"without reaching a semantic or primitive token",
                [decl.location],
                f"Give '{decl.name}' a fallback chain through a semantic token, e.g. var(--semantic-token, ...)",
            )

    def landing_node(self, name: str) -> Optional[str]:
        """First non-Unknown node reached from name, walking through Unknown nodes breadth-first.

        None when name is undeclared or the Unknown nodes lead nowhere.
        """
        pending = [name]
        visited: Set[str] = set()
        while pending:
            current = pending.pop(0)
            if current in visited or current not in self.graph:
                continue
            visited.add(current)
            if self.graph.tier_of(current) is not VariableTier.UNKNOWN:
                return current
            pending.extend(self.graph.edges(current))
        return None

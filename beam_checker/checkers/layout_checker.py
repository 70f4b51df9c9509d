"""
Layout exclusivity: a layout primitive never shares an element with a block or element class.
"""

from ..checker_base import BaseChecker
from ..rules import LAYOUT_BLOCK_MUTEX


class LayoutChecker(BaseChecker):
    """Checks each class-list observation on its own; never across elements."""

    def _run_checks(self):
        for observation in self.facts.observations:
            layouts = [s for s in observation.selectors if s.is_layout]
            components = [s for s in observation.selectors if s.is_component]
            if not layouts or not components:
                continue
            layout_names = ", ".join(f"'{s.raw}'" for s in layouts)
            component_names = ", ".join(f"'{s.raw}'" for s in components)
            self._add_diagnostic(
                LAYOUT_BLOCK_MUTEX,
                f"Layout primitive {layout_names} shares an element with block/element class {component_names}",
                [observation.location, layouts[0].location, components[0].location],
                "Move the layout class to a wrapping element, or style the block with its own layout",
            )

"""
Main checker class that coordinates the two-phase BEAM check.

Phase 1 runs per file on a thread pool: fact collection, naming rules and
layout exclusivity. Graph contributions are merged after the join, in input
order. Phase 2 walks the frozen variable graph once.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Protocol, Sequence, Tuple

from .checkers import LayoutChecker, NamingChecker
from .config import CheckerConfig
from .extractors import ArtifactKind
from .facts import FileFacts, SourceText, collect_facts
from .issue import Diagnostic
from .log import get_logger
from .reporter import Report, aggregate, cancelled_report
from .tier_checker import TierConsistencyChecker
from .variable_graph import VariableGraph, VariableGraphBuilder

logger = get_logger(__name__)


class CancelToken(Protocol):
    def is_set(self) -> bool: ...


def _cancelled(cancel: Optional[CancelToken]) -> bool:
    return cancel is not None and cancel.is_set()


class BeamChecker:
    """Runs every BEAM rule over an ordered set of (path, text) sources."""

    def __init__(self, config: Optional[CheckerConfig] = None):
        self.config = (config or CheckerConfig()).validate()

    def check_source(self, path: str, text: SourceText) -> FileFacts:
        """Phase 1 for one file: collect facts and apply the per-file rules."""
        facts = collect_facts(path, text, self.config)
        if facts.kind is ArtifactKind.UNKNOWN:
            logger.debug("Skipping {}: not a stylesheet or markup file", path)
            return facts
        if facts.excluded:
            logger.debug("Excluded {} from the variable graph", path)
            return facts
        facts.diagnostics.extend(NamingChecker(self.config).check(facts))
        facts.diagnostics.extend(LayoutChecker(self.config).check(facts))
        logger.debug(
            "{}: {} selectors, {} class lists, {} declarations",
            path, len(facts.selectors), len(facts.observations), len(facts.declarations),
        )
        return facts

    def check_sources(
        self,
        sources: Sequence[Tuple[str, SourceText]],
        cancel: Optional[CancelToken] = None,
    ) -> Report:
        """Check all sources and return the aggregated report.

        If cancel is set at any point the run is abandoned and the report is
        'cancelled' with no diagnostics.
        """
        logger.info("Checking {} file(s)", len(sources))
        results = self._run_phase_one(sources, cancel)
        if results is None:
            logger.warning("Run cancelled during phase 1")
            return cancelled_report()

        diagnostics: List[Diagnostic] = []
        builder = VariableGraphBuilder()
        for facts in results:
            diagnostics.extend(facts.diagnostics)
            if not facts.excluded:
                builder.merge(facts.declarations, facts.usages)
        graph = builder.freeze()
        logger.info("Phase 1 complete; variable graph has {} token(s)", len(graph))

        if _cancelled(cancel):
            logger.warning("Run cancelled before phase 2")
            return cancelled_report()
        diagnostics.extend(self.check_graph(graph))
        if _cancelled(cancel):
            logger.warning("Run cancelled during phase 2")
            return cancelled_report()

        report = aggregate(diagnostics)
        logger.info("Finished: {} ({} diagnostics)", report.status.value, len(report.diagnostics))
        return report

    def check_graph(self, graph: VariableGraph) -> List[Diagnostic]:
        """Phase 2: cross-file tier consistency."""
        return TierConsistencyChecker(graph, self.config).check()

    def _run_phase_one(
        self,
        sources: Sequence[Tuple[str, SourceText]],
        cancel: Optional[CancelToken],
    ) -> Optional[List[FileFacts]]:
        if _cancelled(cancel):
            return None
        if not sources:
            return []
        workers = min(self.config.max_workers, len(sources))
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="beam")
        try:
            futures: List[Future] = [pool.submit(self.check_source, path, text) for path, text in sources]
            results: List[FileFacts] = []
            for future in futures:
                if _cancelled(cancel):
                    return None
                results.append(future.result())
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
        if _cancelled(cancel):
            return None
        return results

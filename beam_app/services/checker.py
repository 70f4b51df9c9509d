"""Checker service: wraps beam_checker and maps results to API models."""

from typing import List, Optional, Tuple

from beam_checker.config import CheckerConfig
from beam_checker.issue import Diagnostic
from beam_checker.main_checker import BeamChecker
from beam_checker.reporter import Report, ReportGenerator, exit_code

from ..config import load_checker_config
from ..schemas import CheckOptions, CheckResponse, CheckSummary, DiagnosticOut, LocationOut, SourceFileIn


def _diagnostic_to_out(d: Diagnostic) -> DiagnosticOut:
    return DiagnosticOut(
        rule_id=d.rule_id,
        severity=d.severity.value,
        message=d.message,
        locations=[LocationOut(file=loc.file, line=loc.line, column=loc.column) for loc in d.locations],
        suggestion=d.suggestion,
    )


class CheckerService:
    """Wraps BeamChecker for use by the API."""

    def __init__(self, config: Optional[CheckerConfig] = None):
        self._config = config

    @property
    def config(self) -> CheckerConfig:
        if self._config is None:
            self._config = load_checker_config()
        return self._config

    def resolve_config(self, options: Optional[CheckOptions]) -> CheckerConfig:
        """Server configuration with request options applied. Raises ConfigurationError."""
        if options is None:
            return self.config
        return self.config.with_overrides(
            strict=options.strict,
            state_words=options.state_words,
            theme_artifact_matcher=options.theme_pattern,
        )

    def run(self, files: List[SourceFileIn], options: Optional[CheckOptions] = None) -> Tuple[Report, CheckerConfig]:
        config = self.resolve_config(options)
        report = BeamChecker(config).check_sources([(f.path, f.content) for f in files])
        return report, config

    def check(self, files: List[SourceFileIn], options: Optional[CheckOptions] = None) -> CheckResponse:
        """Run all rules and map the report to the response model."""
        report, config = self.run(files, options)
        return CheckResponse(
            status=report.status.value,
            exit_code=exit_code(report, config.strict),
            diagnostics=[_diagnostic_to_out(d) for d in report.diagnostics],
            summary=CheckSummary(
                errors=len(report.errors),
                warnings=len(report.warnings),
                by_rule=ReportGenerator.generate_summary(report),
            ),
        )

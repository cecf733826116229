"""Deletion gate: the permission and confirmation state machine.

After a search, the gate takes the classified candidates through:

    Summarizing -> PrivilegeCheck -> [SizeReport] -> Excluding -> Previewing
        -> DryRunExit
        -> [ConfirmCritical] -> [ConfirmFinal] -> Deleting -> Done

Each step can only shrink the candidate list. Critical paths never
reach the deleter unless the process is elevated and the user typed the
full confirmation phrase (or passed --force). Terminal outcomes map to
the process exit code through Outcome.exit_code.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from delf.core.exclusion import parse_exclusions, partition
from delf.core.options import RunOptions
from delf.filesystem.operator import DeleteResult, DeletionTally, FilesystemOperator
from delf.filesystem.usage import total_size
from delf.safety.classifier import PathClassifier, filter_out_critical
from delf.safety.models import CategoryCounts, SearchResult

logger = logging.getLogger(__name__)

CRITICAL_CONFIRMATION_PHRASE = "YES DELETE SYSTEM FILES"
PREVIEW_LIMIT = 10


class ExitCode(IntEnum):
    """Process exit codes.

    Attributes:
        SUCCESS: Completed, dry-run, or nothing left after exclusions.
        FAILURE: No matches, nothing deletable, or invalid input.
        CANCELLED: The user declined a confirmation.
        ELEVATION_REQUIRED: Refused up front without root/Administrator.
    """

    SUCCESS = 0
    FAILURE = 1
    CANCELLED = 2
    ELEVATION_REQUIRED = 3


class Outcome(str, Enum):
    """Terminal state of a gate run."""

    COMPLETED = "completed"
    DRY_RUN = "dry_run"
    ALL_EXCLUDED = "all_excluded"
    NO_MATCHES = "no_matches"
    NOTHING_DELETABLE = "nothing_deletable"
    CANCELLED = "cancelled"

    @property
    def exit_code(self) -> ExitCode:
        """Exit code the process should end with."""
        if self in (Outcome.NO_MATCHES, Outcome.NOTHING_DELETABLE):
            return ExitCode.FAILURE
        if self == Outcome.CANCELLED:
            return ExitCode.CANCELLED
        return ExitCode.SUCCESS


@dataclass(slots=True)
class GateReport:
    """What happened during a gate run.

    Attributes:
        outcome: Terminal state reached.
        counts: Category counts of the search results, before any filtering.
        candidates: Results still slated for deletion at the end.
        excluded: Results removed by the user's exclusion patterns.
        blocked: Critical results removed for lack of privileges.
        tally: Deletion tally, or None if no deletion ran.
    """

    outcome: Outcome
    counts: CategoryCounts
    candidates: list[SearchResult] = field(default_factory=list)
    excluded: list[SearchResult] = field(default_factory=list)
    blocked: list[SearchResult] = field(default_factory=list)
    tally: DeletionTally | None = None

    @property
    def exit_code(self) -> ExitCode:
        """Exit code for this report's outcome."""
        return self.outcome.exit_code


class GateUI(ABC):
    """Presentation and input hooks used by the gate.

    The gate decides; the UI shows and asks. Prompt methods return the
    raw text the user typed.
    """

    @abstractmethod
    def show_summary(self, counts: CategoryCounts) -> None:
        """Show the number of matches per safety tier."""

    @abstractmethod
    def show_no_matches(self, options: RunOptions) -> None:
        """Report that the search found nothing."""

    @abstractmethod
    def show_privilege_blocked(self, blocked: int, remaining: int) -> None:
        """Report critical matches dropped for lack of privileges."""

    @abstractmethod
    def show_total_size(self, size_bytes: int) -> None:
        """Show the total size of the current candidates."""

    @abstractmethod
    def ask_exclusions(self) -> str:
        """Ask for one comma-separated line of exclusion patterns."""

    @abstractmethod
    def show_excluded(self, excluded: Sequence[SearchResult]) -> None:
        """Show the results removed by exclusion patterns."""

    @abstractmethod
    def show_all_excluded(self) -> None:
        """Report that exclusions left nothing to delete."""

    @abstractmethod
    def show_preview(self, candidates: Sequence[SearchResult], limit: int) -> None:
        """Show the first ``limit`` candidates about to be deleted."""

    @abstractmethod
    def show_dry_run(self) -> None:
        """Report that this was a dry run."""

    @abstractmethod
    def ask_critical_confirmation(self, critical: int, breakdown: dict[str, int]) -> str:
        """Warn about critical deletions and ask for the confirmation phrase."""

    @abstractmethod
    def ask_final_confirmation(self) -> str:
        """Ask the final yes/no question."""

    @abstractmethod
    def show_cancelled(self, *, critical: bool) -> None:
        """Report that the user cancelled."""

    @abstractmethod
    def show_deleting(self) -> None:
        """Announce that deletion is starting."""

    @abstractmethod
    def show_deleted(self, result: DeleteResult) -> None:
        """Report one path as soon as its deletion was attempted."""

    @abstractmethod
    def show_deletion(self, tally: DeletionTally) -> None:
        """Show the final tally."""


class DeletionGate:
    """Guards deletion of search results behind privilege and confirmation checks.

    Args:
        options: Run options (dry-run, force, show-size).
        classifier: Classifier used for counts and critical breakdowns.
        ui: Presentation and prompt hooks.
        elevated: Whether the process runs as root/Administrator.
        operator: Deleter to use. A default FilesystemOperator if None.
    """

    def __init__(
        self,
        options: RunOptions,
        classifier: PathClassifier,
        ui: GateUI,
        *,
        elevated: bool,
        operator: FilesystemOperator | None = None,
    ) -> None:
        self._options = options
        self._classifier = classifier
        self._ui = ui
        self._elevated = elevated
        self._operator = operator or FilesystemOperator()

    def run(self, results: Sequence[SearchResult]) -> GateReport:
        """Take search results through the gate and delete what survives.

        Args:
            results: Classified search results, in search order.

        Returns:
            GateReport describing the terminal state.
        """
        options = self._options
        ui = self._ui

        counts = self._classifier.count(results)
        report = GateReport(outcome=Outcome.COMPLETED, counts=counts, candidates=list(results))

        if not report.candidates:
            ui.show_no_matches(options)
            return self._finish(report, Outcome.NO_MATCHES)

        ui.show_summary(counts)

        if counts.critical and not self._elevated:
            report.candidates = filter_out_critical(report.candidates)
            report.blocked = [r for r in results if r.is_critical]
            ui.show_privilege_blocked(len(report.blocked), len(report.candidates))
            logger.info("Blocked %d critical path(s) without elevation", len(report.blocked))
            if not report.candidates:
                return self._finish(report, Outcome.NOTHING_DELETABLE)

        if options.show_size:
            ui.show_total_size(total_size(report.candidates))

        if not options.force:
            patterns = parse_exclusions(ui.ask_exclusions())
            if patterns:
                report.candidates, report.excluded = partition(report.candidates, patterns)
                ui.show_excluded(report.excluded)
                logger.info(
                    "Exclusions %s removed %d path(s)", list(patterns), len(report.excluded)
                )

        if not report.candidates:
            ui.show_all_excluded()
            return self._finish(report, Outcome.ALL_EXCLUDED)

        ui.show_preview(report.candidates, PREVIEW_LIMIT)

        if options.show_size and report.excluded:
            ui.show_total_size(total_size(report.candidates))

        if options.dry_run:
            ui.show_dry_run()
            return self._finish(report, Outcome.DRY_RUN)

        if not options.force and not self._confirm(report.candidates):
            return self._finish(report, Outcome.CANCELLED)

        ui.show_deleting()
        report.tally = self._operator.delete(report.candidates, on_result=ui.show_deleted)
        ui.show_deletion(report.tally)
        return self._finish(report, Outcome.COMPLETED)

    def _confirm(self, candidates: Sequence[SearchResult]) -> bool:
        critical = self._classifier.count(candidates).critical

        # Only reachable when elevated; unprivileged runs dropped these already
        if self._elevated and critical:
            breakdown = self._classifier.critical_breakdown(candidates)
            answer = self._ui.ask_critical_confirmation(critical, breakdown)
            if answer.strip() != CRITICAL_CONFIRMATION_PHRASE:
                self._ui.show_cancelled(critical=True)
                return False

        answer = self._ui.ask_final_confirmation()
        if answer.strip().lower() != "y":
            self._ui.show_cancelled(critical=False)
            return False
        return True

    @staticmethod
    def _finish(report: GateReport, outcome: Outcome) -> GateReport:
        report.outcome = outcome
        logger.info("Run finished: %s (%d candidate(s))", outcome.value, len(report.candidates))
        return report

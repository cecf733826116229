"""Unit tests for the deletion gate.

Drives DeletionGate with a scripted UI and checks which paths reach the
deleter for every terminal outcome.
"""

from collections.abc import Sequence
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from delf.core.gate import (
    CRITICAL_CONFIRMATION_PHRASE,
    PREVIEW_LIMIT,
    DeletionGate,
    ExitCode,
    GateUI,
    Outcome,
)
from delf.core.options import RunOptions
from delf.filesystem.operator import DeleteResult, DeletionTally, FilesystemOperator
from delf.safety.classifier import PathClassifier
from delf.safety.models import Category, CategoryCounts, SearchResult
from delf.safety.paths import SafetyPathList


class ScriptedUI(GateUI):
    """GateUI that replays canned answers and records what was shown."""

    def __init__(
        self,
        *,
        exclusions: str = "",
        critical_answer: str = "",
        final_answer: str = "y",
    ) -> None:
        self.exclusions = exclusions
        self.critical_answer = critical_answer
        self.final_answer = final_answer
        self.calls: list[str] = []
        self.summary: CategoryCounts | None = None
        self.blocked: tuple[int, int] | None = None
        self.sizes: list[int] = []
        self.previewed: list[SearchResult] = []
        self.breakdown: dict[str, int] | None = None
        self.cancelled_critical: bool | None = None

    def show_summary(self, counts: CategoryCounts) -> None:
        self.calls.append("summary")
        self.summary = counts

    def show_no_matches(self, options: RunOptions) -> None:
        self.calls.append("no_matches")

    def show_privilege_blocked(self, blocked: int, remaining: int) -> None:
        self.calls.append("blocked")
        self.blocked = (blocked, remaining)

    def show_total_size(self, size_bytes: int) -> None:
        self.calls.append("size")
        self.sizes.append(size_bytes)

    def ask_exclusions(self) -> str:
        self.calls.append("ask_exclusions")
        return self.exclusions

    def show_excluded(self, excluded: Sequence[SearchResult]) -> None:
        self.calls.append("excluded")

    def show_all_excluded(self) -> None:
        self.calls.append("all_excluded")

    def show_preview(self, candidates: Sequence[SearchResult], limit: int) -> None:
        self.calls.append("preview")
        self.previewed = list(candidates[:limit])

    def show_dry_run(self) -> None:
        self.calls.append("dry_run")

    def ask_critical_confirmation(self, critical: int, breakdown: dict[str, int]) -> str:
        self.calls.append("ask_critical")
        self.breakdown = breakdown
        return self.critical_answer

    def ask_final_confirmation(self) -> str:
        self.calls.append("ask_final")
        return self.final_answer

    def show_cancelled(self, *, critical: bool) -> None:
        self.calls.append("cancelled")
        self.cancelled_critical = critical

    def show_deleting(self) -> None:
        self.calls.append("deleting")

    def show_deleted(self, result: DeleteResult) -> None:
        self.calls.append(f"deleted:{result.path}")

    def show_deletion(self, tally: DeletionTally) -> None:
        self.calls.append("deletion")


def _classifier() -> PathClassifier:
    paths = SafetyPathList(critical=("/etc", "/usr/bin"), warning=("/opt",), auto_exclude=())
    return PathClassifier(paths, case_insensitive=False)


def _result(path: str, is_dir: bool = False) -> SearchResult:
    return SearchResult(path=path, category=_classifier().classify(path), is_dir=is_dir)


def _operator() -> MagicMock:
    """Mock operator that reports every path as deleted."""
    operator = MagicMock(spec=FilesystemOperator)

    def _delete(results, on_result=None) -> DeletionTally:
        tally = DeletionTally()
        for r in results:
            tally.results.append(DeleteResult(path=r.path, success=True))
            if on_result is not None:
                on_result(tally.results[-1])
        return tally

    operator.delete.side_effect = _delete
    return operator


def _deleted_paths(operator: MagicMock) -> list[str]:
    operator.delete.assert_called_once()
    return [r.path for r in operator.delete.call_args.args[0]]


def _gate(
    ui: ScriptedUI,
    operator: MagicMock,
    *,
    elevated: bool = False,
    **options: object,
) -> DeletionGate:
    return DeletionGate(
        RunOptions(**options),  # type: ignore[arg-type]
        _classifier(),
        ui,
        elevated=elevated,
        operator=operator,
    )


class TestOutcomeExitCodes:
    """Tests for Outcome to exit code mapping."""

    @pytest.mark.parametrize(
        ("outcome", "code"),
        [
            (Outcome.COMPLETED, ExitCode.SUCCESS),
            (Outcome.DRY_RUN, ExitCode.SUCCESS),
            (Outcome.ALL_EXCLUDED, ExitCode.SUCCESS),
            (Outcome.NO_MATCHES, ExitCode.FAILURE),
            (Outcome.NOTHING_DELETABLE, ExitCode.FAILURE),
            (Outcome.CANCELLED, ExitCode.CANCELLED),
        ],
    )
    def test_exit_code(self, outcome: Outcome, code: ExitCode) -> None:
        """Each outcome maps to its documented exit code."""
        assert outcome.exit_code == code

    def test_elevation_required_code(self) -> None:
        """Refusing to search '/' uses exit code 3."""
        assert int(ExitCode.ELEVATION_REQUIRED) == 3


class TestGateBasics:
    """Tests for the happy path and early exits."""

    def test_no_matches(self) -> None:
        """An empty result list ends the run with exit code 1."""
        ui = ScriptedUI()
        operator = _operator()

        report = _gate(ui, operator).run([])

        assert report.outcome == Outcome.NO_MATCHES
        assert report.exit_code == ExitCode.FAILURE
        assert ui.calls == ["no_matches"]
        operator.delete.assert_not_called()

    def test_confirmed_deletion(self) -> None:
        """Answering 'y' deletes every candidate in order."""
        ui = ScriptedUI(final_answer="y")
        operator = _operator()
        results = [_result("/home/u/a.log"), _result("/home/u/sub/c.log")]

        report = _gate(ui, operator).run(results)

        assert report.outcome == Outcome.COMPLETED
        assert report.exit_code == ExitCode.SUCCESS
        assert _deleted_paths(operator) == ["/home/u/a.log", "/home/u/sub/c.log"]
        assert ui.calls == [
            "summary",
            "ask_exclusions",
            "preview",
            "ask_final",
            "deleting",
            "deleted:/home/u/a.log",
            "deleted:/home/u/sub/c.log",
            "deletion",
        ]

    @pytest.mark.parametrize("answer", ["Y", " y ", "y\n"])
    def test_final_answer_normalized(self, answer: str) -> None:
        """The final answer is trimmed and case-folded."""
        ui = ScriptedUI(final_answer=answer)
        operator = _operator()

        report = _gate(ui, operator).run([_result("/home/u/a.log")])

        assert report.outcome == Outcome.COMPLETED

    @pytest.mark.parametrize("answer", ["", "n", "yes", "N", "no"])
    def test_anything_but_y_cancels(self, answer: str) -> None:
        """Only 'y' confirms; everything else cancels with exit code 2."""
        ui = ScriptedUI(final_answer=answer)
        operator = _operator()

        report = _gate(ui, operator).run([_result("/home/u/a.log")])

        assert report.outcome == Outcome.CANCELLED
        assert report.exit_code == ExitCode.CANCELLED
        assert ui.cancelled_critical is False
        operator.delete.assert_not_called()

    def test_summary_counts(self) -> None:
        """Summary reports counts per tier of the unfiltered results."""
        ui = ScriptedUI()
        results = [
            _result("/etc/hosts"),
            _result("/opt/app/x"),
            _result("/home/u/a"),
            _result("/home/u/b"),
        ]

        report = _gate(ui, _operator(), dry_run=True).run(results)

        assert ui.summary == CategoryCounts(critical=1, warning=1, safe=2)
        assert report.counts.total == 4

    def test_preview_limited(self) -> None:
        """The preview shows at most PREVIEW_LIMIT candidates."""
        ui = ScriptedUI()
        results = [_result(f"/home/u/f{i:02d}.log") for i in range(PREVIEW_LIMIT + 5)]

        _gate(ui, _operator(), dry_run=True).run(results)

        assert ui.previewed == results[:PREVIEW_LIMIT]


class TestGateDryRunAndForce:
    """Tests for dry-run and force modes."""

    def test_dry_run_force_deletes_nothing(self) -> None:
        """Dry run with force prompts for nothing and deletes nothing."""
        ui = ScriptedUI()
        operator = _operator()
        results = [_result("/home/u/a.log"), _result("/home/u/sub/c.log")]

        report = _gate(ui, operator, dry_run=True, force=True).run(results)

        assert report.outcome == Outcome.DRY_RUN
        assert report.exit_code == ExitCode.SUCCESS
        assert "ask_exclusions" not in ui.calls
        assert "ask_final" not in ui.calls
        assert ui.calls[-1] == "dry_run"
        operator.delete.assert_not_called()

    def test_dry_run_still_asks_exclusions(self) -> None:
        """Dry run without force applies exclusions before previewing."""
        ui = ScriptedUI(exclusions="c.log")
        results = [_result("/home/u/a.log"), _result("/home/u/sub/c.log")]

        report = _gate(ui, _operator(), dry_run=True).run(results)

        assert report.outcome == Outcome.DRY_RUN
        assert [r.path for r in report.candidates] == ["/home/u/a.log"]
        assert "ask_final" not in ui.calls

    def test_dry_run_is_repeatable(self) -> None:
        """Running the same dry run twice yields the same candidates."""
        results = [_result("/home/u/a.log"), _result("/etc/x.log")]

        first = _gate(ScriptedUI(), _operator(), dry_run=True, force=True).run(results)
        second = _gate(ScriptedUI(), _operator(), dry_run=True, force=True).run(results)

        assert first.candidates == second.candidates
        assert first.outcome == second.outcome == Outcome.DRY_RUN

    def test_force_skips_prompts(self) -> None:
        """Force deletes without exclusion or confirmation prompts."""
        ui = ScriptedUI(final_answer="n")
        operator = _operator()

        report = _gate(ui, operator, force=True).run([_result("/home/u/a.log")])

        assert report.outcome == Outcome.COMPLETED
        assert "ask_exclusions" not in ui.calls
        assert "ask_final" not in ui.calls
        assert _deleted_paths(operator) == ["/home/u/a.log"]


class TestGateExclusions:
    """Tests for the exclusion step."""

    def test_exclusions_shrink_candidates(self) -> None:
        """Excluded results are never passed to the deleter."""
        ui = ScriptedUI(exclusions="*.txt, backup")
        operator = _operator()
        results = [
            _result("/d/backup/a.log"),
            _result("/d/b.log"),
            _result("/d/important.txt"),
        ]

        report = _gate(ui, operator).run(results)

        assert _deleted_paths(operator) == ["/d/b.log"]
        assert [r.path for r in report.excluded] == ["/d/backup/a.log", "/d/important.txt"]
        assert "excluded" in ui.calls

    def test_all_excluded(self) -> None:
        """Excluding everything ends successfully without deleting."""
        ui = ScriptedUI(exclusions="*.log")
        operator = _operator()

        report = _gate(ui, operator).run([_result("/d/a.log"), _result("/d/b.log")])

        assert report.outcome == Outcome.ALL_EXCLUDED
        assert report.exit_code == ExitCode.SUCCESS
        assert "preview" not in ui.calls
        operator.delete.assert_not_called()

    def test_blank_exclusions_keep_everything(self) -> None:
        """A blank exclusion line removes nothing."""
        ui = ScriptedUI(exclusions="  , ")
        operator = _operator()

        report = _gate(ui, operator).run([_result("/d/a.log")])

        assert report.excluded == []
        assert "excluded" not in ui.calls
        assert _deleted_paths(operator) == ["/d/a.log"]


class TestGatePrivileges:
    """Tests for privilege filtering of critical results."""

    def test_unprivileged_critical_blocked(self) -> None:
        """Without elevation critical results are dropped before deletion."""
        ui = ScriptedUI(final_answer="y")
        operator = _operator()
        results = [
            _result("/etc/myapp/x.conf"),
            _result("/home/u/myapp/y.conf"),
        ]

        report = _gate(ui, operator, force=True).run(results)

        assert report.outcome == Outcome.COMPLETED
        assert ui.blocked == (1, 1)
        assert [r.path for r in report.blocked] == ["/etc/myapp/x.conf"]
        assert _deleted_paths(operator) == ["/home/u/myapp/y.conf"]

    def test_unprivileged_all_critical(self) -> None:
        """Nothing deletable when every result is critical."""
        ui = ScriptedUI()
        operator = _operator()

        report = _gate(ui, operator).run([_result("/etc/a"), _result("/usr/bin/b")])

        assert report.outcome == Outcome.NOTHING_DELETABLE
        assert report.exit_code == ExitCode.FAILURE
        assert ui.blocked == (2, 0)
        assert "ask_exclusions" not in ui.calls
        operator.delete.assert_not_called()

    def test_unprivileged_never_asks_critical_phrase(self) -> None:
        """The critical phrase is never requested without elevation."""
        ui = ScriptedUI(final_answer="y")

        _gate(ui, _operator()).run([_result("/etc/a"), _result("/home/u/b")])

        assert "ask_critical" not in ui.calls

    def test_elevated_critical_requires_phrase(self) -> None:
        """Elevated runs delete critical paths after the exact phrase."""
        ui = ScriptedUI(critical_answer=CRITICAL_CONFIRMATION_PHRASE, final_answer="y")
        operator = _operator()
        results = [_result("/etc/a"), _result("/etc/b"), _result("/usr/bin/c")]

        report = _gate(ui, operator, elevated=True).run(results)

        assert report.outcome == Outcome.COMPLETED
        assert ui.breakdown == {"/etc": 2, "/usr/bin": 1}
        assert ui.calls.index("ask_critical") < ui.calls.index("ask_final")
        assert _deleted_paths(operator) == ["/etc/a", "/etc/b", "/usr/bin/c"]

    def test_elevated_phrase_tolerates_surrounding_whitespace(self) -> None:
        """Leading and trailing whitespace around the phrase is ignored."""
        ui = ScriptedUI(critical_answer=f"  {CRITICAL_CONFIRMATION_PHRASE}\n")

        report = _gate(ui, _operator(), elevated=True).run([_result("/etc/a")])

        assert report.outcome == Outcome.COMPLETED

    @pytest.mark.parametrize(
        "answer",
        ["", "y", "yes", "yes delete system files", "YES DELETE SYSTEM FILE"],
    )
    def test_elevated_wrong_phrase_cancels(self, answer: str) -> None:
        """Anything but the exact phrase cancels before the final prompt."""
        ui = ScriptedUI(critical_answer=answer, final_answer="y")
        operator = _operator()

        report = _gate(ui, operator, elevated=True).run([_result("/etc/a")])

        assert report.outcome == Outcome.CANCELLED
        assert report.exit_code == ExitCode.CANCELLED
        assert ui.cancelled_critical is True
        assert "ask_final" not in ui.calls
        operator.delete.assert_not_called()

    def test_elevated_phrase_skipped_when_exclusions_remove_critical(self) -> None:
        """No critical phrase is needed once exclusions drop all critical paths."""
        ui = ScriptedUI(exclusions="/etc", final_answer="y")
        operator = _operator()

        _gate(ui, operator, elevated=True).run([_result("/etc/a"), _result("/home/u/b")])

        assert "ask_critical" not in ui.calls
        assert _deleted_paths(operator) == ["/home/u/b"]

    def test_elevated_force_skips_phrase(self) -> None:
        """Force skips the critical phrase on elevated runs."""
        ui = ScriptedUI()
        operator = _operator()

        report = _gate(ui, operator, elevated=True, force=True).run([_result("/etc/a")])

        assert report.outcome == Outcome.COMPLETED
        assert "ask_critical" not in ui.calls
        assert _deleted_paths(operator) == ["/etc/a"]

    def test_candidates_only_shrink(self) -> None:
        """Every candidate at the end was one of the search results."""
        ui = ScriptedUI(exclusions="b", final_answer="y")
        operator = _operator()
        results = [_result("/etc/a"), _result("/home/u/b"), _result("/home/u/c")]

        report = _gate(ui, operator).run(results)

        assert set(report.candidates) <= set(results)
        assert all(not r.is_critical for r in report.candidates)
        assert [r.path for r in report.candidates] == ["/home/u/c"]


class TestGateSizes:
    """Tests for size reporting."""

    def test_size_reported_twice_after_exclusions(self, tmp_path: Path) -> None:
        """With show_size the total is shown before and after exclusions."""
        keep = tmp_path / "keep.log"
        drop = tmp_path / "drop.log"
        keep.write_bytes(b"x" * 10)
        drop.write_bytes(b"x" * 30)
        ui = ScriptedUI(exclusions="drop")
        results = [_result(str(keep)), _result(str(drop))]

        _gate(ui, _operator(), dry_run=True, show_size=True).run(results)

        assert ui.sizes == [40, 10]

    def test_size_reported_once_without_exclusions(self, tmp_path: Path) -> None:
        """Without exclusions the total is shown once."""
        target = tmp_path / "a.log"
        target.write_bytes(b"x" * 7)
        ui = ScriptedUI()

        _gate(ui, _operator(), dry_run=True, show_size=True).run([_result(str(target))])

        assert ui.sizes == [7]


class TestGateDeletionFailures:
    """Tests for partial deletion failures."""

    def test_partial_failure_still_completes(self, tmp_path: Path) -> None:
        """Per-path failures are reported but the run still exits 0."""
        ok = tmp_path / "ok.log"
        ok.write_text("x")
        gone = tmp_path / "gone.log"
        operator = MagicMock(spec=FilesystemOperator)
        operator.delete.return_value = DeletionTally(
            results=[
                DeleteResult(path=str(ok), success=True),
                DeleteResult(path="/home/u/locked.log", success=False, error="Permission denied"),
            ],
            skipped=[str(gone)],
        )
        ui = ScriptedUI(final_answer="y")

        report = _gate(ui, operator).run(
            [_result(str(ok)), _result("/home/u/locked.log"), _result(str(gone))]
        )

        assert report.outcome == Outcome.COMPLETED
        assert report.exit_code == ExitCode.SUCCESS
        assert report.tally is not None
        assert report.tally.deleted == 1
        assert report.tally.failed == 1

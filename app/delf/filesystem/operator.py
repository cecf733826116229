"""Filesystem deletion operator.

Removes matched paths one at a time. Each deletion is independent:
a failure is recorded against its path and the batch moves on, and
paths that disappeared since the search are skipped silently.
"""

import logging
import os
import shutil
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from delf.safety.models import SearchResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeleteResult:
    """Result of a single deletion attempt.

    Attributes:
        path: Path that was operated on.
        success: Whether the path was removed.
        error: Error message if the deletion failed, None otherwise.
    """

    path: str
    success: bool
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the deletion failed."""
        return not self.success


@dataclass(slots=True)
class DeletionTally:
    """Outcome of a deletion batch.

    Attributes:
        results: One result per path that still existed when its turn came.
        skipped: Paths that no longer existed and were not attempted.
    """

    results: list[DeleteResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def deleted(self) -> int:
        """Number of paths removed."""
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        """Number of paths that could not be removed."""
        return sum(1 for r in self.results if r.failed)

    @property
    def attempted(self) -> int:
        """Number of paths a deletion was attempted for."""
        return len(self.results)


class FilesystemOperator:
    """Deletes files and directory trees.

    Directories are removed recursively with shutil.rmtree. Files and
    symbolic links (including links to directories and dangling links)
    are unlinked, so a link's target is never touched.
    """

    def delete(
        self,
        results: Iterable[SearchResult],
        on_result: Callable[[DeleteResult], None] | None = None,
    ) -> DeletionTally:
        """Delete every result's path and tally the outcome.

        Existence is re-checked right before each deletion. Errors
        never propagate out of the loop.

        Args:
            results: Results to delete, in order.
            on_result: Called with each attempt's result as soon as it is known.

        Returns:
            DeletionTally with per-path results and skipped paths.
        """
        tally = DeletionTally()

        for result in results:
            if not os.path.lexists(result.path):
                logger.debug("Already gone, skipping: %s", result.path)
                tally.skipped.append(result.path)
                continue

            outcome = self.delete_path(result.path)
            tally.results.append(outcome)
            if on_result is not None:
                on_result(outcome)

        logger.info(
            "Deletion finished: %d deleted, %d failed, %d skipped",
            tally.deleted,
            tally.failed,
            len(tally.skipped),
        )
        return tally

    def delete_path(self, path: str) -> DeleteResult:
        """Delete a single path.

        Args:
            path: File, symlink or directory to remove.

        Returns:
            DeleteResult indicating success or failure.
        """
        target = Path(path)
        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()
        except OSError as e:
            reason = e.strerror or str(e)
            logger.info("Failed to delete %s: %s", path, reason)
            return DeleteResult(path=path, success=False, error=reason)

        logger.info("Deleted %s", path)
        return DeleteResult(path=path, success=True)

"""Delegated search through the fd command-line tool.

fd is a fast parallel replacement for find. Debian and Ubuntu ship it
as ``fdfind``, so both names are looked up. fd prints one matched path per
line; each line is classified and yielded as soon as it arrives.
"""

import logging
import os
from collections.abc import Iterator

from delf.core.options import RunOptions, TypeFilter
from delf.safety.classifier import PathClassifier
from delf.safety.models import SearchResult
from delf.search.base import Searcher
from delf.utils.shell import StreamError, find_command, stream_lines

logger = logging.getLogger(__name__)

FD_COMMANDS: tuple[str, ...] = ("fd", "fdfind")


class FdSearcher(Searcher):
    """Runs fd as a subprocess and streams its output.

    If fd cannot be started or fails before printing any match, the
    search is handed to the fallback searcher instead. A failure after
    some matches were printed ends the stream with what was found.

    Args:
        options: Run options to translate into fd flags.
        classifier: Classifier used to tag each line.
        fallback: Searcher to use when fd fails. None disables fallback.
        command: fd executable name. Looked up on PATH when None.
    """

    def __init__(
        self,
        options: RunOptions,
        classifier: PathClassifier,
        *,
        fallback: Searcher | None = None,
        command: str | None = None,
    ) -> None:
        super().__init__(options, classifier)
        self._fallback = fallback
        self._command = command if command is not None else find_command(*FD_COMMANDS)

    @property
    def method(self) -> str:
        return "fd"

    def is_available(self) -> bool:
        """Check if an fd executable was found on PATH."""
        return self._command is not None

    def build_args(self) -> list[str]:
        """Translate the run options into an fd command line.

        Returns:
            Full argument list, starting with the fd executable.

        Raises:
            RuntimeError: If fd is not available.
        """
        if self._command is None:
            msg = "fd is not installed"
            raise RuntimeError(msg)

        options = self._options
        args = [self._command, "--color", "never", "--hidden", "--no-ignore"]

        if options.type_filter == TypeFilter.FILE:
            args += ["-t", "f"]
        elif options.type_filter == TypeFilter.DIRECTORY:
            args += ["-t", "d"]

        args.append("-i" if options.ignore_case else "-s")

        if options.older_than_days:
            args += ["--changed-before", f"{options.older_than_days}days"]

        min_size = options.min_size_bytes
        if min_size is not None:
            # fd's "+" is inclusive; delf wants strictly larger
            args += ["-S", f"+{min_size + 1}b"]

        if options.auto_exclude:
            for fragment in self._classifier.paths.auto_exclude:
                args += ["-E", f"*{fragment}*"]

        args += ["-g", options.pattern or "*", self.root]
        return args

    def search(self) -> Iterator[SearchResult]:
        args = self.build_args()
        logger.debug("Running %s", " ".join(args))

        yielded = 0
        try:
            for line in stream_lines(args):
                if not line:
                    continue
                yielded += 1
                yield self._to_result(line)
        except (StreamError, OSError) as e:
            if yielded:
                logger.warning("fd failed after %d matches: %s", yielded, e)
                return
            if self._fallback is None:
                raise
            logger.debug("fd failed (%s), falling back to %s", e, self._fallback.method)
            yield from self._fallback.search()

    def _to_result(self, line: str) -> SearchResult:
        path = line
        # Newer fd releases print directories with a trailing separator
        if len(path) > 1 and path.endswith(("/", os.sep)):
            path = path.rstrip("/" + os.sep) or path
        return self._result(path, is_dir=os.path.isdir(path))

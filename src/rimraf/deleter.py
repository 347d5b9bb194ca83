"""Ordered deletion of matched entries with bounded retries.

Entries are removed deepest first. Each removal is retried a fixed number
of times with a fixed delay, clearing the read-only bit before every
attempt, which rides out files briefly held open by scanners or indexers.
Entries that survive every attempt are reported, never raised.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from rimraf.scanner import Entry, deletion_order

logger = logging.getLogger(__name__)

# Failed rmtree calls that are safe to repeat with just the path.
_REPEATABLE = (os.unlink, os.remove, os.rmdir)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Fixed-delay retry budget for a single removal.

    Attributes:
        attempts: Maximum number of removal attempts.
        delay: Seconds to wait between attempts.
    """

    attempts: int = 25
    delay: float = 0.25


@dataclass(frozen=True, slots=True)
class DeleteOptions:
    """Options controlling the deletion engine.

    Attributes:
        dry_run: Simulate removals without touching the filesystem.
        skip_root: Never remove the root directory.
        retry: Retry budget applied to every removal.
        dry_run_delay: Seconds slept per simulated removal.
    """

    dry_run: bool = False
    skip_root: bool = False
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    dry_run_delay: float = 0.001


@dataclass(frozen=True, slots=True)
class DeletionSummary:
    """Result of one :meth:`DeletionEngine.run` call.

    Attributes:
        total: Number of entries processed, whether or not they went away.
        failed: Entries still present after the retry budget ran out.
        root_removed: Whether the root was removed (or would be, in a dry run).
        dry_run: Whether the run was simulated.
        elapsed: Seconds spent processing.
    """

    total: int
    failed: tuple[Path, ...] = ()
    root_removed: bool = False
    dry_run: bool = False
    elapsed: float = 0.0


class ProgressSink(Protocol):
    """Protocol for per-item progress notifications.

    Purely observational: implementations never affect the outcome.
    """

    def item_started(self, index: int, total: int, path: Path) -> None: ...

    def item_finished(self, index: int, total: int, path: Path) -> None: ...

    def root_started(self, path: Path) -> None: ...

    def root_finished(self, path: Path) -> None: ...


class _NullProgress:
    """Default sink that ignores every notification."""

    def item_started(self, index: int, total: int, path: Path) -> None:
        pass

    def item_finished(self, index: int, total: int, path: Path) -> None:
        pass

    def root_started(self, path: Path) -> None:
        pass

    def root_finished(self, path: Path) -> None:
        pass


def _exists(path: Path) -> bool:
    """Return whether *path* exists, counting dangling symlinks."""
    return os.path.lexists(path)


def _is_real_dir(path: Path) -> bool:
    try:
        return stat.S_ISDIR(os.lstat(path).st_mode)
    except OSError:
        return False


def _is_empty_dir(path: Path) -> bool:
    if not _is_real_dir(path):
        return False
    try:
        with os.scandir(path) as it:
            return next(it, None) is None
    except OSError:
        logger.debug("Cannot list: %s", path)
        return False


def clear_readonly(path: Path) -> None:
    """Give the owner the permissions needed to remove *path* or its contents.

    Files get the write bit. Directories get read, write and search so
    that their children can be listed and unlinked. Symlinks are left
    alone because ``chmod`` would follow them.
    """
    try:
        st = os.lstat(path)
        if stat.S_ISLNK(st.st_mode):
            return
        wanted = stat.S_IRWXU if stat.S_ISDIR(st.st_mode) else stat.S_IWRITE
        if st.st_mode & wanted == wanted:
            return
        os.chmod(path, stat.S_IMODE(st.st_mode) | wanted)
    except OSError as exc:
        logger.debug("Cannot unlock %s: %s", path, exc)


def _on_rmtree_error(
    func: Callable[..., object], path: str, exc: BaseException
) -> None:
    """Unlock a failing child, then repeat the removal call that failed.

    Only unlink and rmdir calls can be repeated from here. Any other failed
    call, such as opening or listing a locked directory, is re-raised once
    the permissions are restored, and the retry loop starts over.
    """
    if not isinstance(exc, PermissionError):
        raise exc
    clear_readonly(Path(path).parent)
    clear_readonly(Path(path))
    if func not in _REPEATABLE:
        raise exc
    func(path)


def _remove_dir(path: Path) -> None:
    shutil.rmtree(path, onexc=_on_rmtree_error)


def _remove_file(path: Path) -> None:
    path.unlink()


def _remove_empty_dir(path: Path) -> None:
    path.rmdir()


class DeletionEngine:
    """Remove matched entries deepest first, then the root when empty.

    Attributes:
        _options: Engine options.
        _progress: Progress notification sink.
        _sleep: Blocking sleep used between attempts and in dry runs.
    """

    def __init__(
        self,
        options: DeleteOptions | None = None,
        progress: ProgressSink | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._options = options or DeleteOptions()
        self._progress = progress or _NullProgress()
        self._sleep = sleep

    def run(self, root: Path, entries: Sequence[Entry]) -> DeletionSummary:
        """Process *entries* and then decide on *root*.

        The root is left untouched when *entries* is empty.

        Args:
            root: Resolved root directory the entries were matched under.
            entries: Matched entries. They are re-sorted deepest first.

        Returns:
            DeletionSummary: Counts, stragglers and the root outcome.
        """
        started = time.perf_counter()
        ordered = deletion_order(entries)
        total = len(ordered)
        failed: list[Path] = []

        for index, entry in enumerate(ordered, start=1):
            self._progress.item_started(index, total, entry.path)
            if not self._remove_entry(entry.path):
                failed.append(entry.path)
            self._progress.item_finished(index, total, entry.path)

        root_removed = False
        if ordered and self._should_remove_root(root):
            self._progress.root_started(root)
            root_removed = self._remove_root(root)
            self._progress.root_finished(root)

        return DeletionSummary(
            total=total,
            failed=tuple(failed),
            root_removed=root_removed,
            dry_run=self._options.dry_run,
            elapsed=time.perf_counter() - started,
        )

    def _should_remove_root(self, root: Path) -> bool:
        if self._options.skip_root:
            return False
        if self._options.dry_run:
            return True
        return _is_empty_dir(root)

    def _remove_entry(self, path: Path) -> bool:
        """Remove one entry, returning whether it is gone."""
        if self._options.dry_run:
            logger.info("Dry-run: would delete %s", path)
            self._sleep(self._options.dry_run_delay)
            return True

        remove = _remove_dir if _is_real_dir(path) else _remove_file

        def attempt() -> bool:
            if _exists(path):
                clear_readonly(path)
                remove(path)
            return not _exists(path)

        return self._retry(attempt, path)

    def _remove_root(self, root: Path) -> bool:
        """Remove the empty root directory, returning whether it is gone."""
        if self._options.dry_run:
            logger.info("Dry-run: would delete empty root %s", root)
            self._sleep(self._options.dry_run_delay)
            return True

        def attempt() -> bool:
            if _is_empty_dir(root):
                clear_readonly(root)
                _remove_empty_dir(root)
            return not _is_empty_dir(root)

        self._retry(attempt, root)
        removed = not _exists(root)
        if removed:
            logger.info("Removed empty root %s", root)
        return removed

    def _retry(self, attempt: Callable[[], bool], path: Path) -> bool:
        """Run *attempt* until it reports success or the budget runs out.

        An attempt fails when it returns ``False`` or raises ``OSError``.
        """
        policy = self._options.retry
        for number in range(1, policy.attempts + 1):
            try:
                if attempt():
                    return True
                logger.debug(
                    "Still present after attempt %d/%d: %s",
                    number,
                    policy.attempts,
                    path,
                )
            except OSError as exc:
                logger.debug(
                    "Attempt %d/%d failed for %s: %s",
                    number,
                    policy.attempts,
                    path,
                    exc,
                )
            if number < policy.attempts:
                self._sleep(policy.delay)

        logger.warning("Giving up on %s after %d attempts", path, policy.attempts)
        return False

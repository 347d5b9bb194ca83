"""Rich progress bar implementing the deletion engine's progress sink."""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from rimraf.formatter.paths import shrink_path

# Room left on the line for the bar, counter and elapsed time.
_RESERVED_WIDTH = 44
_MIN_PATH_WIDTH = 16


class RichProgress:
    """Live per-item progress display on stderr.

    Use as a context manager around :meth:`DeletionEngine.run`.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
        )
        self._items: TaskID | None = None
        self._root: TaskID | None = None

    def __enter__(self) -> RichProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def _label(self, path: Path) -> str:
        width = max(self._console.width - _RESERVED_WIDTH, _MIN_PATH_WIDTH)
        return escape(shrink_path(path, width))

    def item_started(self, index: int, total: int, path: Path) -> None:
        description = f"Remove item {index} of {total}: {self._label(path)}"
        if self._items is None:
            self._items = self._progress.add_task(description, total=total)
        else:
            self._progress.update(self._items, description=description)

    def item_finished(self, index: int, total: int, path: Path) -> None:
        if self._items is None:
            return
        self._progress.update(
            self._items,
            advance=1,
            description=f"Removed item {index} of {total}: {self._label(path)}",
        )

    def root_started(self, path: Path) -> None:
        self._root = self._progress.add_task(
            f"Remove empty root path: {self._label(path)}", total=1
        )

    def root_finished(self, path: Path) -> None:
        if self._root is None:
            return
        self._progress.update(
            self._root,
            advance=1,
            description=f"Removed empty root path: {self._label(path)}",
        )

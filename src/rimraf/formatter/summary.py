"""End-of-run summary with humanized durations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from rimraf.deleter import DeletionSummary

# (unit name, length in milliseconds), largest first
_UNITS: Final[list[tuple[str, int]]] = [
    ("day", 86_400_000),
    ("hour", 3_600_000),
    ("minute", 60_000),
    ("second", 1_000),
    ("millisecond", 1),
]

_LABEL_WIDTH: Final[int] = 20


@dataclass(frozen=True, slots=True)
class RunTimings:
    """Wall-clock timings of one run, in seconds.

    Attributes:
        total: Whole run, enumeration included.
        enumerate: Directory enumeration and matching.
    """

    total: float
    enumerate: float

    @property
    def process(self) -> float:
        return max(self.total - self.enumerate, 0.0)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def format_duration(seconds: float, precision: int = 2) -> str:
    """Return *seconds* as words using the largest non-zero units.

    Examples: ``1 second, 250 milliseconds`` or ``2 minutes, 5 seconds``.
    Anything below a millisecond reads ``0 milliseconds``.
    """
    remaining = int(round(seconds * 1000))
    words: list[str] = []
    for unit, size in _UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            words.append(_plural(count, unit))
        if len(words) == precision:
            break
    return ", ".join(words) if words else _plural(0, "millisecond")


def format_clock(seconds: float) -> str:
    """Return *seconds* as ``HH:MM:SS.mmm``."""
    millis = int(round(seconds * 1000))
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    secs, millis = divmod(millis, 1_000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{millis:03d}"


def _line(label: str, value: str) -> str:
    return f"{label + ':':<{_LABEL_WIDTH}}{value}"


def _timed(label: str, seconds: float) -> str:
    return _line(label, f"{format_duration(seconds)} ({format_clock(seconds)})")


def format_summary(summary: DeletionSummary, timings: RunTimings) -> str:
    """Render the run summary block.

    Layout::

        ====================================
        Summary
        ------------------------------------
        Total:              3 items
        ====================================
        Total Time elapsed: ...
        Get items:          ...
        Process items:      ...

    A ``Not removed`` line appears when entries survived their retries and
    a ``Mode`` line marks dry runs.

    Args:
        summary: Deletion engine result.
        timings: Run timings.

    Returns:
        str: Summary text (no trailing newline).
    """
    if summary.total <= 0:
        total_value = "No items found!"
    else:
        total_value = _plural(summary.total, "item")

    counts = [_line("Total", total_value)]
    if summary.failed:
        counts.append(_line("Not removed", _plural(len(summary.failed), "item")))
    if summary.dry_run:
        counts.append(_line("Mode", "try run, nothing was deleted"))

    times = [
        _timed("Total Time elapsed", timings.total),
        _timed("Get items", timings.enumerate),
        _timed("Process items", timings.process),
    ]

    width = max(len(line) for line in [*counts, times[0]])
    return "\n".join(
        [
            "=" * width,
            "Summary",
            "-" * width,
            *counts,
            "=" * width,
            *times,
        ]
    )

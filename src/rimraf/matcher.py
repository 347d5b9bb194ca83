"""Include/exclude matching over a fully enumerated directory tree."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from pathspec.patterns import GitWildMatchPattern

from rimraf import DirectoryNotFoundError, RimrafError
from rimraf.normalize import SEP, normalize_pattern
from rimraf.scanner import Entry, deletion_order, scan

logger = logging.getLogger(__name__)

_GLOB_SPECIALS = frozenset("\\*?[]")

# Trailing group git-wildmatch adds so that "foo" also matches "foo/bar".
_DESCENDANT_SUFFIX = re.compile(r"\(\?:\(\?P<\w+>/\)\.\*\)\?\$$")


@dataclass(frozen=True, slots=True)
class MatchOptions:
    """Options controlling pattern matching.

    Attributes:
        case_sensitive: Whether patterns match case-sensitively.
    """

    case_sensitive: bool = False


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of one :meth:`TreeMatcher.execute` call.

    Attributes:
        root: Resolved absolute root directory.
        entries: Selected entries in deletion order.
    """

    root: Path
    entries: tuple[Entry, ...]

    @property
    def paths(self) -> list[Path]:
        return [entry.path for entry in self.entries]


def _match_key(path: Path | str) -> str:
    """Return the ``/``-separated form of *path* used for matching."""
    text = path.as_posix() if isinstance(path, Path) else path
    return text.lstrip(SEP)


def escape_glob(text: str) -> str:
    """Escape glob metacharacters so *text* matches literally."""
    return "".join("\\" + char if char in _GLOB_SPECIALS else char for char in text)


def combine_with_root(root: Path, pattern: str) -> str:
    """Anchor *pattern* below *root*.

    The root is escaped so that characters such as ``[`` in directory
    names are literal. Leading and trailing separators of the pattern are
    dropped, which keeps every combined pattern inside the root.
    """
    parts = [escape_glob(_match_key(root)), pattern.strip(SEP)]
    return SEP + SEP.join(part for part in parts if part)


class CompiledPatterns:
    """A set of root-anchored glob patterns compiled once for reuse."""

    def __init__(
        self, root: Path, patterns: Iterable[str], case_sensitive: bool
    ) -> None:
        flags = 0 if case_sensitive else re.IGNORECASE
        self._regexes: list[re.Pattern[str]] = []
        for pattern in patterns:
            if not pattern.strip(SEP):
                logger.debug("Skipping empty pattern %r", pattern)
                continue
            combined = combine_with_root(root, pattern)
            try:
                regex, include = GitWildMatchPattern.pattern_to_regex(combined)
            except ValueError as exc:
                raise RimrafError(f"Invalid pattern '{pattern}': {exc}") from exc
            if regex is None or include is None:
                continue
            # A pattern selects the entries it names, not their descendants.
            regex = _DESCENDANT_SUFFIX.sub("$", regex)
            logger.debug("Compiled %r as %s", combined, regex)
            self._regexes.append(re.compile(regex, flags))

    def __bool__(self) -> bool:
        return bool(self._regexes)

    def matches(self, path: Path) -> bool:
        """Return whether any pattern matches *path*."""
        key = _match_key(path)
        return any(regex.match(key) for regex in self._regexes)


class TreeMatcher:
    """Select entries below a root by include and exclude glob patterns.

    Patterns are relative to the root passed to :meth:`execute` and support
    ``*``, ``**``, ``?`` and character classes.
    """

    def __init__(self, options: MatchOptions | None = None) -> None:
        self._options = options or MatchOptions()
        self._includes: list[str] = []
        self._excludes: list[str] = []
        self.root: Path | None = None

    @property
    def include_patterns(self) -> tuple[str, ...]:
        return tuple(self._includes)

    @property
    def exclude_patterns(self) -> tuple[str, ...]:
        return tuple(self._excludes)

    def add_include(self, pattern: str) -> TreeMatcher:
        self._includes.append(normalize_pattern(pattern))
        return self

    def add_exclude(self, pattern: str) -> TreeMatcher:
        self._excludes.append(normalize_pattern(pattern))
        return self

    def add_includes(self, patterns: Iterable[str]) -> TreeMatcher:
        for pattern in patterns:
            self.add_include(pattern)
        return self

    def add_excludes(self, patterns: Iterable[str]) -> TreeMatcher:
        for pattern in patterns:
            self.add_exclude(pattern)
        return self

    def execute(self, root: Path | str) -> MatchResult:
        """Enumerate *root* once and return the selected entries.

        An entry is selected when it matches at least one include pattern
        and is neither an excluded entry, a descendant of one, nor an
        ancestor of one. Ancestors stay because removing them would take
        the excluded entry with them.

        Args:
            root: Directory to operate on.

        Returns:
            MatchResult: Resolved root and selected entries, deepest first.

        Raises:
            DirectoryNotFoundError: If *root* is not an existing directory.
        """
        resolved = Path(root).resolve()
        if not resolved.is_dir():
            raise DirectoryNotFoundError(f"Directory does not exist: '{resolved}'")
        self.root = resolved

        entries = scan(resolved)

        case_sensitive = self._options.case_sensitive
        includes = CompiledPatterns(resolved, self._includes, case_sensitive)
        excludes = CompiledPatterns(resolved, self._excludes, case_sensitive)

        candidates = [entry for entry in entries if includes.matches(entry.path)]

        excluded: set[Path] = set()
        if excludes:
            excluded = {entry.path for entry in entries if excludes.matches(entry.path)}

        protected: set[Path] = set()
        for path in excluded:
            for parent in path.parents:
                if parent == resolved:
                    break
                protected.add(parent)

        selected = [
            entry
            for entry in candidates
            if entry.path not in excluded
            and entry.path not in protected
            and not any(parent in excluded for parent in entry.path.parents)
        ]

        logger.debug(
            "Matched %d of %d entries (%d excluded) below %s",
            len(selected),
            len(entries),
            len(excluded),
            resolved,
        )
        return MatchResult(
            root=resolved,
            entries=tuple(deletion_order(selected)),
        )

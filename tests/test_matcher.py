"""Tests for rimraf.matcher."""

from pathlib import Path

import pytest

from rimraf import DirectoryNotFoundError, RimrafError
from rimraf.matcher import (
    MatchOptions,
    MatchResult,
    TreeMatcher,
    combine_with_root,
    escape_glob,
)
from rimraf.scanner import scan


def _execute(
    root: Path,
    includes: list[str] | None = None,
    excludes: list[str] | None = None,
    case_sensitive: bool = False,
) -> MatchResult:
    matcher = TreeMatcher(MatchOptions(case_sensitive=case_sensitive))
    matcher.add_includes(includes if includes is not None else ["**"])
    matcher.add_excludes(excludes or [])
    return matcher.execute(root)


def _selected(
    root: Path,
    includes: list[str] | None = None,
    excludes: list[str] | None = None,
    case_sensitive: bool = False,
) -> set[str]:
    result = _execute(root, includes, excludes, case_sensitive)
    return {path.relative_to(result.root).as_posix() for path in result.paths}


class TestExecute:
    def test_nonexistent_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(DirectoryNotFoundError, match="does not exist"):
            _execute(tmp_path / "missing")

    def test_file_root_raises(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(DirectoryNotFoundError):
            _execute(target)

    def test_not_found_is_user_facing(self) -> None:
        assert issubclass(DirectoryNotFoundError, RimrafError)

    def test_root_is_resolved(self, example_tree: Path) -> None:
        relative_root = example_tree / "sub" / ".."
        matcher = TreeMatcher()
        result = matcher.add_include("**").execute(relative_root)
        assert result.root == example_tree
        assert matcher.root == example_tree

    def test_end_to_end_example(self, example_tree: Path) -> None:
        result = _execute(example_tree)
        ordered = [p.relative_to(example_tree).as_posix() for p in result.paths]
        assert ordered == ["sub/b.txt", "a.txt", "sub"]

    def test_globstar_selects_every_entry(self, nested_tree: Path) -> None:
        everything = {e.path for e in scan(nested_tree)}
        result = _execute(nested_tree)
        assert set(result.paths) == everything

    def test_repeated_execution_is_stable(self, nested_tree: Path) -> None:
        assert _execute(nested_tree) == _execute(nested_tree)

    def test_results_lie_inside_root(self, nested_tree: Path) -> None:
        for includes in (["**"], ["/**"], ["../**"], ["../../*"]):
            result = _execute(nested_tree, includes)
            for path in result.paths:
                assert nested_tree in path.parents
                assert path != nested_tree

    def test_no_include_selects_nothing(self, nested_tree: Path) -> None:
        assert _execute(nested_tree, includes=[]).entries == ()

    def test_empty_pattern_selects_nothing(self, nested_tree: Path) -> None:
        assert _selected(nested_tree, includes=["", "/", ".."]) == set()

    def test_invalid_pattern_raises(self, nested_tree: Path) -> None:
        with pytest.raises(RimrafError, match="Invalid pattern"):
            _execute(nested_tree, includes=["dangling\\"])

    def test_root_with_glob_characters(self, tmp_path: Path) -> None:
        root = tmp_path.resolve() / "we[i]rd (1)"
        root.mkdir()
        (root / "x.txt").write_text("x")
        assert _selected(root) == {"x.txt"}


class TestIncludePatterns:
    def test_star_stays_within_one_segment(self, nested_tree: Path) -> None:
        assert _selected(nested_tree, includes=["*.tmp"]) == {"top.tmp"}

    def test_globstar_crosses_segments(self, nested_tree: Path) -> None:
        assert _selected(nested_tree, includes=["**/*.tmp"]) == {
            "top.tmp",
            "lower/foo.tmp",
            "upper/FOO.TMP",
        }

    def test_question_mark_and_class(self, nested_tree: Path) -> None:
        assert _selected(nested_tree, includes=["[ab]?"]) == {"ab"}

    def test_directory_pattern_selects_only_the_directory(
        self, nested_tree: Path
    ) -> None:
        assert _selected(nested_tree, includes=["a/b"]) == {"a/b"}

    def test_trailing_separator_is_ignored(self, nested_tree: Path) -> None:
        assert _selected(nested_tree, includes=["a/b/"]) == {"a/b"}

    def test_matching_directory_does_not_select_contents(
        self, tmp_path: Path
    ) -> None:
        root = tmp_path.resolve() / "r"
        (root / "x.tmp" / "inner").mkdir(parents=True)
        (root / "x.tmp" / "inner" / "keep.txt").write_text("keep")
        assert _selected(root, includes=["*.tmp"]) == {"x.tmp"}

    def test_trailing_globstar_selects_contents(self, nested_tree: Path) -> None:
        assert _selected(nested_tree, includes=["a/**"]) == {"a/b", "a/b/file.txt"}

    def test_relative_segments_are_normalized(self, nested_tree: Path) -> None:
        assert _selected(nested_tree, includes=["lower/../top.tmp"]) == {"top.tmp"}

    def test_multiple_includes_accumulate(self, nested_tree: Path) -> None:
        assert _selected(nested_tree, includes=["top.tmp", "ab/*"]) == {
            "top.tmp",
            "ab/keep.txt",
        }


class TestCaseSensitivity:
    def test_case_insensitive_by_default(self, nested_tree: Path) -> None:
        selected = _selected(nested_tree, includes=["*/*.tmp"])
        assert selected == {"lower/foo.tmp", "upper/FOO.TMP"}

    def test_case_sensitive_skips_other_case(self, nested_tree: Path) -> None:
        selected = _selected(nested_tree, includes=["*/*.tmp"], case_sensitive=True)
        assert selected == {"lower/foo.tmp"}

    def test_upper_case_pattern(self, nested_tree: Path) -> None:
        assert _selected(nested_tree, includes=["*/*.TMP"]) == {
            "lower/foo.tmp",
            "upper/FOO.TMP",
        }
        assert _selected(nested_tree, includes=["*/*.TMP"], case_sensitive=True) == {
            "upper/FOO.TMP",
        }


class TestExcludePatterns:
    def test_excluded_directory_and_contents_kept(self, nested_tree: Path) -> None:
        selected = _selected(nested_tree, excludes=["ab"])
        assert "ab" not in selected
        assert "ab/keep.txt" not in selected

    def test_sibling_with_substring_name_selected(self, nested_tree: Path) -> None:
        # "root/a" is a substring of "root/ab"; a plain substring test would
        # wrongly keep the whole "a" subtree.
        selected = _selected(nested_tree, excludes=["ab"])
        assert {"a", "a/b", "a/b/file.txt"} <= selected

    def test_ancestors_of_excluded_entry_are_kept(self, nested_tree: Path) -> None:
        selected = _selected(nested_tree, excludes=["a/b/file.txt"])
        assert "a/b/file.txt" not in selected
        assert "a/b" not in selected
        assert "a" not in selected
        assert {"ab", "ab/keep.txt"} <= selected

    def test_exclude_contents_keeps_directory(self, nested_tree: Path) -> None:
        selected = _selected(nested_tree, excludes=["ab/**"])
        assert "ab" not in selected
        assert "ab/keep.txt" not in selected

    def test_exclude_honours_case_setting(self, nested_tree: Path) -> None:
        insensitive = _selected(nested_tree, excludes=["**/*.tmp"])
        sensitive = _selected(nested_tree, excludes=["**/*.tmp"], case_sensitive=True)
        assert "upper/FOO.TMP" not in insensitive
        assert "upper/FOO.TMP" in sensitive

    def test_include_minus_exclude(self, nested_tree: Path) -> None:
        selected = _selected(
            nested_tree,
            includes=["**/*.tmp"],
            excludes=["lower"],
        )
        assert selected == {"top.tmp", "upper/FOO.TMP"}


class TestPatternStorage:
    def test_patterns_are_normalized_and_kept_in_order(self) -> None:
        matcher = TreeMatcher()
        matcher.add_include("./a//b").add_include("**").add_include("**")
        matcher.add_exclude("x/../y")
        assert matcher.include_patterns == ("a/b", "**", "**")
        assert matcher.exclude_patterns == ("y",)

    def test_root_is_unset_before_execute(self) -> None:
        assert TreeMatcher().root is None


class TestCombineWithRoot:
    def test_pattern_is_anchored_below_root(self) -> None:
        assert combine_with_root(Path("/data/x"), "**") == "/data/x/**"

    def test_leading_separator_cannot_escape_root(self) -> None:
        assert combine_with_root(Path("/data/x"), "/etc/*") == "/data/x/etc/*"

    def test_root_metacharacters_are_escaped(self) -> None:
        assert escape_glob("a[1]*?") == "a\\[1\\]\\*\\?"

"""Tests for rimraf.normalize."""

import pytest

from rimraf.normalize import normalize_pattern


class TestNormalizePattern:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            # duplicate separators
            ("a//b", "a/b"),
            ("sub///**", "sub/**"),
            # current-directory segments
            ("./a", "a"),
            ("a/./b", "a/b"),
            ("a/./", "a/"),
            (".", ""),
            # parent-directory segments
            ("a/b/../c", "a/c"),
            ("a/b/../../c", "c"),
            ("a/..", ""),
            ("..", ""),
            ("../x", "x"),
            ("/a/../../b", "/b"),
            # network-share style roots keep their leading pair
            ("//server/share/./x", "//server/share/x"),
        ],
    )
    def test_rewrites(self, pattern: str, expected: str) -> None:
        assert normalize_pattern(pattern) == expected

    @pytest.mark.parametrize(
        "pattern",
        ["**", "**/*.tmp", "build/", "..foo/bar", "a.b/c", "//server/share", ""],
    )
    def test_unchanged_pattern_is_returned_as_is(self, pattern: str) -> None:
        assert normalize_pattern(pattern) is pattern

    def test_glob_syntax_survives(self) -> None:
        assert normalize_pattern("./src//**/[ab]?.py") == "src/**/[ab]?.py"

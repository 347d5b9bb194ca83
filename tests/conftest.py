"""Shared fixtures for rimraf tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def example_tree(tmp_path: Path) -> Path:
    """Create the minimal end-to-end tree.

    Structure::

        root/
        ├── sub/
        │   └── b.txt
        └── a.txt
    """
    root = tmp_path.resolve() / "x"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_text("a")
    (root / "sub" / "b.txt").write_text("b")
    return root


@pytest.fixture
def nested_tree(tmp_path: Path) -> Path:
    """Tree with nesting, look-alike names and mixed-case extensions.

    Structure::

        root/
        ├── a/
        │   └── b/
        │       └── file.txt
        ├── ab/
        │   └── keep.txt
        ├── lower/
        │   └── foo.tmp
        ├── upper/
        │   └── FOO.TMP
        ├── .hidden
        └── top.tmp
    """
    root = tmp_path.resolve() / "root"
    (root / "a" / "b").mkdir(parents=True)
    (root / "a" / "b" / "file.txt").write_text("file")
    (root / "ab").mkdir()
    (root / "ab" / "keep.txt").write_text("keep")
    (root / "lower").mkdir()
    (root / "lower" / "foo.tmp").write_text("lower")
    (root / "upper").mkdir()
    (root / "upper" / "FOO.TMP").write_text("upper")
    (root / ".hidden").write_text("hidden")
    (root / "top.tmp").write_text("top")
    return root

"""Tests for the local file source."""

from __future__ import annotations

from pathlib import Path

import pytest

from semmap.sources import LocalFileSource
from tests._fixtures.repo_builder import RepoBuilder


def test_list_files_matches_extension_recursively(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "a.ts": "export class A {}",
            "src/b.ts": "export class B {}",
            "src/c.tsx": "export const C = 1;",
            "node_modules/lib/index.ts": "export {}",
            ".git/hooks/x.ts": "",
            "README.md": "# readme",
        }
    )
    source = LocalFileSource(repo_builder.path())

    assert source.list_files("**/*.ts") == ["a.ts", "src/b.ts"]
    assert source.list_files("src/**/*.tsx") == ["src/c.tsx"]
    assert source.list_files("missing/**/*.ts") == []


def test_read_file_accepts_relative_paths(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"pkg/mod.py": "VALUE = 1\n"})
    source = LocalFileSource(repo_builder.path())

    assert source.read_file("pkg/mod.py") == "VALUE = 1\n"
    with pytest.raises(FileNotFoundError):
        source.read_file("pkg/absent.py")


def test_source_rejects_missing_root(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        LocalFileSource(tmp_path / "nope")

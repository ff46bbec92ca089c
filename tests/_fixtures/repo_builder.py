"""Helper utilities for constructing temporary repositories in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping, Optional

from semmap.builder import SemanticMapBuilder, create_semantic_map_builder
from semmap.config import MapConfig
from semmap.sources import LocalFileSource
from semmap.store import SemanticMap


class RepoBuilder:
    """Utility for writing files into a throwaway repository and mapping it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the repository."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def builder(self, config: Optional[MapConfig] = None) -> SemanticMapBuilder:
        source = LocalFileSource(self.root)
        return create_semantic_map_builder(
            config=config, file_reader=source.read_file, file_lister=source.list_files
        )

    def build(self, config: Optional[MapConfig] = None) -> SemanticMap:
        """Return a freshly built map of the repository contents."""
        return self.builder(config).build(str(self.root))

    def path(self) -> Path:
        """Return the repository root path."""
        return self.root


class InMemorySource:
    """File reader and lister backed by a dict, with optional read failures."""

    def __init__(self, files: Mapping[str, str], failing: tuple[str, ...] = ()) -> None:
        self.files = {path: textwrap.dedent(text).lstrip("\n") for path, text in files.items()}
        self.failing = set(failing)
        self.patterns: list[str] = []

    def list_files(self, pattern: str) -> list[str]:
        self.patterns.append(pattern)
        suffix = pattern.rsplit("*", 1)[-1]
        prefix = pattern.split("**", 1)[0]
        return [path for path in self.files if path.endswith(suffix) and path.startswith(prefix)]

    def read_file(self, path: str) -> str:
        if path in self.failing:
            raise OSError(f"cannot read {path}")
        return self.files[path]


__all__ = ["InMemorySource", "RepoBuilder"]

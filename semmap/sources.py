"""File listing and reading for a repository checked out on local disk."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
}

class LocalFileSource:
    """Lists and reads files beneath ``root``.

    ``list_files`` understands the ``[base/]**/<name-glob>`` patterns the
    builder issues; any other pattern is matched against the whole relative
    path with :func:`fnmatch.fnmatchcase`.
    """

    def __init__(self, root: str | Path) -> None:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")
        self.root = root_path

    def list_files(self, pattern: str) -> List[str]:
        base, name_glob = _split_pattern(pattern)
        start = (self.root / base).resolve() if base else self.root
        if not start.is_dir():
            return []
        matches: List[str] = []
        for rel_path in self._iter_files(start):
            if name_glob is not None:
                if fnmatchcase(rel_path.rsplit("/", 1)[-1], name_glob):
                    matches.append(rel_path)
            elif fnmatchcase(rel_path, pattern):
                matches.append(rel_path)
        return sorted(matches)

    def read_file(self, path: str) -> str:
        target = Path(path)
        if not target.is_absolute():
            target = self.root / target
        return target.read_text(encoding="utf-8")

    def _iter_files(self, start: Path) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(start):
            dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
            current_dir = Path(dirpath)
            for filename in filenames:
                yield (current_dir / filename).relative_to(self.root).as_posix()


def _split_pattern(pattern: str) -> tuple[str, str | None]:
    """Split ``src/**/*.ts`` into ``("src", "*.ts")``."""
    normalized = pattern.replace("\\", "/")
    if normalized.startswith("./"):
        normalized = normalized[2:]
    if "**/" not in normalized:
        return "", None
    base, _, name_glob = normalized.partition("**/")
    base = base.rstrip("/")
    if base == ".":
        base = ""
    if "/" in name_glob:
        return base, None
    return base, name_glob


__all__ = ["LocalFileSource"]

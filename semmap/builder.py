"""Build orchestration: list, extract, derive and expose a semantic map."""

from __future__ import annotations

import os
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .analyzers import MapPhase, default_phases
from .config import MapConfig
from .extractor import Extractor
from .languages import Language, detect_language, extensions_for
from .logging import get_logger, log_build_event
from .models import (
    CodeElement,
    ImpactAnalysis,
    NavigationSuggestion,
    SemanticQuery,
    SemanticQueryResult,
)
from .query import DEFAULT_LIMIT, analyze_impact, navigation_suggestions, run_query
from .store import SemanticMap

FileReader = Callable[[str], str]
FileLister = Callable[[str], Iterable[str]]

MAP_START = "map:start"
MAP_FILE = "map:file"
MAP_RELATIONSHIPS = "map:relationships"
MAP_CLUSTERS = "map:clusters"
MAP_COMPLETE = "map:complete"
MAP_ERROR = "map:error"


class MapBuildError(RuntimeError):
    """Raised when a build fails outside the per-file extraction loop."""


@dataclass
class BuildEvent:
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[BuildEvent], None]


@dataclass
class _Extraction:
    path: str
    elements: List[CodeElement] = field(default_factory=list)
    error: Optional[str] = None


class SemanticMapBuilder:
    """Owns one semantic map and the pipeline that builds it.

    A build lists candidate files through the injected ``file_lister``, reads
    each through ``file_reader`` and extracts elements on a thread pool. The
    derivation phases only start once every extraction has been merged.
    Without both a reader and a lister there is nothing to map, so a build
    yields an empty map and reports no errors.
    """

    def __init__(
        self,
        config: Optional[MapConfig] = None,
        file_reader: Optional[FileReader] = None,
        file_lister: Optional[FileLister] = None,
        phases: Optional[Sequence[MapPhase]] = None,
    ) -> None:
        self.config = config or MapConfig()
        self._read = file_reader
        self._list = file_lister
        self._phases = list(phases) if phases is not None else default_phases()
        self._listeners: List[Listener] = []
        self._map: Optional[SemanticMap] = None
        self._build_lock = threading.Lock()
        self.logger = get_logger("builder")

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def build(self, root_path: str) -> SemanticMap:
        """Run a full build and return the new map.

        Per-file read and extraction failures are reported as ``map:error``
        events and skipped. Failures in the derivation phases abort the build
        with :class:`MapBuildError`.
        """
        if not self._build_lock.acquire(blocking=False):
            raise MapBuildError("A build is already in progress for this builder")
        try:
            return self._build(root_path)
        finally:
            self._build_lock.release()

    def _build(self, root_path: str) -> SemanticMap:
        config = self.config
        semantic_map = SemanticMap(id=f"map-{uuid.uuid4().hex[:12]}", root_path=root_path)
        semantic_map.metadata["config"] = config.as_dict()
        self._map = semantic_map
        self._emit(MAP_START, {"root_path": root_path, "config": config.as_dict()})

        paths = self._discover(config)
        self.logger.info("Discovered %d source files under %s", len(paths), root_path)

        extracted_files = 0
        for extraction in self._extract_all(paths, config):
            if extraction.error is not None:
                self._emit(MAP_ERROR, {"message": extraction.error, "path": extraction.path})
                continue
            semantic_map.add_elements(extraction.elements)
            extracted_files += 1
            self._emit(
                MAP_FILE,
                {"path": extraction.path, "element_count": len(extraction.elements)},
            )

        for phase in self._phases:
            if not phase.supports(config):
                self.logger.debug("Skipping phase %s", phase.name)
                continue
            try:
                produced = phase.run(semantic_map, config)
            except Exception as exc:
                message = f"Phase {phase.name} failed: {exc}"
                self._emit(MAP_ERROR, {"message": message})
                raise MapBuildError(message) from exc
            self.logger.debug("Phase %s produced %d items", phase.name, produced)
            if phase.name == "relationships":
                self._emit(MAP_RELATIONSHIPS, {"count": produced})
            elif phase.name == "clusters":
                self._emit(MAP_CLUSTERS, {"count": produced})

        stats = semantic_map.refresh_statistics(discovered_files=len(paths))
        self.logger.info(
            "Built map with %d elements and %d relationships from %d/%d files",
            stats.total_elements,
            stats.total_relationships,
            extracted_files,
            len(paths),
        )
        self._emit(MAP_COMPLETE, {"stats": asdict(stats)})
        return semantic_map

    def _discover(self, config: MapConfig) -> List[str]:
        if self._list is None or self._read is None:
            self.logger.debug("No file source configured; mapping nothing")
            return []
        seen: Dict[str, None] = {}
        for include in config.include_paths or ["."]:
            prefix = include.strip().rstrip("/")
            for extension in extensions_for(config.languages):
                pattern = f"**/*{extension}"
                if prefix not in ("", "."):
                    pattern = f"{prefix}/{pattern}"
                try:
                    listed = list(self._list(pattern))
                except Exception as exc:
                    self._emit(MAP_ERROR, {"message": str(exc), "path": pattern})
                    continue
                for path in listed:
                    seen.setdefault(path, None)

        paths: List[str] = []
        for path in seen:
            if any(excluded and excluded in path for excluded in config.exclude_paths):
                continue
            if detect_language(path, config.languages) is None:
                continue
            paths.append(path)
        return paths

    def _extract_all(self, paths: List[str], config: MapConfig) -> Iterable[_Extraction]:
        if not paths:
            return []
        extractors: Dict[Language, Extractor] = {}
        for path in paths:
            rules = detect_language(path, config.languages)
            if rules is not None and rules.language not in extractors:
                extractors[rules.language] = Extractor(rules)

        def _extract(path: str) -> _Extraction:
            rules = detect_language(path, config.languages)
            if rules is None:
                return _Extraction(path=path)
            try:
                content = self._read(path)
                elements = extractors[rules.language].extract(content, path)
            except Exception as exc:
                return _Extraction(path=path, error=str(exc))
            return _Extraction(path=path, elements=elements)

        workers = config.concurrency or min(32, (os.cpu_count() or 1) + 4)
        with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
            # map() yields in submission order, keeping insertion deterministic.
            return list(executor.map(_extract, paths))

    def get_map(self) -> Optional[SemanticMap]:
        return self._map

    def query(self, query: SemanticQuery) -> SemanticQueryResult:
        return run_query(self._map, query)

    def analyze_impact(self, element_id: str) -> Optional[ImpactAnalysis]:
        return analyze_impact(self._map, element_id)

    def get_navigation_suggestions(
        self, element_id: str, limit: int = DEFAULT_LIMIT
    ) -> List[NavigationSuggestion]:
        return navigation_suggestions(self._map, element_id, limit)

    def dispose(self) -> None:
        """Release the map's tables and detach every listener."""
        if self._map is not None:
            self._map.clear()
        self._map = None
        self._listeners.clear()

    def _emit(self, name: str, payload: Dict[str, Any]) -> None:
        log_build_event(self.logger, name, payload)
        event = BuildEvent(name=name, payload=payload)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                self.logger.exception("Listener failed while handling %s", name)


def create_semantic_map_builder(
    config: Optional[MapConfig] = None,
    file_reader: Optional[FileReader] = None,
    file_lister: Optional[FileLister] = None,
    phases: Optional[Sequence[MapPhase]] = None,
) -> SemanticMapBuilder:
    return SemanticMapBuilder(
        config=config, file_reader=file_reader, file_lister=file_lister, phases=phases
    )


__all__ = [
    "BuildEvent",
    "MAP_CLUSTERS",
    "MAP_COMPLETE",
    "MAP_ERROR",
    "MAP_FILE",
    "MAP_RELATIONSHIPS",
    "MAP_START",
    "MapBuildError",
    "SemanticMapBuilder",
    "create_semantic_map_builder",
]

"""Relationship inference over the complete element set."""

from __future__ import annotations

import posixpath
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from ..config import MapConfig
from ..extractor import strip_alias
from ..logging import get_logger
from ..models import CodeElement, ElementKind, RelationshipKind
from ..store import SemanticMap
from .base import MapPhase

FILE_IMPORT_STRENGTH = 1.0
ITEM_IMPORT_STRENGTH = 0.8
TYPE_USAGE_STRENGTH = 0.5

_PACKAGE_ENTRY_NAMES = frozenset({"index", "__init__"})


class RelationshipBuilder(MapPhase):
    """Links elements by containment, imports, inheritance and type usage.

    Resolution is by name across the whole map, so two classes sharing a
    name in different files both receive the edge.
    """

    name = "relationships"

    def __init__(self) -> None:
        self.logger = get_logger("relationships")

    def run(self, semantic_map: SemanticMap, config: MapConfig) -> int:
        before = len(semantic_map.relationships)
        elements = list(semantic_map.elements.values())
        by_kind: Dict[ElementKind, List[CodeElement]] = defaultdict(list)
        for element in elements:
            by_kind[element.kind].append(element)

        self._link_containment(semantic_map, elements)
        if config.analyze_imports:
            self._link_imports(semantic_map, by_kind)
        self._link_class_heritage(semantic_map, by_kind)
        self._link_interface_heritage(semantic_map, by_kind)
        if config.analyze_types:
            self._link_type_usage(semantic_map, by_kind)

        added = len(semantic_map.relationships) - before
        self.logger.debug("Inferred %d relationships", added)
        return added

    def _link_containment(self, semantic_map: SemanticMap, elements: Iterable[CodeElement]) -> None:
        files = semantic_map.file_elements()
        for element in elements:
            if element.kind == ElementKind.FILE:
                continue
            file_element = files.get(element.file_path)
            if file_element is None:
                continue
            semantic_map.add_relationship(RelationshipKind.CONTAINS, file_element.id, element.id)

    def _link_imports(
        self, semantic_map: SemanticMap, by_kind: Dict[ElementKind, List[CodeElement]]
    ) -> None:
        files = by_kind.get(ElementKind.FILE, [])
        named: Dict[str, List[CodeElement]] = defaultdict(list)
        for kind, members in by_kind.items():
            if kind == ElementKind.IMPORT:
                continue
            for element in members:
                named[element.name].append(element)

        for import_element in by_kind.get(ElementKind.IMPORT, []):
            module = import_element.metadata.get("module", import_element.name)
            if module:
                for file_element in files:
                    if file_element.file_path == import_element.file_path:
                        continue
                    if _resolves_to(module, file_element.file_path):
                        semantic_map.add_relationship(
                            RelationshipKind.IMPORTS,
                            import_element.id,
                            file_element.id,
                            strength=FILE_IMPORT_STRENGTH,
                            metadata={"source": import_element.metadata.get("source")},
                        )

            for item in import_element.metadata.get("items") or []:
                item_name = strip_alias(item)
                for target in named.get(item_name, []):
                    semantic_map.add_relationship(
                        RelationshipKind.IMPORTS,
                        import_element.id,
                        target.id,
                        strength=ITEM_IMPORT_STRENGTH,
                        metadata={"item": item_name},
                    )

    def _link_class_heritage(
        self, semantic_map: SemanticMap, by_kind: Dict[ElementKind, List[CodeElement]]
    ) -> None:
        classes = by_kind.get(ElementKind.CLASS, [])
        classes_by_name = _index_by_name(classes)
        interfaces_by_name = _index_by_name(by_kind.get(ElementKind.INTERFACE, []))

        for element in classes:
            superclass = element.metadata.get("extends")
            if superclass:
                for target in classes_by_name.get(superclass, []):
                    if target.id == element.id:
                        continue
                    semantic_map.add_relationship(
                        RelationshipKind.EXTENDS, element.id, target.id
                    )
            for interface_name in element.metadata.get("implements") or []:
                for target in interfaces_by_name.get(interface_name, []):
                    semantic_map.add_relationship(
                        RelationshipKind.IMPLEMENTS, element.id, target.id
                    )

    def _link_interface_heritage(
        self, semantic_map: SemanticMap, by_kind: Dict[ElementKind, List[CodeElement]]
    ) -> None:
        interfaces = by_kind.get(ElementKind.INTERFACE, [])
        interfaces_by_name = _index_by_name(interfaces)
        for element in interfaces:
            for parent in element.metadata.get("extends") or []:
                for target in interfaces_by_name.get(parent, []):
                    if target.id == element.id:
                        continue
                    semantic_map.add_relationship(
                        RelationshipKind.EXTENDS, element.id, target.id
                    )

    def _link_type_usage(
        self, semantic_map: SemanticMap, by_kind: Dict[ElementKind, List[CodeElement]]
    ) -> None:
        type_like = by_kind.get(ElementKind.TYPE, []) + by_kind.get(ElementKind.INTERFACE, [])
        callables = by_kind.get(ElementKind.FUNCTION, []) + by_kind.get(ElementKind.METHOD, [])
        for function in callables:
            signature = function.signature or ""
            if not signature:
                continue
            for type_element in type_like:
                if type_element.name in signature:
                    semantic_map.add_relationship(
                        RelationshipKind.USES,
                        function.id,
                        type_element.id,
                        strength=TYPE_USAGE_STRENGTH,
                        metadata={"heuristic": "signature"},
                    )


def _resolves_to(module: str, file_path: str) -> bool:
    """True when ``file_path`` names ``module`` on whole path segments.

    ``lib/foo`` resolves to ``src/lib/foo.ts`` and to package entry files
    such as ``lib/foo/index.ts`` or ``lib/foo/__init__.py``, never to
    ``src/mylib/foo.ts``.
    """
    stem = posixpath.splitext(file_path.replace("\\", "/"))[0]
    for candidate in (stem, *_package_dirs(stem)):
        if candidate == module or candidate.endswith("/" + module):
            return True
    return False


def _package_dirs(stem: str) -> Tuple[str, ...]:
    directory, basename = posixpath.split(stem)
    if basename in _PACKAGE_ENTRY_NAMES and directory:
        return (directory,)
    return ()


def _index_by_name(elements: Iterable[CodeElement]) -> Dict[str, List[CodeElement]]:
    index: Dict[str, List[CodeElement]] = defaultdict(list)
    for element in elements:
        index[element.name].append(element)
    return index


__all__ = ["RelationshipBuilder"]

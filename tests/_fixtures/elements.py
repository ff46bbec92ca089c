"""Builders for hand-assembled maps used by phase and query tests."""

from __future__ import annotations

from typing import Any, Dict, Optional

from semmap.models import CodeElement, ElementKind, SourceLocation, Visibility
from semmap.store import SemanticMap


def make_element(
    element_id: str,
    kind: ElementKind = ElementKind.FUNCTION,
    name: Optional[str] = None,
    file_path: str = "src/module.ts",
    *,
    metadata: Optional[Dict[str, Any]] = None,
    signature: Optional[str] = None,
    documentation: Optional[str] = None,
) -> CodeElement:
    name = name or element_id
    return CodeElement(
        id=element_id,
        kind=kind,
        name=name,
        qualified_name=f"{file_path}:{name}",
        file_path=file_path,
        location=SourceLocation(start_line=1, end_line=1),
        language="typescript",
        visibility=Visibility.PUBLIC,
        metadata=dict(metadata or {}),
        signature=signature,
        documentation=documentation,
    )


def map_of(*elements: CodeElement) -> SemanticMap:
    semantic_map = SemanticMap(id="map-test", root_path="/repo")
    semantic_map.add_elements(elements)
    return semantic_map


__all__ = ["make_element", "map_of"]

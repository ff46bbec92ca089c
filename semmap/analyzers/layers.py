"""Architectural layer classification from path conventions."""

from __future__ import annotations

import re
from typing import Dict, List, Pattern, Tuple

from ..config import MapConfig
from ..models import ArchitecturalLayer, RelationshipKind
from ..store import SemanticMap
from .base import MapPhase

LAYER_RULES: Tuple[Tuple[Pattern[str], str, int], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), name, level)
    for pattern, name, level in (
        (r"/ui/|/components/|/views/|/pages/", "Presentation", 1),
        (r"/api/|/routes/|/controllers/", "API", 2),
        (r"/services/|/business/", "Business Logic", 3),
        (r"/data/|/models/|/entities/", "Data", 4),
        (r"/utils/|/helpers/|/lib/", "Utilities", 5),
        (r"/config/|/settings/", "Configuration", 6),
        (r"/tests?/|/spec/", "Testing", 0),
    )
)


def layer_id(name: str) -> str:
    return "layer-" + name.lower().replace(" ", "-")


def classify_path(file_path: str) -> Tuple[str, int] | None:
    """Return ``(layer name, level)`` for the first rule matching the path."""
    normalised = "/" + file_path.replace("\\", "/").lstrip("/")
    for pattern, name, level in LAYER_RULES:
        if pattern.search(normalised):
            return name, level
    return None


class LayerIdentifier(MapPhase):
    """Assigns each element to at most one layer and links layers by imports."""

    name = "layers"

    def run(self, semantic_map: SemanticMap, config: MapConfig) -> int:
        layers: Dict[str, ArchitecturalLayer] = {}
        membership: Dict[str, str] = {}

        for element in semantic_map.elements.values():
            classified = classify_path(element.file_path)
            if classified is None:
                continue
            name, level = classified
            identifier = layer_id(name)
            layer = layers.get(identifier)
            if layer is None:
                layer = ArchitecturalLayer(
                    id=identifier,
                    name=name,
                    description=f"{name} layer",
                    level=level,
                )
                layers[identifier] = layer
            layer.elements.append(element.id)
            membership[element.id] = identifier

        for layer in layers.values():
            dependencies: List[str] = []
            for element_id in layer.elements:
                for relationship in semantic_map.outgoing(element_id):
                    if relationship.kind != RelationshipKind.IMPORTS:
                        continue
                    target_layer = membership.get(relationship.target_id)
                    if target_layer and target_layer != layer.id and target_layer not in dependencies:
                        dependencies.append(target_layer)
            layer.dependencies = dependencies

        semantic_map.layers = sorted(layers.values(), key=lambda item: item.level)
        return len(semantic_map.layers)


__all__ = ["LAYER_RULES", "LayerIdentifier", "classify_path", "layer_id"]

"""Recurring-vocabulary mining across element names."""

from __future__ import annotations

from ..config import MapConfig
from ..models import CodeConcept
from ..store import SemanticMap
from .base import MapPhase
from .utils import fragment_counts

MIN_FRAGMENT_LENGTH = 3
MIN_FREQUENCY = 3
MAX_CANDIDATES = 50
SATURATION_FREQUENCY = 20


class ConceptExtractor(MapPhase):
    name = "concepts"

    def run(self, semantic_map: SemanticMap, config: MapConfig) -> int:
        elements = list(semantic_map.elements.values())
        counts = fragment_counts(
            (element.name for element in elements), min_length=MIN_FRAGMENT_LENGTH
        )
        lowered = [(element.id, element.name.lower()) for element in elements]

        for fragment, frequency in counts.most_common(MAX_CANDIDATES):
            if frequency < MIN_FREQUENCY:
                continue
            concept = CodeConcept(
                id=f"concept-{fragment}",
                name=fragment,
                keywords=[fragment],
                related_elements=[element_id for element_id, name in lowered if fragment in name],
                frequency=frequency,
                importance=min(1.0, frequency / SATURATION_FREQUENCY),
            )
            semantic_map.concepts[concept.id] = concept
        return len(semantic_map.concepts)


__all__ = ["ConceptExtractor"]

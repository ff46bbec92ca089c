"""The semantic map aggregate and its indexed tables."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Dict, Iterable, List, Optional

from .models import (
    ArchitecturalLayer,
    CodeConcept,
    CodeElement,
    CodeRelationship,
    ElementKind,
    MapStatistics,
    RelationshipKind,
    SemanticCluster,
)


def relationship_id(source_id: str, kind: RelationshipKind, target_id: str) -> str:
    return f"{source_id}:{kind.value}:{target_id}"


@dataclass
class SemanticMap:
    """Owns every table of a built map.

    Elements and relationships are keyed by id. Adjacency lists are kept in
    step with the relationship table so traversals do not scan every edge.
    """

    id: str
    root_path: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    elements: Dict[str, CodeElement] = field(default_factory=dict)
    relationships: Dict[str, CodeRelationship] = field(default_factory=dict)
    clusters: Dict[str, SemanticCluster] = field(default_factory=dict)
    layers: List[ArchitecturalLayer] = field(default_factory=list)
    concepts: Dict[str, CodeConcept] = field(default_factory=dict)
    stats: MapStatistics = field(default_factory=MapStatistics)
    metadata: Dict[str, Any] = field(default_factory=dict)
    _outgoing: Dict[str, List[str]] = field(default_factory=lambda: defaultdict(list), repr=False)
    _incoming: Dict[str, List[str]] = field(default_factory=lambda: defaultdict(list), repr=False)

    def add_elements(self, elements: Iterable[CodeElement]) -> None:
        for element in elements:
            self.elements[element.id] = element

    def add_relationship(
        self,
        kind: RelationshipKind,
        source_id: str,
        target_id: str,
        *,
        strength: float = 1.0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[CodeRelationship]:
        """Insert an edge; re-adding the same source/kind/target replaces it.

        Returns ``None`` when either endpoint is not in the element table.
        """
        if source_id not in self.elements or target_id not in self.elements:
            return None
        rel_id = relationship_id(source_id, kind, target_id)
        relationship = CodeRelationship(
            id=rel_id,
            kind=kind,
            source_id=source_id,
            target_id=target_id,
            strength=max(0.0, min(1.0, strength)),
            metadata=dict(metadata or {}),
        )
        if rel_id not in self.relationships:
            self._outgoing[source_id].append(rel_id)
            self._incoming[target_id].append(rel_id)
        self.relationships[rel_id] = relationship
        return relationship

    def outgoing(self, element_id: str) -> List[CodeRelationship]:
        return [self.relationships[rel_id] for rel_id in self._outgoing.get(element_id, [])]

    def incoming(self, element_id: str) -> List[CodeRelationship]:
        return [self.relationships[rel_id] for rel_id in self._incoming.get(element_id, [])]

    def touching(self, element_id: str) -> List[CodeRelationship]:
        """Edges where the element is source or target, outgoing first."""
        seen = set()
        result: List[CodeRelationship] = []
        for relationship in self.outgoing(element_id) + self.incoming(element_id):
            if relationship.id in seen:
                continue
            seen.add(relationship.id)
            result.append(relationship)
        return result

    def file_elements(self) -> Dict[str, CodeElement]:
        """Map file path to its file element."""
        return {
            element.file_path: element
            for element in self.elements.values()
            if element.kind == ElementKind.FILE
        }

    def refresh_statistics(self, *, discovered_files: int | None = None) -> MapStatistics:
        element_counts = Counter(element.kind.value for element in self.elements.values())
        relationship_counts = Counter(rel.kind.value for rel in self.relationships.values())
        cluster_sizes = [len(cluster.elements) for cluster in self.clusters.values()]

        stats = MapStatistics(
            total_files=element_counts.get("file", 0),
            total_elements=len(self.elements),
            total_relationships=len(self.relationships),
            total_clusters=len(self.clusters),
            elements_by_type=dict(element_counts),
            relationships_by_type=dict(relationship_counts),
            average_cluster_size=(
                sum(cluster_sizes) / len(cluster_sizes) if cluster_sizes else 0.0
            ),
            coverage_percent=self.stats.coverage_percent,
        )
        if discovered_files is not None:
            stats.coverage_percent = (
                stats.total_files / discovered_files * 100.0 if discovered_files else 0.0
            )
        self.stats = stats
        self.updated_at = datetime.now(UTC)
        return stats

    def clear(self) -> None:
        """Release every table; the map is unusable afterwards."""
        self.elements.clear()
        self.relationships.clear()
        self.clusters.clear()
        self.layers.clear()
        self.concepts.clear()
        self._outgoing.clear()
        self._incoming.clear()


__all__ = ["SemanticMap", "relationship_id"]

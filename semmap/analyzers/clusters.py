"""Directory-based clustering refined by keyword similarity."""

from __future__ import annotations

import hashlib
import posixpath
from collections import defaultdict
from typing import Dict, List, MutableMapping, Sequence, Tuple

from ..config import MapConfig
from ..logging import get_logger
from ..models import ClusterCategory, CodeElement, ElementKind, SemanticCluster
from ..store import SemanticMap
from .base import MapPhase
from .utils import fragment_counts, jaccard

MAX_KEYWORDS = 10

# Checked in order; the first category with a keyword in the directory wins.
_CATEGORY_KEYWORDS: Tuple[Tuple[ClusterCategory, Tuple[str, ...]], ...] = (
    (ClusterCategory.TESTING, ("test", "spec")),
    (ClusterCategory.CONFIGURATION, ("config", "settings")),
    (ClusterCategory.UTILITY, ("util", "helper", "lib")),
    (ClusterCategory.DATA_MODEL, ("model", "type", "entity")),
    (ClusterCategory.API, ("api", "route", "endpoint")),
    (ClusterCategory.UI, ("ui", "component", "view")),
    (ClusterCategory.BUSINESS_LOGIC, ("service", "business")),
)


class ClusterBuilder(MapPhase):
    """Groups elements by directory, then merges clusters with similar vocabulary."""

    name = "clusters"

    def __init__(self) -> None:
        self.logger = get_logger("clusters")

    def supports(self, config: MapConfig) -> bool:
        return config.build_clusters

    def run(self, semantic_map: SemanticMap, config: MapConfig) -> int:
        groups: Dict[str, List[CodeElement]] = defaultdict(list)
        for element in semantic_map.elements.values():
            if element.kind in (ElementKind.IMPORT, ElementKind.FILE):
                continue
            groups[posixpath.dirname(element.file_path)].append(element)

        for directory, members in groups.items():
            if len(members) < config.min_cluster_size:
                continue
            cluster = build_cluster(directory, members)
            semantic_map.clusters[cluster.id] = cluster

        merged = merge_similar_clusters(semantic_map.clusters, config.similarity_threshold)
        if merged:
            self.logger.debug("Merged %d similar clusters", merged)
        return len(semantic_map.clusters)


def build_cluster(directory: str, members: Sequence[CodeElement]) -> SemanticCluster:
    counts = fragment_counts(element.name for element in members)
    total = sum(counts.values())
    unique = len(counts)
    coherence = min(1.0, total / unique / len(members)) if unique and members else 0.0
    label = directory or "."
    digest = hashlib.sha1(label.encode("utf-8")).hexdigest()[:12]
    return SemanticCluster(
        id=f"cluster-{digest}",
        name=posixpath.basename(label) or label,
        description=f"Elements defined in {label}",
        category=infer_category(directory),
        elements=[element.id for element in members],
        coherence=coherence,
        keywords=[keyword for keyword, _ in counts.most_common(MAX_KEYWORDS)],
    )


def infer_category(directory: str) -> ClusterCategory:
    lowered = directory.lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return ClusterCategory.MODULE


def merge_similar_clusters(
    clusters: MutableMapping[str, SemanticCluster], threshold: float
) -> int:
    """Absorb each later cluster into an earlier one whose keywords overlap.

    One pass over the pairs in insertion order; absorbed element ids are
    appended without de-duplication. Returns the number of clusters removed.
    """
    ordered = list(clusters.values())
    removed: set[str] = set()
    for index, first in enumerate(ordered):
        if first.id in removed:
            continue
        for second in ordered[index + 1 :]:
            if second.id in removed:
                continue
            if jaccard(first.keywords, second.keywords) > threshold:
                first.elements.extend(second.elements)
                for keyword in second.keywords:
                    if keyword not in first.keywords:
                        first.keywords.append(keyword)
                removed.add(second.id)
                clusters.pop(second.id, None)
    return len(removed)


__all__ = ["ClusterBuilder", "build_cluster", "infer_category", "merge_similar_clusters"]

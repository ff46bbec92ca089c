"""Filtering, ranking and related-element expansion for map queries."""

from __future__ import annotations

import time
from typing import Dict, List, Optional

from ..models import CodeElement, CodeRelationship, SemanticQuery, SemanticQueryResult
from ..store import SemanticMap
from .traversal import Direction, breadth_first

EXACT_NAME_SCORE = 1.0
NAME_SUBSTRING_SCORE = 0.5
TEXT_SUBSTRING_SCORE = 0.2


def run_query(semantic_map: Optional[SemanticMap], query: SemanticQuery) -> SemanticQueryResult:
    """Apply the query filters in a fixed order and return the surviving elements.

    Kind, path and text filters narrow the full element list; cluster and
    concept filters intersect with their member ids; related expansion then
    appends neighbours regardless of the earlier filters, and truncation to
    ``max_results`` happens last.
    """
    started = time.perf_counter()
    result = SemanticQueryResult()
    if semantic_map is None:
        result.query_time = (time.perf_counter() - started) * 1000.0
        return result

    elements: List[CodeElement] = list(semantic_map.elements.values())
    scores: Dict[str, float] = {}

    if query.element_types:
        wanted = set(query.element_types)
        elements = [element for element in elements if element.kind in wanted]

    if query.file_paths:
        elements = [
            element
            for element in elements
            if any(fragment in element.file_path for fragment in query.file_paths)
        ]

    terms = query.text.lower().split() if query.text else []
    if terms:
        elements, scores = _rank_by_text(elements, terms)

    if query.clusters:
        matched = [
            semantic_map.clusters[cluster_id]
            for cluster_id in query.clusters
            if cluster_id in semantic_map.clusters
        ]
        members = {element_id for cluster in matched for element_id in cluster.elements}
        elements = [element for element in elements if element.id in members]
        result.clusters = matched

    if query.concepts:
        matched_concepts = [
            semantic_map.concepts[concept_id]
            for concept_id in query.concepts
            if concept_id in semantic_map.concepts
        ]
        members = {
            element_id for concept in matched_concepts for element_id in concept.related_elements
        }
        elements = [element for element in elements if element.id in members]
        result.concepts = matched_concepts

    if query.include_related and query.related_depth > 0:
        elements, result.relationships = _expand_related(
            semantic_map, elements, query.related_depth
        )

    if query.max_results is not None:
        elements = elements[: max(0, query.max_results)]

    default_score = 0.0 if terms else 1.0
    result.elements = elements
    result.relevance_scores = {
        element.id: scores.get(element.id, default_score) for element in elements
    }
    result.query_time = (time.perf_counter() - started) * 1000.0
    return result


def score_element(element: CodeElement, terms: List[str]) -> float:
    name = element.name.lower()
    combined = " ".join(
        part.lower()
        for part in (element.name, element.qualified_name, element.documentation or "")
        if part
    )
    score = 0.0
    for term in terms:
        if name == term:
            score += EXACT_NAME_SCORE
        elif term in name:
            score += NAME_SUBSTRING_SCORE
        elif term in combined:
            score += TEXT_SUBSTRING_SCORE
    return score


def _rank_by_text(
    elements: List[CodeElement], terms: List[str]
) -> tuple[List[CodeElement], Dict[str, float]]:
    scores: Dict[str, float] = {}
    kept: List[CodeElement] = []
    for element in elements:
        score = score_element(element, terms)
        if score > 0:
            scores[element.id] = score
            kept.append(element)
    kept.sort(key=lambda element: scores[element.id], reverse=True)
    return kept, scores


def _expand_related(
    semantic_map: SemanticMap, elements: List[CodeElement], depth: int
) -> tuple[List[CodeElement], List[CodeRelationship]]:
    expanded = list(elements)
    relationships: Dict[str, CodeRelationship] = {}
    for step in breadth_first(
        semantic_map,
        [element.id for element in elements],
        direction=Direction.BOTH,
        max_depth=depth,
    ):
        relationships.setdefault(step.relationship.id, step.relationship)
        if step.discovered:
            reached = semantic_map.elements.get(step.node_id)
            if reached is not None:
                expanded.append(reached)
    return expanded, list(relationships.values())


__all__ = ["run_query", "score_element"]

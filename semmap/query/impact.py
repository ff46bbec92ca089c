"""Change-impact analysis by backwards dependency reachability."""

from __future__ import annotations

from typing import List, Optional

from ..models import CodeElement, ElementKind, ImpactAnalysis, RelationshipKind, RiskLevel
from ..store import SemanticMap
from .traversal import Direction, breadth_first

DEPENDENCY_KINDS = frozenset(
    {
        RelationshipKind.IMPORTS,
        RelationshipKind.CALLS,
        RelationshipKind.IMPLEMENTS,
        RelationshipKind.EXTENDS,
        RelationshipKind.USES,
        RelationshipKind.TESTS,
        RelationshipKind.DEPENDS_ON,
        RelationshipKind.OVERRIDES,
        RelationshipKind.REFERENCES,
        RelationshipKind.INSTANTIATES,
    }
)

BREAKING_CHANGE_THRESHOLD = 5


def risk_for(affected_count: int) -> RiskLevel:
    if affected_count > 20:
        return RiskLevel.CRITICAL
    if affected_count > 10:
        return RiskLevel.HIGH
    if affected_count > 3:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def analyze_impact(semantic_map: Optional[SemanticMap], element_id: str) -> Optional[ImpactAnalysis]:
    """Return what depends on ``element_id``, or ``None`` for unknown ids."""
    if semantic_map is None:
        return None
    changed = semantic_map.elements.get(element_id)
    if changed is None:
        return None

    analysis = ImpactAnalysis(changed_element=changed)
    for step in breadth_first(
        semantic_map,
        [element_id],
        direction=Direction.INCOMING,
        kinds=DEPENDENCY_KINDS,
    ):
        if not step.discovered:
            continue
        dependent = semantic_map.elements.get(step.node_id)
        if dependent is None:
            continue
        if dependent.kind == ElementKind.TEST:
            analysis.affected_tests.append(dependent)
        elif step.depth == 1:
            analysis.directly_affected.append(dependent)
        else:
            analysis.transitively_affected.append(dependent)

    affected = len(analysis.directly_affected) + len(analysis.transitively_affected)
    analysis.risk_level = risk_for(affected)
    analysis.recommendations = _recommendations(changed, analysis, affected)
    return analysis


def _recommendations(changed: CodeElement, analysis: ImpactAnalysis, affected: int) -> List[str]:
    recommendations: List[str] = []
    if analysis.affected_tests:
        recommendations.append(
            f"Run {len(analysis.affected_tests)} affected test(s) before merging changes to {changed.name}"
        )
    if len(analysis.directly_affected) > BREAKING_CHANGE_THRESHOLD:
        recommendations.append(
            f"Document breaking changes: {len(analysis.directly_affected)} elements depend directly on {changed.name}"
        )
    if analysis.risk_level == RiskLevel.CRITICAL:
        recommendations.append(
            f"Plan an incremental rollout behind feature flags; {affected} elements are affected"
        )
    return recommendations


__all__ = ["DEPENDENCY_KINDS", "analyze_impact", "risk_for"]

"""Ranking of an element's direct relationships for "go to related"."""

from __future__ import annotations

from typing import List, Optional

from ..models import NavigationSuggestion
from ..store import SemanticMap

DEFAULT_LIMIT = 5


def navigation_suggestions(
    semantic_map: Optional[SemanticMap], element_id: str, limit: int = DEFAULT_LIMIT
) -> List[NavigationSuggestion]:
    if semantic_map is None:
        return []
    element = semantic_map.elements.get(element_id)
    if element is None:
        return []

    suggestions: List[NavigationSuggestion] = []
    for relationship in semantic_map.touching(element_id):
        outgoing = relationship.source_id == element_id
        other_id = relationship.target_id if outgoing else relationship.source_id
        other = semantic_map.elements.get(other_id)
        if other is None:
            continue
        verb = relationship.kind.value.replace("_", " ")
        if outgoing:
            reason = f"{element.name} {verb} {other.name}"
        else:
            reason = f"{other.name} {verb} {element.name}"
        suggestions.append(
            NavigationSuggestion(
                from_element=element,
                to_element=other,
                relationship=relationship,
                reason=reason,
                relevance=relationship.strength,
            )
        )

    suggestions.sort(key=lambda suggestion: suggestion.relevance, reverse=True)
    return suggestions[: max(0, limit)]


__all__ = ["DEFAULT_LIMIT", "navigation_suggestions"]

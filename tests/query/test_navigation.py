"""Tests for navigation suggestions."""

from __future__ import annotations

from semmap.models import ElementKind, RelationshipKind
from semmap.query import navigation_suggestions
from tests._fixtures.elements import make_element, map_of


def _sample_map():  # type: ignore[no-untyped-def]
    semantic_map = map_of(
        make_element("base", ElementKind.CLASS, "Base"),
        make_element("child", ElementKind.CLASS, "Child"),
        make_element("id", ElementKind.TYPE, "Id"),
        make_element("user", ElementKind.FUNCTION, "loadUser"),
    )
    semantic_map.add_relationship(RelationshipKind.EXTENDS, "child", "base")
    semantic_map.add_relationship(RelationshipKind.USES, "base", "id", strength=0.5)
    semantic_map.add_relationship(RelationshipKind.DEPENDS_ON, "user", "base", strength=0.8)
    return semantic_map


def test_suggestions_are_ranked_by_strength_with_readable_reasons() -> None:
    suggestions = navigation_suggestions(_sample_map(), "base")

    assert [s.to_element.id for s in suggestions] == ["child", "user", "id"]
    assert [s.reason for s in suggestions] == [
        "Child extends Base",
        "loadUser depends on Base",
        "Base uses Id",
    ]
    assert [s.relevance for s in suggestions] == [1.0, 0.8, 0.5]
    assert all(s.from_element.id == "base" for s in suggestions)


def test_limit_truncates() -> None:
    suggestions = navigation_suggestions(_sample_map(), "base", limit=1)

    assert [s.to_element.id for s in suggestions] == ["child"]
    assert navigation_suggestions(_sample_map(), "base", limit=0) == []


def test_unknown_element_has_no_suggestions() -> None:
    assert navigation_suggestions(_sample_map(), "missing") == []
    assert navigation_suggestions(None, "base") == []

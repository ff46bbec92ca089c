"""Tests for concept extraction."""

from __future__ import annotations

import pytest

from semmap.analyzers.concepts import ConceptExtractor
from semmap.analyzers.utils import fragment_counts, jaccard, split_name
from semmap.config import MapConfig
from semmap.models import ElementKind
from tests._fixtures.elements import make_element, map_of


def test_split_name_handles_mixed_conventions() -> None:
    assert split_name("getHTTPResponse_code") == ["get", "http", "response", "code"]
    assert split_name("user-service.ts") == ["user", "service", "ts"]
    assert split_name("") == []


def test_fragment_counts_and_jaccard() -> None:
    counts = fragment_counts(["getUser", "setUser", "id"], min_length=3)

    assert counts == {"get": 1, "user": 2, "set": 1}
    assert jaccard(["a", "b"], ["b", "c"]) == pytest.approx(1 / 3)
    assert jaccard([], []) == 0.0


def test_recurring_fragments_become_concepts() -> None:
    semantic_map = map_of(
        make_element("c1", ElementKind.CLASS, "UserService"),
        make_element("c2", ElementKind.CLASS, "UserRepository"),
        make_element("f1", ElementKind.FUNCTION, "createUser"),
        make_element("f2", ElementKind.FUNCTION, "getId"),
        make_element("f3", ElementKind.FUNCTION, "idle"),
    )

    count = ConceptExtractor().run(semantic_map, MapConfig())

    assert count == 1
    concept = semantic_map.concepts["concept-user"]
    assert concept.name == "user"
    assert concept.keywords == ["user"]
    assert concept.frequency == 3
    assert concept.related_elements == ["c1", "c2", "f1"]
    assert concept.importance == pytest.approx(0.15)


def test_importance_saturates() -> None:
    elements = [
        make_element(f"f{index}", ElementKind.FUNCTION, "loadOrderItem") for index in range(25)
    ]
    semantic_map = map_of(*elements)

    ConceptExtractor().run(semantic_map, MapConfig())

    assert semantic_map.concepts["concept-order"].importance == pytest.approx(1.0)
    assert semantic_map.concepts["concept-load"].frequency == 25

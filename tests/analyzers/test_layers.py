"""Tests for architectural layer classification."""

from __future__ import annotations

import pytest

from semmap.analyzers.layers import LayerIdentifier, classify_path, layer_id
from semmap.config import MapConfig
from semmap.models import ElementKind, RelationshipKind
from tests._fixtures.elements import make_element, map_of


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("src/components/Button.tsx", ("Presentation", 1)),
        ("api/users.ts", ("API", 2)),
        ("src/Controllers/user.ts", ("API", 2)),
        ("src/services/billing.ts", ("Business Logic", 3)),
        ("src/models/user.py", ("Data", 4)),
        ("pkg/helpers/strings.go", ("Utilities", 5)),
        ("app/settings/base.py", ("Configuration", 6)),
        ("tests/test_app.py", ("Testing", 0)),
        ("src/spec/app.spec.ts", ("Testing", 0)),
        ("src/main.ts", None),
    ],
)
def test_classify_path(path: str, expected: tuple[str, int] | None) -> None:
    assert classify_path(path) == expected


def test_first_matching_rule_wins() -> None:
    assert classify_path("src/api/models/user.ts") == ("API", 2)


def test_layers_collect_elements_and_import_dependencies() -> None:
    semantic_map = map_of(
        make_element("imp-api", ElementKind.IMPORT, "services/billing", "src/api/billing.ts"),
        make_element("fn-api", ElementKind.FUNCTION, "handle", "src/api/billing.ts"),
        make_element("fn-svc", ElementKind.FUNCTION, "charge", "src/services/billing.ts"),
        make_element("imp-svc", ElementKind.IMPORT, "api/billing", "src/services/billing.ts"),
        make_element("fn-main", ElementKind.FUNCTION, "main", "src/main.ts"),
    )
    semantic_map.add_relationship(RelationshipKind.IMPORTS, "imp-api", "fn-svc")
    semantic_map.add_relationship(RelationshipKind.IMPORTS, "imp-svc", "fn-svc")
    semantic_map.add_relationship(RelationshipKind.CALLS, "fn-svc", "fn-api")

    count = LayerIdentifier().run(semantic_map, MapConfig())

    assert count == 2
    api, business = semantic_map.layers
    assert (api.id, api.level) == (layer_id("API"), 2)
    assert api.elements == ["imp-api", "fn-api"]
    assert api.dependencies == [layer_id("Business Logic")]
    assert business.id == "layer-business-logic"
    assert business.dependencies == []
    assert "fn-main" not in api.elements + business.elements


def test_no_layers_when_nothing_matches() -> None:
    semantic_map = map_of(make_element("fn", file_path="src/main.ts"))

    assert LayerIdentifier().run(semantic_map, MapConfig()) == 0
    assert semantic_map.layers == []


def test_element_joins_only_its_first_matching_layer() -> None:
    semantic_map = map_of(make_element("fn-user", file_path="src/api/models/user.ts"))

    LayerIdentifier().run(semantic_map, MapConfig())

    assert [(layer.name, layer.elements) for layer in semantic_map.layers] == [
        ("API", ["fn-user"])
    ]
